import io
from dataclasses import replace

import pandas as pd

from stayledger.core.accounting import build_accounting_rows
from stayledger.core.invoices import build_invoices
from stayledger.core.models import AIRBNB
from stayledger.reports.export import (
    INVOICE_SUMMARY_COLUMNS,
    accounting_dataframe,
    df_to_excel_bytes,
    invoice_summary_csv,
    invoices_dataframe,
)
from stayledger.reports.pivot import (
    bookings_list,
    pivot_by_source_month,
    reservations_df,
    summary_by_property,
)


def test_invoice_summary_csv(reservation, margot):
    batch = build_invoices([reservation], margot)
    lines = invoice_summary_csv(batch.invoices).strip().split("\n")

    assert lines[0] == ",".join(INVOICE_SUMMARY_COLUMNS)
    assert lines[1] == (
        "KLIE-2025-001,2025-07-02,4123456789,Jane Doe,2025-06-28,2025-07-02,4,"
        "100.00,10.00,110.00,3.52,113.52,EUR"
    )


def test_invoice_summary_without_invoices():
    df = invoices_dataframe([])
    assert df.empty
    assert list(df.columns) == INVOICE_SUMMARY_COLUMNS


def test_accounting_dataframe(reservation):
    df = accounting_dataframe(build_accounting_rows([reservation], 2251))
    assert list(df["konto"]) == ["200000", "8001", "8003"]
    assert list(df["betrag"]) == ["110.00", "-97.17", "-3.11"]


def test_excel_export_reads_back(reservation, margot):
    df = invoices_dataframe(build_invoices([reservation], margot).invoices)
    data = df_to_excel_bytes(df)

    assert data[:2] == b"PK"
    back = pd.read_excel(io.BytesIO(data), sheet_name="Dati")
    assert list(back.columns) == INVOICE_SUMMARY_COLUMNS
    assert back.loc[0, "Guest Name"] == "Jane Doe"


def _sample(reservation):
    return [
        reservation,
        replace(reservation, source=AIRBNB, gross_amount=200.0, nights=2),
        replace(reservation, departure_date="2025-08-03", gross_amount=50.0, nights=1, reservation_number="1"),
    ]


def test_pivot_by_source_month(reservation):
    pivot = pivot_by_source_month(reservations_df(_sample(reservation)))

    assert pivot.loc["2025-07", ("lordo", "Booking.com")] == 110.0
    assert pivot.loc["2025-07", ("lordo", "AirBnB")] == 200.0
    assert pivot.loc["2025-08", ("notti", "Booking.com")] == 1
    assert "TOTALE" in pivot.index


def test_summary_by_property(reservation):
    summary = summary_by_property(reservations_df(_sample(reservation)))
    row = summary[summary["proprieta"] == "KLIE"].iloc[0]
    assert row["prenotazioni"] == 3
    assert row["lordo_totale"] == 360.0


def test_bookings_list_latest_month_first(reservation):
    listed = bookings_list(reservations_df(_sample(reservation)))
    assert list(listed["anno_mese"]) == ["2025-08", "2025-07", "2025-07"]


def test_empty_reports():
    df = reservations_df([])
    assert df.empty
    assert pivot_by_source_month(df).empty
    assert summary_by_property(df).empty
    assert bookings_list(df).empty
