"""
Export tabellari: riepilogo fatture (CSV allegato ai PDF), righe BMD e
qualsiasi DataFrame in formato XLSX.
"""

import io
from typing import Iterable

import pandas as pd

from stayledger.core.models import AccountingRow, Invoice
from stayledger.core.tax import format_decimal

INVOICE_SUMMARY_COLUMNS = [
    "Invoice Number", "Invoice Date", "Reservation ID", "Guest Name",
    "Check-in Date", "Check-out Date", "Nights", "Net Amount", "VAT Amount",
    "Gross Amount", "City Tax Amount", "Total Amount", "Currency",
]


def invoices_dataframe(invoices: Iterable[Invoice]) -> pd.DataFrame:
    rows = [
        [
            inv.invoice_number,
            inv.invoice_date,
            inv.reservation_id,
            inv.guest_name,
            inv.check_in_date,
            inv.check_out_date,
            inv.nights,
            format_decimal(inv.amounts.net),
            format_decimal(inv.amounts.vat),
            format_decimal(inv.amounts.gross),
            format_decimal(inv.amounts.city_tax),
            format_decimal(inv.amounts.total if inv.amounts.total is not None else inv.amounts.gross),
            inv.currency,
        ]
        for inv in invoices
    ]
    return pd.DataFrame(rows, columns=INVOICE_SUMMARY_COLUMNS)


def invoice_summary_csv(invoices: Iterable[Invoice]) -> str:
    """CSV con una riga per fattura, separatore ','."""
    return invoices_dataframe(invoices).to_csv(index=False, lineterminator="\n")


def accounting_dataframe(rows: Iterable[AccountingRow]) -> pd.DataFrame:
    """Righe BMD come tabella (colonne con i nomi dell'header BMD)."""
    return pd.DataFrame(
        [[r.account, r.voucher_number, r.voucher_date, r.symbol, r.amount, r.tax_amount, r.text]
         for r in rows],
        columns=["konto", "belegnr", "belegdat", "symbol", "betrag", "steuer", "text"],
    )


def df_to_excel_bytes(df: pd.DataFrame, sheet_name: str = "Dati") -> bytes:
    """Converte DataFrame in bytes XLSX per il download."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buf.getvalue()
