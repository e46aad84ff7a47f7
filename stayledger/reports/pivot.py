"""
Riepiloghi dalle prenotazioni normalizzate.

Produce DataFrame pronti per la visualizzazione o l'export Excel:
  - elenco prenotazioni con mese di checkout
  - pivot mese × piattaforma (lordo, notti, prenotazioni)
  - riepilogo per proprietà
"""

from typing import Iterable

import pandas as pd

from stayledger.config import SOURCE_TAGS
from stayledger.core.models import UnifiedReservation


def reservations_df(reservations: Iterable[UnifiedReservation]) -> pd.DataFrame:
    """Una riga per prenotazione; anno_mese dal checkout."""
    rows = [
        {
            "anno_mese": r.departure_date[:7] if r.departure_date else "N/D",
            "proprieta": r.property_code or r.property_name or "N/D",
            "piattaforma": SOURCE_TAGS.get(r.source, r.source),
            "ospite": r.booker_name,
            "check_in": r.arrival_date,
            "check_out": r.departure_date,
            "notti": r.nights or 0,
            "lordo": r.gross_amount,
            "valuta": r.currency,
            "codice": r.reservation_number,
        }
        for r in reservations
    ]
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows)
    df["lordo"] = pd.to_numeric(df["lordo"], errors="coerce").fillna(0)
    df["notti"] = pd.to_numeric(df["notti"], errors="coerce").fillna(0).astype(int)
    return df


def pivot_by_source_month(df_bookings: pd.DataFrame) -> pd.DataFrame:
    """Pivot: mese × piattaforma, lordo e notti, con totali."""
    if df_bookings.empty:
        return pd.DataFrame()

    pivot = df_bookings.pivot_table(
        values=["lordo", "notti"],
        index="anno_mese",
        columns="piattaforma",
        aggfunc="sum",
        fill_value=0,
        margins=True,
        margins_name="TOTALE",
    )
    return pivot


def summary_by_property(df_bookings: pd.DataFrame) -> pd.DataFrame:
    if df_bookings.empty:
        return pd.DataFrame()

    summary = df_bookings.groupby("proprieta").agg(
        prenotazioni=("codice", "count"),
        lordo_totale=("lordo", "sum"),
        notti_totali=("notti", "sum"),
    ).reset_index()
    summary["lordo_totale"] = summary["lordo_totale"].round(2)
    return summary


def bookings_list(df_bookings: pd.DataFrame) -> pd.DataFrame:
    """Lista prenotazioni per visualizzazione tabellare, mesi recenti in alto."""
    if df_bookings.empty:
        return pd.DataFrame()

    cols = [c for c in ["anno_mese", "proprieta", "piattaforma", "ospite",
                        "check_in", "check_out", "notti", "lordo", "codice"]
            if c in df_bookings.columns]
    return df_bookings[cols].sort_values("anno_mese", ascending=False, kind="stable")
