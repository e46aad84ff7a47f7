"""
Punti d'ingresso: file caricati → prenotazioni unificate.

  parse_reservation_export        un export di Booking (prenotazioni o payout)
                                  oppure di Airbnb, dialetto riconosciuto
                                  dall'header se non indicato
  parse_ledger_and_reservations   lista BMD + export prenotazioni, abbinati
  column_mapping_report           diagnostica: come verrebbero lette le colonne

Il risultato passa poi a generate_accounting_csv (export BMD) oppure a
build_invoices (fatture).
"""

import logging
from typing import Dict, Optional, Union

from stayledger.config import (
    AIRBNB_COLUMNS,
    BOOKING_PAYOUT_COLUMNS,
    BOOKING_PAYOUT_OPTIONAL_COLUMNS,
    BOOKING_RESERVATION_COLUMNS,
    RECONCILIATION_DEFAULT_PROPERTY,
)
from stayledger.core.headers import find_column, map_headers, unmapped_headers
from stayledger.core.matcher import match_entries
from stayledger.core.models import ParseResult
from stayledger.core.tokenizer import CSVStructureError, read_header, tokenize_csv
from stayledger.parsers.airbnb import parse_airbnb_csv
from stayledger.parsers.booking_csv import parse_booking_csv
from stayledger.parsers.booking_payout import parse_payout_csv
from stayledger.parsers.ledger import parse_ledger, parse_reconciliation_reservations

logger = logging.getLogger(__name__)

Source = Union[bytes, str]

BOOKING_RESERVATIONS = "BookingReservations"
BOOKING_PAYOUT = "BookingPayout"
AIRBNB_EXPORT = "Airbnb"
DIALECTS = (BOOKING_RESERVATIONS, BOOKING_PAYOUT, AIRBNB_EXPORT)

_DIALECT_COLUMNS = {
    BOOKING_RESERVATIONS: BOOKING_RESERVATION_COLUMNS,
    BOOKING_PAYOUT: {**BOOKING_PAYOUT_COLUMNS, **BOOKING_PAYOUT_OPTIONAL_COLUMNS},
    AIRBNB_EXPORT: AIRBNB_COLUMNS,
}


def detect_dialect(data: Source) -> str:
    """
    Riconosce il tipo di export dall'header:
      Reference number + Payout ID → payout Booking
      Confirmation code            → Airbnb
      altrimenti                   → export prenotazioni Booking
    """
    header = read_header(data)
    if find_column(header, ["Reference number"]) is not None and find_column(header, ["Payout ID"]) is not None:
        return BOOKING_PAYOUT
    if find_column(header, ["Confirmation code"]) is not None:
        return AIRBNB_EXPORT
    return BOOKING_RESERVATIONS


def parse_reservation_export(data: Source, dialect: Optional[str] = None,
                             target_month: Optional[str] = None) -> ParseResult:
    """
    target_month ("YYYY-MM") vale solo per il payout Booking.

    Raises:
        CSVStructureError per errori sul file intero (righe insufficienti,
        colonne obbligatorie mancanti).
    """
    if dialect is None:
        dialect = detect_dialect(data)
        logger.info("Formato riconosciuto: %s", dialect)

    if dialect == BOOKING_PAYOUT:
        return parse_payout_csv(data, target_month=target_month)
    if dialect == AIRBNB_EXPORT:
        return parse_airbnb_csv(data)
    if dialect == BOOKING_RESERVATIONS:
        return parse_booking_csv(data)
    raise ValueError(f"Unknown dialect: {dialect}")


def parse_ledger_and_reservations(ledger_data: Optional[Source], reservation_data: Optional[Source],
                                  default_property: str = RECONCILIATION_DEFAULT_PROPERTY) -> ParseResult:
    """
    Lista BMD + export prenotazioni → prenotazioni con il belegnr come
    numero fattura. Le righe scartate dei due file finiscono insieme in
    invalid_rows (origin indica il file); l'esito dell'abbinamento è in
    match_report.
    """
    if not ledger_data or not reservation_data:
        raise CSVStructureError("Both BMD List and Reservations CSV files are required")

    ledger, ledger_invalid = parse_ledger(ledger_data)
    reservations, reservation_invalid = parse_reconciliation_reservations(reservation_data)

    merged, report = match_entries(ledger, reservations, default_property)
    return ParseResult(
        valid_rows=merged,
        invalid_rows=ledger_invalid + reservation_invalid,
        match_report=report,
    )


def column_mapping_report(data: Source, dialect: Optional[str] = None) -> Dict:
    """
    Come verrebbero lette le colonne del file: header trovati, campo → header
    (None se non trovato) e header non usati.
    """
    if dialect is None:
        dialect = detect_dialect(data)
    if dialect not in _DIALECT_COLUMNS:
        raise ValueError(f"Unknown dialect: {dialect}")

    header = tokenize_csv(data)[0]
    spellings = _DIALECT_COLUMNS[dialect]
    mapping = map_headers(header, spellings)

    return {
        "dialect": dialect,
        "detected_headers": header,
        "suggested_mapping": {f: (header[mapping[f]] if f in mapping else None) for f in spellings},
        "unmapped_headers": unmapped_headers(header, mapping),
    }
