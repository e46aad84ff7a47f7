"""
Parser per il CSV prenotazioni esportato da Airbnb.

Come esportare da Airbnb:
  Hosting → Prenotazioni → Tutte → Esporta → CSV

Colonne usate: Confirmation code, Status, Guest name, # of adults,
# of children, # of infants, Start date, End date, # of nights, Listing,
Earnings. I conteggi (# of ...) illeggibili valgono 0.

Earnings arriva come "€1,234.56" e, se il file è stato riaperto con
l'encoding sbagliato, come "â‚¬1,234.56": i simboli vengono tolti prima
della conversione. Un importo illeggibile vale 0 e la riga viene quindi
saltata come non positiva.
"""

from typing import Union

from stayledger.config import AIRBNB_COLUMNS, GUEST_PLACEHOLDERS
from stayledger.core.coercion import (
    days_between,
    extract_currency,
    parse_flexible_amount,
    parse_flexible_date,
    parse_int,
    strip_currency_symbols,
)
from stayledger.core.headers import ColumnIndex, get_field, map_headers
from stayledger.core.models import AIRBNB, ParseResult, UnifiedReservation
from stayledger.core.properties import resolve_property_code
from stayledger.core.tokenizer import RawRow, tokenize_csv
from stayledger.parsers.common import SkipRow, normalize_rows, require_positive


def normalize_airbnb_row(row: RawRow, mapping: ColumnIndex) -> UnifiedReservation:
    status = get_field(row, mapping, "status")
    if "cancel" in status.lower():
        raise SkipRow(f"Reservation status is '{status}'")

    raw_earnings = get_field(row, mapping, "amount_gross")
    amount = require_positive(parse_flexible_amount(strip_currency_symbols(raw_earnings)))

    check_in = parse_flexible_date(get_field(row, mapping, "check_in"))
    check_out = parse_flexible_date(get_field(row, mapping, "check_out"))

    nights = parse_int(get_field(row, mapping, "nights"), default=0)
    if not nights:
        nights = max(0, days_between(check_in, check_out))

    guests = sum(
        parse_int(get_field(row, mapping, f), default=0)
        for f in ("adults", "children", "infants")
    )

    listing = get_field(row, mapping, "property_name")

    return UnifiedReservation(
        property_name=listing,
        booker_name=get_field(row, mapping, "guest_name") or GUEST_PLACEHOLDERS[AIRBNB],
        arrival_date=check_in,
        departure_date=check_out,
        gross_amount=amount,
        currency=get_field(row, mapping, "currency").upper() or extract_currency(raw_earnings),
        source=AIRBNB,
        reservation_number=get_field(row, mapping, "reservation_id"),
        nights=nights or None,
        guest_count=guests or None,
        property_code=resolve_property_code(listing, AIRBNB) if listing else None,
    )


def parse_airbnb_csv(data: Union[bytes, str]) -> ParseResult:
    """Legge il CSV Airbnb e restituisce il ParseResult."""
    rows = tokenize_csv(data)
    header = rows[0]
    mapping = map_headers(header, AIRBNB_COLUMNS)
    return normalize_rows(rows[1:], mapping, normalize_airbnb_row, "Airbnb", header)
