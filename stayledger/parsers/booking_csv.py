"""
Parser per l'export prenotazioni di Booking.com.

Come esportare da Booking:
  Extranet → Prenotazioni → Scarica (CSV)

Le intestazioni cambiano tra versioni dell'Extranet e lingua dell'account
("Book number" / "Reservation ID" / "Reference number", "Price" / "Total
payment", ...): le varianti accettate stanno in
config.BOOKING_RESERVATION_COLUMNS.

Regole per riga:
  - colonna Type presente e diversa da "Reservation" → saltata
  - stato con "cancel" (cancelled_by_guest, cancelled_by_hotel) → saltata
  - importo <= 0 → saltata (rimborso / cancellazione)
  - data partenza mancante o illeggibile → errore

L'importo si legge in notazione europea quando c'è una virgola
("1.234,56 €" → 1234.56); se non c'è la colonna Currency la valuta si ricava
dalla stringa prezzo ("250 EUR"), default EUR.
"""

from typing import Union

from stayledger.config import BOOKING_RESERVATION_COLUMNS, GUEST_PLACEHOLDERS
from stayledger.core.coercion import (
    days_between,
    extract_currency,
    parse_flexible_amount,
    parse_flexible_date,
    parse_int,
)
from stayledger.core.headers import ColumnIndex, get_field, map_headers
from stayledger.core.models import BOOKING_COM, ParseResult, UnifiedReservation
from stayledger.core.properties import resolve_property_code
from stayledger.core.tokenizer import RawRow, tokenize_csv
from stayledger.parsers.common import SkipRow, normalize_rows, require_positive


def normalize_booking_row(row: RawRow, mapping: ColumnIndex) -> UnifiedReservation:
    row_type = get_field(row, mapping, "type")
    if row_type and row_type != "Reservation":
        raise SkipRow(f"Type is '{row_type}', not 'Reservation'")

    status = get_field(row, mapping, "status")
    if "cancel" in status.lower():
        raise SkipRow(f"Reservation status is '{status}'")

    raw_amount = get_field(row, mapping, "amount_gross")
    amount = require_positive(parse_flexible_amount(raw_amount, decimal_comma=True))

    raw_departure = get_field(row, mapping, "check_out")
    if not raw_departure:
        raise ValueError("Check-out date is required")
    departure = parse_flexible_date(raw_departure)

    raw_arrival = get_field(row, mapping, "check_in")
    arrival = parse_flexible_date(raw_arrival) if raw_arrival else ""

    nights = parse_int(get_field(row, mapping, "nights"), default=0)
    if not nights and arrival:
        nights = max(0, days_between(arrival, departure))

    property_name = get_field(row, mapping, "property_name")

    return UnifiedReservation(
        property_name=property_name,
        booker_name=get_field(row, mapping, "guest_name") or GUEST_PLACEHOLDERS[BOOKING_COM],
        arrival_date=arrival,
        departure_date=departure,
        gross_amount=amount,
        currency=get_field(row, mapping, "currency").upper() or extract_currency(raw_amount),
        source=BOOKING_COM,
        reservation_number=get_field(row, mapping, "reservation_id"),
        nights=nights or None,
        guest_address=get_field(row, mapping, "guest_address") or None,
        country=get_field(row, mapping, "country") or None,
        property_code=resolve_property_code(property_name, BOOKING_COM) if property_name else None,
    )


def parse_booking_csv(data: Union[bytes, str]) -> ParseResult:
    """Legge l'export prenotazioni Booking e restituisce il ParseResult."""
    rows = tokenize_csv(data)
    header = rows[0]
    mapping = map_headers(header, BOOKING_RESERVATION_COLUMNS)
    return normalize_rows(rows[1:], mapping, normalize_booking_row, "Booking.com reservations", header)
