"""
Parser per il CSV mensile dei pagamenti di Booking.com (Payout report).

Come esportare da Booking:
  Extranet → Finance → Payouts → Export CSV

Intestazioni obbligatorie (nomi esatti, a meno di maiuscole/spazi):
  Type, Reference number, Check-in, Checkout, Guest name,
  Reservation status, Currency, Payment status, Amount
Se ne manca una il file viene rifiutato per intero.

Tipi di righe:
  - 'Reservation'              → prenotazione, l'unica che interessa
  - 'Payout', 'Adjustment'...  → saltate
Una prenotazione è valida solo con Reservation status 'ok' e Amount > 0.

Date nel formato "30 Jun 2025". Amount senza virgole europee: qualsiasi
carattere che non sia cifra, '.' o '-' viene tolto, e se resta qualcosa di
non numerico la riga è un errore (qui non si mette 0).
"""

import logging
import re
from typing import Optional, Union

from stayledger.config import BOOKING_PAYOUT_COLUMNS, BOOKING_PAYOUT_OPTIONAL_COLUMNS, GUEST_PLACEHOLDERS
from stayledger.core.coercion import days_between, parse_flexible_amount, parse_flexible_date
from stayledger.core.headers import ColumnIndex, get_field, map_headers
from stayledger.core.models import BOOKING_COM, ParseResult, UnifiedReservation
from stayledger.core.properties import resolve_property_code
from stayledger.core.tokenizer import CSVStructureError, RawRow, tokenize_csv
from stayledger.parsers.common import SkipRow, normalize_rows, require_positive

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def _normalizer(target_month: Optional[str]):
    def normalize_payout_row(row: RawRow, mapping: ColumnIndex) -> UnifiedReservation:
        row_type = get_field(row, mapping, "type")
        if row_type != "Reservation":
            raise SkipRow(f"Type is '{row_type}', not 'Reservation'")

        status = get_field(row, mapping, "status")
        if status != "ok":
            raise SkipRow(f"Reservation status is '{status}', not 'ok'")

        amount = require_positive(
            parse_flexible_amount(get_field(row, mapping, "amount_gross"), strict=True)
        )

        check_in = parse_flexible_date(get_field(row, mapping, "check_in"))
        check_out = parse_flexible_date(get_field(row, mapping, "check_out"))

        if target_month and not check_out.startswith(target_month):
            raise SkipRow(f"Checkout {check_out} is outside target month {target_month}")

        property_name = get_field(row, mapping, "property_name")

        return UnifiedReservation(
            property_name=property_name,
            booker_name=get_field(row, mapping, "guest_name") or GUEST_PLACEHOLDERS[BOOKING_COM],
            arrival_date=check_in,
            departure_date=check_out,
            gross_amount=amount,
            currency=get_field(row, mapping, "currency") or "EUR",
            source=BOOKING_COM,
            reservation_number=get_field(row, mapping, "reservation_id"),
            nights=max(1, days_between(check_in, check_out)),
            property_code=resolve_property_code(property_name, BOOKING_COM) if property_name else None,
        )

    return normalize_payout_row


def parse_payout_csv(data: Union[bytes, str], target_month: Optional[str] = None) -> ParseResult:
    """
    Legge il Payout report Booking.

    target_month "YYYY-MM": tiene solo le prenotazioni con checkout in quel mese
    (le altre finiscono tra le righe saltate).
    """
    if target_month and not _MONTH_RE.match(target_month):
        raise ValueError(f"Target month must be YYYY-MM, got {target_month!r}")

    rows = tokenize_csv(data)
    header = rows[0]
    mapping = map_headers(header, BOOKING_PAYOUT_COLUMNS)

    missing = [BOOKING_PAYOUT_COLUMNS[f][0] for f in BOOKING_PAYOUT_COLUMNS if f not in mapping]
    if missing:
        raise CSVStructureError(f"Payout CSV is missing required column(s): {', '.join(missing)}")

    mapping.update(map_headers(header, BOOKING_PAYOUT_OPTIONAL_COLUMNS))
    if target_month:
        logger.info("Payout Booking: filtro checkout nel mese %s", target_month)

    return normalize_rows(rows[1:], mapping, _normalizer(target_month), "Booking.com payout", header)
