"""
Parser per il formato a due file: lista BMD + export prenotazioni.

Lista BMD (export contabile generato da questo stesso tool o da BMD):
  konto;belegnr;belegdat;symbol;betrag;steuer;text
  "200000;2251;20250702;AR;110,00;0,00;2251 KLIE 4123456789 Jane Doe Booking.com"
  "8001;2251;20250702;AR;-97,17;-9,72;..."
  "8003;2251;20250702;AR;-3,11;0,00;..."
Ogni prenotazione ha tre righe; interessa solo quella sul conto 200000
(lordo). Le righe 8001/8003 e i belegnr già visti vengono saltati.
Importi con virgola decimale accettati; belegdat in formato YYYYMMDD.

Export prenotazioni: colonne Book number, Status, Price, Guest name(s),
Check-in, Check-out. Prenotazioni cancellate, senza numero o con prezzo
<= 0 vengono scartate. Date illeggibili restano vuote: l'abbinamento usa
allora la data BMD.
"""

import logging
from typing import List, Tuple, Union

from stayledger.config import (
    ACCOUNT_GROSS,
    LEDGER_COLUMNS,
    LEDGER_POSITIONS,
    RECONCILIATION_DEFAULT_PROPERTY,
    RECONCILIATION_RESERVATION_COLUMNS,
)
from stayledger.core.coercion import parse_flexible_amount, parse_flexible_date, voucher_date_to_iso
from stayledger.core.headers import ColumnIndex, get_field, map_headers
from stayledger.core.matcher import LedgerEntry, ReservationEntry, extract_reservation_token, source_from_memo
from stayledger.core.models import InvalidRow
from stayledger.core.tokenizer import RawRow, tokenize_csv
from stayledger.parsers.common import SkipRow, normalize_rows, require_positive

logger = logging.getLogger(__name__)


def _ledger_mapping(header: RawRow) -> ColumnIndex:
    """Colonne per nome se l'header è quello BMD, altrimenti per posizione."""
    mapping = dict(LEDGER_POSITIONS)
    mapping.update(map_headers(header, LEDGER_COLUMNS))
    return mapping


def _ledger_normalizer():
    seen = set()

    def normalize_ledger_row(row: RawRow, mapping: ColumnIndex) -> LedgerEntry:
        if len(row) < len(LEDGER_POSITIONS):
            raise ValueError(f"Ledger row has {len(row)} columns, expected {len(LEDGER_POSITIONS)}")

        account = get_field(row, mapping, "account")
        if account != ACCOUNT_GROSS:
            raise SkipRow(f"Account '{account}' is not the gross revenue account {ACCOUNT_GROSS}")

        voucher_number = get_field(row, mapping, "voucher_number")
        if not voucher_number:
            raise ValueError("Missing voucher number (belegnr)")
        if voucher_number in seen:
            raise SkipRow(f"Duplicate voucher number {voucher_number}")
        seen.add(voucher_number)

        amount = require_positive(
            parse_flexible_amount(get_field(row, mapping, "amount"), decimal_comma=True)
        )
        voucher_date = voucher_date_to_iso(get_field(row, mapping, "voucher_date"))

        memo = get_field(row, mapping, "memo")
        reservation_number, guest_name = extract_reservation_token(memo)

        return LedgerEntry(
            voucher_number=voucher_number,
            amount=amount,
            memo=memo,
            voucher_date=voucher_date,
            reservation_number=reservation_number,
            guest_name=guest_name,
            source=source_from_memo(memo),
        )

    return normalize_ledger_row


def parse_ledger(data: Union[bytes, str]) -> Tuple[List[LedgerEntry], List[InvalidRow]]:
    rows = tokenize_csv(data)
    header = rows[0]
    result = normalize_rows(rows[1:], _ledger_mapping(header), _ledger_normalizer(), "BMD ledger", header)

    with_numbers = sum(1 for e in result.valid_rows if e.reservation_number)
    if not with_numbers and result.valid_rows:
        logger.info("Nessun numero prenotazione nella lista BMD: si userà l'abbinamento in sequenza")
    return result.valid_rows, result.invalid_rows


def _lenient_date(value: str, label: str) -> str:
    if not value:
        return ""
    try:
        return parse_flexible_date(value)
    except ValueError:
        logger.warning("Data %s illeggibile %r, verrà ricavata dalla lista BMD", label, value)
        return ""


def normalize_reservation_entry(row: RawRow, mapping: ColumnIndex) -> ReservationEntry:
    status = get_field(row, mapping, "status")
    if "cancel" in status.lower():
        raise SkipRow(f"Reservation status is '{status}'")

    reservation_number = get_field(row, mapping, "reservation_id")
    if not reservation_number:
        raise ValueError("Missing reservation number")

    amount = require_positive(parse_flexible_amount(get_field(row, mapping, "amount_gross")))

    return ReservationEntry(
        reservation_number=reservation_number,
        property_name=get_field(row, mapping, "property_name") or RECONCILIATION_DEFAULT_PROPERTY,
        booker_name=get_field(row, mapping, "guest_name"),
        arrival=_lenient_date(get_field(row, mapping, "check_in"), "check-in"),
        departure=_lenient_date(get_field(row, mapping, "check_out"), "check-out"),
        amount=amount,
    )


def parse_reconciliation_reservations(data: Union[bytes, str]
                                      ) -> Tuple[List[ReservationEntry], List[InvalidRow]]:
    rows = tokenize_csv(data)
    header = rows[0]
    mapping = map_headers(header, RECONCILIATION_RESERVATION_COLUMNS)
    if "reservation_id" not in mapping:
        logger.warning("Colonna 'Book number' non trovata. Colonne presenti: %s", header)
    result = normalize_rows(rows[1:], mapping, normalize_reservation_entry, "Reservations", header)
    return result.valid_rows, result.invalid_rows
