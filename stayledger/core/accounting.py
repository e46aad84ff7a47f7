"""
Export contabile per l'import in BMD.

Per ogni prenotazione, ordinate per data di partenza, tre righe con lo stesso
belegnr (formula A):
  A  200000  lordo positivo          steuer 0
  B  8001    -netto                  steuer -USt
  C  8003    -Ortstaxe               steuer 0

Il file ha l'header in chiaro e poi ogni riga come UNA cella tra virgolette
con i valori separati da ';' dentro:
  konto;belegnr;belegdat;symbol;betrag;steuer;text
  "200000;2251;20250702;AR;110.00;0.00;2251 KLIE 4123456789 Jane Doe Booking.com"
È il formato che l'import BMD accetta: non "correggere" le virgolette.
"""

import logging
from typing import Iterable, List, Optional

from stayledger.config import (
    ACCOUNT_CITY_TAX,
    ACCOUNT_GROSS,
    ACCOUNT_NET,
    ACCOUNTING_HEADER,
    DEFAULT_CITY_TAX_RATE,
    DEFAULT_VAT_RATE,
    SOURCE_TAGS,
    VOUCHER_SYMBOL,
)
from stayledger.core.coercion import iso_to_voucher_date
from stayledger.core.models import AccountingRow, UnifiedReservation
from stayledger.core.properties import resolve_property_code
from stayledger.core.tax import compute_tax_breakdown_a, format_decimal

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class VoucherCounter:
    """
    Contatore belegnr per un singolo export. Il valore persistito tra un
    export e l'altro lo gestisce il chiamante (seed = primo numero libero).
    """

    def __init__(self, seed: int = 1):
        self._next = int(seed)

    def next_voucher_number(self) -> int:
        number = self._next
        self._next += 1
        return number

    @property
    def peek(self) -> int:
        return self._next


def sort_by_departure(reservations: Iterable[UnifiedReservation]) -> List[UnifiedReservation]:
    return sorted(reservations, key=lambda r: r.departure_date)


def booking_text(voucher_number: str, property_code: str, reservation: UnifiedReservation) -> str:
    parts = [voucher_number, property_code]
    if reservation.reservation_number:
        parts.append(reservation.reservation_number)
    parts.append(reservation.booker_name)
    parts.append(SOURCE_TAGS.get(reservation.source, reservation.source))
    return " ".join(p for p in parts if p)


def build_accounting_rows(
    reservations: Iterable[UnifiedReservation],
    start_voucher_number: int = 1,
    use_comma_decimal: bool = False,
    property_code: Optional[str] = None,
    counter: Optional[VoucherCounter] = None,
    vat_rate: float = DEFAULT_VAT_RATE,
    city_tax_rate: float = DEFAULT_CITY_TAX_RATE,
) -> List[AccountingRow]:
    """
    property_code: se indicato vale per tutte le righe (proprietà scelta
    dall'operatore), altrimenti si risolve dal nome struttura di ognuna.
    """
    if counter is None:
        counter = VoucherCounter(start_voucher_number)

    rows = []
    for reservation in sort_by_departure(reservations):
        voucher = str(counter.next_voucher_number())
        voucher_date = iso_to_voucher_date(reservation.departure_date)
        taxes = compute_tax_breakdown_a(reservation.gross_amount, vat_rate, city_tax_rate)
        code = (
            property_code
            or reservation.property_code
            or resolve_property_code(reservation.property_name, reservation.source)
        )
        text = booking_text(voucher, code, reservation)

        def row(account, amount, tax):
            return AccountingRow(
                account=account,
                voucher_number=voucher,
                voucher_date=voucher_date,
                symbol=VOUCHER_SYMBOL,
                amount=format_decimal(amount, use_comma_decimal),
                tax_amount=format_decimal(tax, use_comma_decimal),
                text=text,
            )

        rows.append(row(ACCOUNT_GROSS, taxes.gross, 0))
        rows.append(row(ACCOUNT_NET, -taxes.net, -taxes.vat))
        rows.append(row(ACCOUNT_CITY_TAX, -taxes.city_tax, 0))

    logger.info("Export BMD: %d prenotazioni, %d righe", len(rows) // 3, len(rows))
    return rows


def serialize_accounting_rows(rows: Iterable[AccountingRow]) -> str:
    lines = [ACCOUNTING_HEADER]
    for r in rows:
        values = [r.account, r.voucher_number, r.voucher_date, r.symbol, r.amount, r.tax_amount, r.text]
        lines.append('"' + ";".join(values) + '"')
    return "\n".join(lines)


def generate_accounting_csv(
    reservations: Iterable[UnifiedReservation],
    start_voucher_number: int = 1,
    use_comma_decimal: bool = False,
    property_code: Optional[str] = None,
    counter: Optional[VoucherCounter] = None,
    vat_rate: float = DEFAULT_VAT_RATE,
    city_tax_rate: float = DEFAULT_CITY_TAX_RATE,
) -> str:
    rows = build_accounting_rows(
        reservations,
        start_voucher_number=start_voucher_number,
        use_comma_decimal=use_comma_decimal,
        property_code=property_code,
        counter=counter,
        vat_rate=vat_rate,
        city_tax_rate=city_tax_rate,
    )
    return serialize_accounting_rows(rows)


def accounting_filename(target_month: Optional[str] = None, property_code: Optional[str] = None) -> str:
    """"2025-06" + "KLIE" → "KLIE_June_BMD_Liste.csv"."""
    parts = []
    if property_code:
        parts.append(property_code)
    if target_month:
        try:
            month = int(target_month.split("-")[1])
        except (IndexError, ValueError):
            month = 0
        parts.append(MONTH_NAMES[month - 1] if 1 <= month <= 12 else "Unknown")
    parts.append("BMD_Liste.csv")
    return "_".join(parts)
