"""
Dati fattura per ogni prenotazione (il PDF lo disegna un renderer esterno).

Numero fattura "<prefisso>-<anno>-<NNN>", progressivo per proprietà e anno.
Se la prenotazione arriva dalla lista BMD ha già un belegnr: si usa quello.
Data fattura = checkout. Importi con la formula B e le aliquote della
proprietà (l'Ortstaxe si aggiunge al lordo).

Una prenotazione che fallisce finisce in InvoiceBatch.errors, le altre
proseguono.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from stayledger.config import INVOICE_SERVICE_DESCRIPTION, UNKNOWN_GUEST
from stayledger.core.coercion import days_between, parse_iso
from stayledger.core.models import Company, Invoice, InvoiceBatch, Property, UnifiedReservation
from stayledger.core.tax import compute_tax_breakdown_b

logger = logging.getLogger(__name__)


class InvoiceCounter:
    """Progressivo in memoria per (proprietà, anno); la persistenza è del chiamante."""

    def __init__(self, start: int = 1):
        self._last = defaultdict(lambda: start - 1)

    def next_invoice_number(self, prop: Property, year: int) -> str:
        key = (prop.id, year)
        self._last[key] += 1
        prefix = prop.invoice_prefix or prop.id
        return f"{prefix}-{year}-{self._last[key]:03d}"

    def seed(self, property_id: str, year: int, last_number: int):
        """Riparte dopo l'ultimo numero già emesso."""
        self._last[(property_id, year)] = last_number


def format_period(check_in: str, check_out: str) -> str:
    """"2025-06-28", "2025-07-02" → "28.06.2025 - 02.07.2025"."""
    return f"{parse_iso(check_in):%d.%m.%Y} - {parse_iso(check_out):%d.%m.%Y}"


def build_invoice(reservation: UnifiedReservation, prop: Property,
                  company: Optional[Company], counter: InvoiceCounter) -> Invoice:
    if not reservation.arrival_date or not reservation.departure_date:
        raise ValueError("Check-in and check-out dates are required")

    check_out = parse_iso(reservation.departure_date)
    nights = reservation.nights or days_between(reservation.arrival_date, reservation.departure_date)
    if nights <= 0:
        raise ValueError(f"Check-out {reservation.departure_date} is not after check-in {reservation.arrival_date}")

    amounts = compute_tax_breakdown_b(
        reservation.gross_amount, prop.vat_rate, prop.city_tax_rate, prop.city_tax_mode,
    )
    number = reservation.invoice_number or counter.next_invoice_number(prop, check_out.year)

    return Invoice(
        invoice_number=number,
        invoice_date=reservation.departure_date,
        property=prop,
        company=company,
        guest_name=reservation.booker_name or UNKNOWN_GUEST,
        guest_address=reservation.guest_address,
        guest_country=reservation.country,
        service_description=INVOICE_SERVICE_DESCRIPTION,
        service_period=format_period(reservation.arrival_date, reservation.departure_date),
        check_in_date=reservation.arrival_date,
        check_out_date=reservation.departure_date,
        nights=nights,
        amounts=amounts,
        currency=reservation.currency or prop.default_currency,
        reservation_id=reservation.reservation_number,
    )


def build_invoices(reservations: Iterable[UnifiedReservation], prop: Property,
                   company: Optional[Company] = None,
                   counter: Optional[InvoiceCounter] = None) -> InvoiceBatch:
    if counter is None:
        counter = InvoiceCounter()

    batch = InvoiceBatch()
    for reservation in reservations:
        try:
            batch.invoices.append(build_invoice(reservation, prop, company, counter))
        except ValueError as e:
            ref = reservation.reservation_number or reservation.booker_name
            batch.errors.append(f"Error processing reservation {ref}: {e}")
            logger.warning("Fattura non generata per %s: %s", ref, e)

    logger.info(
        "Fatture %s: %d generate, %d errori",
        prop.id, len(batch.invoices), len(batch.errors),
    )
    return batch
