"""
Abbinamento lista BMD ↔ file prenotazioni (formato a due file).

I due file non hanno una chiave comune garantita. Il testo della riga BMD
di solito ha la forma
    "{belegnr} {proprietà} {numero prenotazione} {ospite} {sorgente}"
es. "2251 KLIE 4123456789 Jane Doe Booking.com".

  1. Dal testo si estrae il primo token numerico di almeno 8 cifre (numero
     prenotazione); il nome ospite è quello che segue, senza la sorgente.
  2. Se almeno una riga BMD ha un numero → abbinamento diretto per numero.
     Righe BMD senza corrispondenza restano comunque nel risultato, con i
     soli dati BMD. Righe BMD senza numero non vengono abbinate.
  3. Se nessuna riga ha un numero → abbinamento in sequenza: i-esima riga BMD
     con i-esima prenotazione, fino al più corto dei due elenchi. Se l'ordine
     dei due file non coincide il risultato è sbagliato: controllare i
     conteggi nel MatchReport.

L'importo viene sempre dalla lista BMD (è quello contabilizzato).
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from stayledger.config import RECONCILIATION_DEFAULT_PROPERTY, UNKNOWN_GUEST
from stayledger.core.coercion import shift_days
from stayledger.core.models import AIRBNB, BOOKING_COM, MatchReport, UnifiedReservation
from stayledger.core.properties import resolve_property_code

logger = logging.getLogger(__name__)

_RESERVATION_TOKEN_RE = re.compile(r"[0-9]{8,}")
_SOURCE_WORDS = (".com", "airbnb")


@dataclass
class LedgerEntry:
    voucher_number: str
    amount: float
    memo: str
    voucher_date: str           # ISO
    reservation_number: str = ""
    guest_name: str = ""
    source: str = BOOKING_COM


@dataclass
class ReservationEntry:
    reservation_number: str
    property_name: str
    booker_name: str
    arrival: str                # ISO oppure "" se illeggibile
    departure: str
    amount: float
    currency: str = "EUR"


def _is_source_word(token: str) -> bool:
    lower = token.lower()
    return any(word in lower for word in _SOURCE_WORDS)


def extract_reservation_token(memo: str) -> Tuple[str, str]:
    """
    Testo BMD → (numero prenotazione, nome ospite); ("", "") se il testo non
    contiene un numero di almeno 8 cifre.
    """
    parts = (memo or "").split()
    if len(parts) < 4:
        return "", ""
    for j, token in enumerate(parts):
        if _RESERVATION_TOKEN_RE.fullmatch(token):
            guest = [p for p in parts[j + 1:-1] if not _is_source_word(p)]
            return token, " ".join(guest)
    return "", ""


def source_from_memo(memo: str) -> str:
    parts = (memo or "").split()
    if parts and "airbnb" in parts[-1].lower():
        return AIRBNB
    return BOOKING_COM


def _dates(reservation: Optional[ReservationEntry], entry: LedgerEntry) -> Tuple[str, str]:
    """Date della prenotazione se ci sono; altrimenti checkout = data BMD, check-in = giorno prima."""
    departure = (reservation.departure if reservation else "") or entry.voucher_date
    arrival = reservation.arrival if reservation else ""
    if not arrival:
        arrival = shift_days(departure, -1)
    return arrival, departure


def _merge(entry: LedgerEntry, reservation: ReservationEntry, reservation_number: str) -> UnifiedReservation:
    arrival, departure = _dates(reservation, entry)
    return UnifiedReservation(
        property_name=reservation.property_name,
        booker_name=reservation.booker_name or entry.guest_name or UNKNOWN_GUEST,
        arrival_date=arrival,
        departure_date=departure,
        gross_amount=entry.amount,
        currency=reservation.currency,
        source=entry.source,
        reservation_number=reservation_number,
        property_code=resolve_property_code(reservation.property_name, entry.source),
        invoice_number=entry.voucher_number,
    )


def _ledger_only(entry: LedgerEntry, default_property: str) -> UnifiedReservation:
    arrival, departure = _dates(None, entry)
    return UnifiedReservation(
        property_name=default_property,
        booker_name=entry.guest_name or UNKNOWN_GUEST,
        arrival_date=arrival,
        departure_date=departure,
        gross_amount=entry.amount,
        currency="EUR",
        source=entry.source,
        reservation_number=entry.reservation_number,
        property_code=resolve_property_code(default_property, entry.source),
        invoice_number=entry.voucher_number,
    )


def match_direct(ledger: List[LedgerEntry], reservations: List[ReservationEntry],
                 default_property: str = RECONCILIATION_DEFAULT_PROPERTY
                 ) -> Tuple[List[UnifiedReservation], MatchReport]:
    by_number = {r.reservation_number: r for r in reservations}
    report = MatchReport(strategy="direct")
    merged = []
    used = set()

    for entry in ledger:
        if not entry.reservation_number:
            report.unpaired_ledger += 1
            continue
        reservation = by_number.get(entry.reservation_number)
        if reservation is not None:
            merged.append(_merge(entry, reservation, entry.reservation_number))
            used.add(entry.reservation_number)
            report.matched += 1
        else:
            logger.warning(
                "Nessuna prenotazione per il numero %s (belegnr %s)",
                entry.reservation_number, entry.voucher_number,
            )
            merged.append(_ledger_only(entry, default_property))
            report.unmatched_ledger += 1

    report.unpaired_reservations = len([n for n in by_number if n not in used])
    return merged, report


def match_sequential(ledger: List[LedgerEntry], reservations: List[ReservationEntry]
                     ) -> Tuple[List[UnifiedReservation], MatchReport]:
    count = min(len(ledger), len(reservations))
    report = MatchReport(
        strategy="sequential",
        matched=count,
        unpaired_ledger=len(ledger) - count,
        unpaired_reservations=len(reservations) - count,
    )
    if report.unpaired_ledger or report.unpaired_reservations:
        logger.warning(
            "Abbinamento in sequenza: %d righe BMD, %d prenotazioni, escluse le eccedenze",
            len(ledger), len(reservations),
        )

    merged = [
        _merge(entry, reservation, reservation.reservation_number)
        for entry, reservation in zip(ledger, reservations)
    ]
    return merged, report


def match_entries(ledger: List[LedgerEntry], reservations: List[ReservationEntry],
                  default_property: str = RECONCILIATION_DEFAULT_PROPERTY
                  ) -> Tuple[List[UnifiedReservation], MatchReport]:
    if any(e.reservation_number for e in ledger):
        merged, report = match_direct(ledger, reservations, default_property)
    else:
        merged, report = match_sequential(ledger, reservations)
    logger.info(
        "Abbinamento %s: %d abbinate, %d solo BMD, %d BMD escluse, %d prenotazioni escluse",
        report.strategy, report.matched, report.unmatched_ledger,
        report.unpaired_ledger, report.unpaired_reservations,
    )
    return merged, report
