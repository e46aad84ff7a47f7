"""
Ciclo comune ai parser: una riga alla volta, mai un'eccezione per riga.

Ogni dialetto fornisce solo la funzione che trasforma una riga in
UnifiedReservation. Qui si decide dove finisce la riga:
  - SkipRow    → invalid_rows, kind "skipped", motivo "Skipped: ..."
  - ValueError → invalid_rows, kind "error", messaggio originale
  - altrimenti → valid_rows
"""

import logging
from typing import Callable, List, Optional

from stayledger.core.headers import ColumnIndex, is_header_repeat
from stayledger.core.models import ROW_ERROR, ROW_SKIPPED, InvalidRow, ParseResult
from stayledger.core.tokenizer import RawRow

logger = logging.getLogger(__name__)


class SkipRow(Exception):
    """Riga corretta ma esclusa per regola (tipo, stato, importo, mese)."""


def require_positive(amount: float) -> float:
    if amount <= 0:
        raise SkipRow(f"Negative or zero amount ({amount}) - likely refund/cancellation")
    return amount


def skipped(line: int, row: RawRow, reason: str, origin: str = "") -> InvalidRow:
    return InvalidRow(line=line, row=row, errors=[f"Skipped: {reason}"], kind=ROW_SKIPPED, origin=origin)


def normalize_rows(
    rows: List[RawRow],
    mapping: ColumnIndex,
    normalize_row: Callable,
    label: str,
    header: Optional[RawRow] = None,
) -> ParseResult:
    """
    rows: righe dati (senza header). normalize_row(row, mapping) restituisce
    un record oppure solleva SkipRow / ValueError.
    """
    result = ParseResult()
    for line, row in enumerate(rows, start=1):
        if header is not None and is_header_repeat(row, header):
            continue
        try:
            record = normalize_row(row, mapping)
        except SkipRow as e:
            result.invalid_rows.append(skipped(line, row, str(e), origin=label))
            logger.debug("%s riga %d saltata: %s", label, line, e)
        except ValueError as e:
            result.invalid_rows.append(
                InvalidRow(line=line, row=row, errors=[str(e)], kind=ROW_ERROR, origin=label)
            )
            logger.debug("%s riga %d non valida: %s", label, line, e)
        else:
            result.valid_rows.append(record)

    logger.info(
        "%s: %d righe, %d valide, %d scartate",
        label, len(rows), len(result.valid_rows), len(result.invalid_rows),
    )
    return result
