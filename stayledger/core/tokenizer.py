"""
Tokenizer CSV condiviso da tutti i parser.

Gli export di Booking, Airbnb e BMD non sono CSV "puliti":
  - separatore virgola oppure punto e virgola (rilevato dall'header)
  - campi tra virgolette con dentro separatori, a capo e virgolette raddoppiate
  - lista BMD con l'intera riga tra virgolette: "200000;2251;20250702;AR;..."
  - BOM UTF-8 in testa, fine riga Windows

La lettura vera e propria la fa csv.reader; qui restano il rilevamento del
separatore e lo "scarto" delle righe BMD tutte tra virgolette, che vanno
tolte prima della lettura (il testo può contenere virgolette, es. un ospite
che si chiama Jane "JJ" Doe).
"""

import csv
import io
import logging
from typing import Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

RawRow = List[str]


class CSVStructureError(ValueError):
    """Errore che invalida l'intero file (non la singola riga)."""


def decode_csv(data: Union[bytes, str]) -> str:
    """Bytes → testo. Prova utf-8 (con BOM), poi latin-1."""
    if isinstance(data, str):
        text = data
    else:
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.info("File non UTF-8, rilettura come latin-1")
            text = data.decode("latin-1")
    text = text.lstrip("\ufeff")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def detect_delimiter(header_line: str) -> str:
    """';' solo se l'header contiene ';' e nessuna ','."""
    if ";" in header_line and "," not in header_line:
        return ";"
    return ","


def _first_line(text: str) -> str:
    return next((line for line in text.split("\n") if line.strip()), "")


def _is_wrapped_row(line: str, delimiter: str) -> bool:
    # Riga BMD tutta tra virgolette: nessun confine di campo quotato all'interno
    inner = line[1:-1]
    return (
        delimiter == ";"
        and len(line) >= 2
        and line.startswith('"')
        and line.endswith('"')
        and f'"{delimiter}' not in inner
        and f'{delimiter}"' not in inner
    )


def _unwrap_lines(text: str, delimiter: str) -> Iterator[str]:
    for line in io.StringIO(text):
        body = line.rstrip("\n").strip()
        if _is_wrapped_row(body, delimiter):
            yield body[1:-1] + "\n"
        else:
            yield line


def _read_rows(text: str, delimiter: str) -> List[RawRow]:
    reader = csv.reader(_unwrap_lines(text, delimiter), delimiter=delimiter, skipinitialspace=True)
    rows = [[field.strip() for field in row] for row in reader]
    return [row for row in rows if any(row)]


def split_row(line: str, delimiter: str = ",") -> RawRow:
    """Divide una singola riga nei campi, rispettando le virgolette."""
    rows = _read_rows(line.strip(), delimiter)
    return rows[0] if rows else []


def read_header(data: Union[bytes, str]) -> RawRow:
    """Solo la prima riga (per riconoscere il tipo di file)."""
    line = _first_line(decode_csv(data))
    header = split_row(line, detect_delimiter(line))
    if not header:
        raise CSVStructureError("CSV must contain at least a header row and one data row")
    return header


def tokenize_csv(data: Union[bytes, str], delimiter: Optional[str] = None) -> List[RawRow]:
    """
    Testo CSV → lista di righe (la prima è l'header). Righe vuote scartate,
    campi ripuliti dagli spazi.

    Raises:
        CSVStructureError se non ci sono almeno header + una riga dati.
    """
    text = decode_csv(data)
    if delimiter is None:
        delimiter = detect_delimiter(_first_line(text))

    rows = _read_rows(text, delimiter)
    if len(rows) < 2:
        raise CSVStructureError("CSV must contain at least a header row and one data row")

    logger.debug("Separatore CSV: %r (%d righe)", delimiter, len(rows))
    return rows
