"""
Conversione di date e importi scritti nei formati più disparati.

Date accettate (in quest'ordine):
  - ISO "2025-06-30"              → passthrough
  - "30 Jun 2025" / "1 August 2025"
  - "30/06/2025"                  → sempre giorno/mese/anno, mai formato USA
  - "30.06.2025"
  - fallback: ISO con orario, "Jun 30, 2025", "2025/06/30" ...

Importi: la severità dipende dal punto di chiamata. Alcuni export mettono 0
quando il valore non è leggibile (lenient), altri devono segnalare la riga
come errata (strict). Non unificare: è comportamento osservabile.
"""

import re
from datetime import date, datetime, timedelta
from typing import Optional

from stayledger.config import CURRENCY_CODES, CURRENCY_SYMBOLS, DEFAULT_CURRENCY, MOJIBAKE_SYMBOLS

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_MONTH_NAME_RE = re.compile(r"^(\d{1,2})\s+([A-Za-zäÄ]+)\.?,?\s+(\d{4})$")
_SLASH_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_DOT_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$")
_CURRENCY_CODE_RE = re.compile(r"\b(" + "|".join(CURRENCY_CODES) + r")\b", re.IGNORECASE)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
    # tedesco (export con locale de-AT)
    "jän": 1, "jaen": 1, "mär": 3, "mae": 3, "mai": 5, "okt": 10, "dez": 12,
}

_FALLBACK_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d-%m-%Y",
    "%Y%m%d",
)


def _month_number(name: str) -> Optional[int]:
    key = name.lower()
    if key in MONTHS:
        return MONTHS[key]
    return MONTHS.get(key[:3])


def _build(year: int, month: int, day: int, original: str) -> str:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        raise ValueError(f"Invalid date format: {original}")


def parse_flexible_date(text: str) -> str:
    """
    Testo → data ISO "YYYY-MM-DD".

    Raises:
        ValueError("Invalid date format: ...") se nessun formato produce una data valida.
    """
    if text is None or not str(text).strip():
        raise ValueError("Invalid date format: empty value")
    cleaned = str(text).strip()

    if _ISO_RE.match(cleaned):
        y, m, d = cleaned.split("-")
        return _build(int(y), int(m), int(d), text)

    m = _DAY_MONTH_NAME_RE.match(cleaned)
    if m:
        month = _month_number(m.group(2))
        if month is None:
            raise ValueError(f"Invalid date format: {text}")
        return _build(int(m.group(3)), month, int(m.group(1)), text)

    for pattern in (_SLASH_RE, _DOT_RE):
        m = pattern.match(cleaned)
        if m:
            return _build(int(m.group(3)), int(m.group(2)), int(m.group(1)), text)

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue

    raise ValueError(f"Invalid date format: {text}")


def parse_iso(value: str) -> date:
    return datetime.strptime(value, "%Y-%m-%d").date()


def days_between(check_in: str, check_out: str) -> int:
    return (parse_iso(check_out) - parse_iso(check_in)).days


def shift_days(iso_date: str, days: int) -> str:
    return (parse_iso(iso_date) + timedelta(days=days)).isoformat()


def voucher_date_to_iso(value: str) -> str:
    """belegdat BMD "20250702" → "2025-07-02"."""
    value = (value or "").strip()
    if len(value) != 8 or not value.isdigit():
        raise ValueError(f"Invalid voucher date: {value!r}")
    return _build(int(value[:4]), int(value[4:6]), int(value[6:]), value)


def iso_to_voucher_date(value: str) -> str:
    """"2025-07-02" (o altro formato accettato) → "20250702"."""
    return parse_flexible_date(value).replace("-", "")


# ─── Importi ────────────────────────────────────────────────────────────────

def strip_currency_symbols(text: str) -> str:
    """Rimuove simboli valuta, anche quando arrivano come byte mal decodificati."""
    for garbled in MOJIBAKE_SYMBOLS:
        text = text.replace(garbled, "")
    return re.sub(r"[€$£¥₹]", "", text)


def parse_flexible_amount(text: str, decimal_comma: bool = False, strict: bool = False) -> float:
    """
    Testo importo → float.

    decimal_comma=True: notazione europea. Con '.' e ',' entrambi presenti il
    punto è separatore delle migliaia ("1.234,56"); con la sola ',' la virgola
    è il decimale ("238,02"). Con decimal_comma=False la virgola è sempre
    separatore delle migliaia ("1,234.56").

    Valore vuoto → 0.0. Valore non numerico → 0.0, oppure ValueError se strict.
    """
    if text is None:
        return 0.0
    raw = str(text)
    s = strip_currency_symbols(raw).strip()
    if not s:
        return 0.0

    if decimal_comma and "," in s:
        if "." in s:
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", ".")
    else:
        s = s.replace(",", "")

    s = re.sub(r"[^\d.\-]", "", s)
    try:
        return float(s)
    except ValueError:
        if strict:
            raise ValueError(f"Invalid amount format: {raw}")
        return 0.0


def parse_int(text: str, default: int = 0) -> int:
    """Conteggi (# of adults, nights): default se non leggibile."""
    try:
        return int(float(str(text).strip()))
    except (ValueError, TypeError):
        return default


def extract_currency(price: str) -> str:
    """Codice valuta da una stringa prezzo tipo "250.00 EUR" o "€ 250"."""
    if not price:
        return DEFAULT_CURRENCY
    m = _CURRENCY_CODE_RE.search(price)
    if m:
        return m.group(1).upper()
    for symbol, code in CURRENCY_SYMBOLS.items():
        if symbol in price:
            return code
    return DEFAULT_CURRENCY
