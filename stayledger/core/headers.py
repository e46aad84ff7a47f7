"""
Mapping intestazioni → campi canonici.

Ogni dialetto dichiara in config.py una tabella {campo: [spelling, ...]}.
Il confronto ignora maiuscole e spazi; vince il primo spelling in ordine di
dichiarazione. I campi non trovati restano fuori dal mapping: è il parser a
decidere se la loro assenza è un problema.
"""

from typing import Dict, List, Optional, Sequence

ColumnIndex = Dict[str, int]


def _norm(header: str) -> str:
    return header.replace("\ufeff", "").strip().lower()


def find_column(header: Sequence[str], spellings: Sequence[str]) -> Optional[int]:
    """Indice della prima colonna che corrisponde a uno degli spelling."""
    normalized = [_norm(h) for h in header]
    for spelling in spellings:
        target = _norm(spelling)
        if target in normalized:
            return normalized.index(target)
    return None


def map_headers(header: Sequence[str], field_spellings: Dict[str, List[str]]) -> ColumnIndex:
    mapping = {}
    for field_name, spellings in field_spellings.items():
        idx = find_column(header, spellings)
        if idx is not None:
            mapping[field_name] = idx
    return mapping


def unmapped_headers(header: Sequence[str], mapping: ColumnIndex) -> List[str]:
    """Colonne dell'header non reclamate da nessun campo (solo diagnostica)."""
    claimed = set(mapping.values())
    return [h for i, h in enumerate(header) if i not in claimed]


def get_field(row: Sequence[str], mapping: ColumnIndex, field_name: str, default: str = "") -> str:
    """Valore del campo nella riga; default se il campo non è mappato o la riga è corta."""
    idx = mapping.get(field_name)
    if idx is None or idx >= len(row):
        return default
    return row[idx]


def is_header_repeat(row: Sequence[str], header: Sequence[str]) -> bool:
    """Alcuni export ripetono l'header come prima riga dati."""
    return [_norm(v) for v in row] == [_norm(h) for h in header]
