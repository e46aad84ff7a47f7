"""
Nome struttura / annuncio → codice proprietà interno (BEGA, KRA, KLIE, ...).

Ordine di risoluzione:
  1. il nome è già un codice noto → restituito invariato
  2. match esatto su PROPERTY_CODE_MAP, poi sulla tabella annunci della sorgente
  3. parole chiave per sottostringa, nell'ordine dichiarato
  4. nessun match → il nome originale
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from stayledger.config import LISTING_CODE_MAP, PROPERTY_CODE_MAP, PROPERTY_KEYWORDS

logger = logging.getLogger(__name__)


@dataclass
class PropertyTable:
    exact: Dict[str, str] = field(default_factory=dict)
    keywords: List[Tuple[Sequence[str], str]] = field(default_factory=list)
    listings: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @property
    def codes(self) -> set:
        codes = set(self.exact.values())
        codes.update(code for _, code in self.keywords)
        for table in self.listings.values():
            codes.update(table.values())
        return codes


DEFAULT_TABLE = PropertyTable(
    exact=dict(PROPERTY_CODE_MAP),
    keywords=list(PROPERTY_KEYWORDS),
    listings={source: dict(table) for source, table in LISTING_CODE_MAP.items()},
)


def load_property_table(path: str) -> PropertyTable:
    """
    Legge la tabella proprietà da JSON:
      {"exact": {"Margot": "KLIE"},
       "keywords": [[["stephansdom ii"], "BM"], [["stephansdom"], "KRA"]],
       "listings": {"Airbnb": {"Cozy flat near Opera": "WAFG"}}}
    L'ordine della lista keywords è la priorità.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return PropertyTable(
        exact=dict(data.get("exact", {})),
        keywords=[(tuple(k.lower() for k in kws), code) for kws, code in data.get("keywords", [])],
        listings={src: dict(t) for src, t in data.get("listings", {}).items()},
    )


def resolve_property_code(name: str, source: Optional[str] = None,
                          table: Optional[PropertyTable] = None) -> str:
    if table is None:
        table = DEFAULT_TABLE
    name = (name or "").strip()

    if name in table.codes:
        return name

    if name in table.exact:
        return table.exact[name]
    if source and name in table.listings.get(source, {}):
        return table.listings[source][name]

    lower_name = name.lower()
    for keywords, code in table.keywords:
        if any(k in lower_name for k in keywords):
            return code

    logger.warning("Proprietà sconosciuta: %r", name)
    return name
