import json

import pytest

from stayledger.config import PROPERTY_CODE_MAP
from stayledger.core.models import AIRBNB, BOOKING_COM
from stayledger.core.properties import DEFAULT_TABLE, load_property_table, resolve_property_code


@pytest.mark.parametrize("name,code", sorted(PROPERTY_CODE_MAP.items()))
def test_exact_names(name, code):
    assert resolve_property_code(name, BOOKING_COM) == code


def test_overlapping_keywords_pick_the_more_specific_property():
    assert resolve_property_code("Apartment Stephansdom II") == "BM"
    assert resolve_property_code("Cozy studio near Stephansdom") == "KRA"
    assert resolve_property_code("Bauernmarkt loft", AIRBNB) == "BM"


def test_keywords_are_case_insensitive():
    assert resolve_property_code("MARGOT apartment") == "KLIE"
    assert resolve_property_code("celeste suites 3") == "ZIMM"


def test_unknown_name_is_returned_unchanged():
    assert resolve_property_code("Chalet Alpenblick") == "Chalet Alpenblick"


@pytest.mark.parametrize("code", sorted(DEFAULT_TABLE.codes))
def test_codes_are_not_rewritten(code):
    assert resolve_property_code(code) == code


@pytest.mark.parametrize("name", list(PROPERTY_CODE_MAP) + ["Stephansdom II flat", "Chalet Alpenblick"])
def test_resolving_twice_is_stable(name):
    once = resolve_property_code(name)
    assert resolve_property_code(once) == once


def test_listing_table_from_json(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text(json.dumps({
        "exact": {"Margot": "KLIE"},
        "keywords": [[["Opera"], "WAFG"]],
        "listings": {"Airbnb": {"Bright flat in the 1st district": "BEGA"}},
    }), encoding="utf-8")
    table = load_property_table(str(path))

    assert resolve_property_code("Margot", table=table) == "KLIE"
    assert resolve_property_code("Bright flat in the 1st district", AIRBNB, table=table) == "BEGA"
    assert resolve_property_code("Bright flat in the 1st district", BOOKING_COM, table=table) \
        == "Bright flat in the 1st district"
    assert resolve_property_code("Flat by the opera", table=table) == "WAFG"
