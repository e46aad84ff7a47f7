import sys
from pathlib import Path

import pytest

# Radice del progetto (dove sta stayledger/) su sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from stayledger.core.models import Property, UnifiedReservation  # noqa: E402


@pytest.fixture
def reservation():
    return UnifiedReservation(
        property_name="Margot",
        booker_name="Jane Doe",
        arrival_date="2025-06-28",
        departure_date="2025-07-02",
        gross_amount=110.0,
        reservation_number="4123456789",
        property_code="KLIE",
    )


@pytest.fixture
def margot():
    return Property(id="KLIE", name="Margot", invoice_prefix="KLIE")
