import pytest

from stayledger.core.models import AIRBNB, BOOKING_COM, ROW_ERROR, ROW_SKIPPED
from stayledger.core.tokenizer import CSVStructureError
from stayledger.parsers.airbnb import parse_airbnb_csv
from stayledger.parsers.booking_csv import parse_booking_csv
from stayledger.parsers.booking_payout import parse_payout_csv

PAYOUT_HEADER = (
    "Type,Reference number,Check-in,Checkout,Guest name,Reservation status,"
    "Currency,Payment status,Amount,Payout ID"
)

PAYOUT_CSV = "\n".join([
    PAYOUT_HEADER,
    "Reservation,123,30 Jun 2025,2 Jul 2025,Jane Doe,ok,EUR,paid,110.00,P1",
    "Payout,,,,,,EUR,paid,-500.00,P1",
    "Reservation,124,1 Jul 2025,3 Jul 2025,John Roe,cancelled,EUR,paid,80.00,P1",
    "Reservation,125,1 Jul 2025,3 Jul 2025,Ann Lee,ok,EUR,paid,-20.00,P1",
    "Reservation,126,1 Jul 2025,3 Jul 2025,Bob Ray,ok,EUR,paid,abc,P1",
    "Reservation,127,31 Feb 2025,3 Jul 2025,Eva Kurz,ok,EUR,paid,50.00,P1",
])

BOOKING_CSV = "\n".join([
    "Book number,Booked on,Guest name(s),Check-in,Check-out,Status,Price,Property name,Booker country",
    '4123456789,2025-05-01,Jane Doe,2025-06-28,2025-07-02,ok,"110,00 EUR",Margot,at',
    '4123456790,2025-05-02,Max Weber,2025-06-28,2025-06-30,cancelled_by_guest,"50,00 EUR",Margot,de',
    '4123456791,2025-05-03,Eva Kurz,2025-06-28,2025-06-30,ok,"0,00 EUR",Margot,at',
    '4123456792,2025-05-04,Tom Berg,2025-06-28,31.02.2025,ok,"90,00",Margot,at',
    '4123456793,2025-05-05,,,2025-07-05,ok,"1.234,50",Home Sweet Home - Stephansdom II,at',
    '4123456794,2025-05-06,Ida Holm,2025-07-01,,ok,"70,00",Margot,se',
])

AIRBNB_CSV = "\n".join([
    "Confirmation code,Status,Guest name,Contact,# of adults,# of children,# of infants,"
    "Start date,End date,# of nights,Booked,Listing,Earnings",
    'HMABC123,Confirmed,Anna Muster,+43 1,2,1,,28/06/2025,02/07/2025,4,2025-05-01,Margot,"€1,234.56"',
    'HMABC124,Canceled by guest,Karl Ott,+43 2,1,,,01/07/2025,03/07/2025,2,2025-05-02,Margot,"€200.00"',
    'HMABC125,Confirmed,Lia Roth,+43 3,1,,,01/07/2025,03/07/2025,2,2025-05-03,Margot,"€0.00"',
    'HMABC126,Confirmed,Leo Fink,+43 4,1,,,32/06/2025,03/07/2025,2,2025-05-04,Margot,"€90.00"',
    'HMABC127,Confirmed,,+43 5,x,,,05/07/2025,08/07/2025,,2025-05-05,Denube Suites,"â‚¬300.00"',
])


def _reasons(result, kind):
    return [row.errors[0] for row in result.invalid_rows if row.kind == kind]


# ─── Payout Booking ─────────────────────────────────────────────────────────

def test_payout_scenario():
    result = parse_payout_csv(PAYOUT_CSV)

    assert len(result.valid_rows) == 1
    r = result.valid_rows[0]
    assert r.arrival_date == "2025-06-30"
    assert r.departure_date == "2025-07-02"
    assert r.nights == 2
    assert r.gross_amount == 110.0
    assert r.reservation_number == "123"
    assert r.booker_name == "Jane Doe"
    assert r.source == BOOKING_COM
    assert r.currency == "EUR"


def test_payout_skips_and_errors():
    result = parse_payout_csv(PAYOUT_CSV)

    assert result.summary == {"total": 6, "valid": 1, "invalid": 5}
    skipped = _reasons(result, ROW_SKIPPED)
    assert len(skipped) == 3
    assert all(reason.startswith("Skipped: ") for reason in skipped)
    assert "Skipped: Negative or zero amount (-20.0) - likely refund/cancellation" in skipped

    errors = _reasons(result, ROW_ERROR)
    assert errors == ["Invalid amount format: abc", "Invalid date format: 31 Feb 2025"]
    assert [row.line for row in result.errors] == [5, 6]


def test_payout_target_month():
    result = parse_payout_csv(PAYOUT_CSV, target_month="2025-06")
    assert result.valid_rows == []
    assert "Skipped: Checkout 2025-07-02 is outside target month 2025-06" in _reasons(result, ROW_SKIPPED)

    assert len(parse_payout_csv(PAYOUT_CSV, target_month="2025-07").valid_rows) == 1


def test_payout_bad_target_month():
    with pytest.raises(ValueError, match="YYYY-MM"):
        parse_payout_csv(PAYOUT_CSV, target_month="2025-7")


def test_payout_missing_required_column():
    text = PAYOUT_CSV.replace("Payment status,", "")
    with pytest.raises(CSVStructureError, match="Payment status"):
        parse_payout_csv(text)


# ─── Export prenotazioni Booking ────────────────────────────────────────────

def test_booking_reservation_valid_row():
    result = parse_booking_csv(BOOKING_CSV)
    r = result.valid_rows[0]

    assert r.reservation_number == "4123456789"
    assert r.booker_name == "Jane Doe"
    assert (r.arrival_date, r.departure_date) == ("2025-06-28", "2025-07-02")
    assert r.gross_amount == pytest.approx(110.0)
    assert r.currency == "EUR"
    assert r.nights == 4
    assert r.country == "at"
    assert r.property_code == "KLIE"


def test_booking_reservation_optional_fields():
    r = parse_booking_csv(BOOKING_CSV).valid_rows[1]

    assert r.reservation_number == "4123456793"
    assert r.booker_name == "Booking.com Guest"
    assert r.arrival_date == ""
    assert r.nights is None
    assert r.gross_amount == pytest.approx(1234.5)
    assert r.property_code == "BM"


def test_booking_reservation_invalid_rows():
    result = parse_booking_csv(BOOKING_CSV)

    assert result.summary == {"total": 6, "valid": 2, "invalid": 4}
    assert len(result.skipped) == 2
    assert _reasons(result, ROW_ERROR) == ["Invalid date format: 31.02.2025", "Check-out date is required"]


def test_booking_reservation_type_column():
    text = "\n".join([
        "Type,Reservation ID,Guest name,Check-in,Checkout,Amount,Currency",
        "Reservation,1,Jane Doe,2025-06-28,2025-07-02,110.00,eur",
        "Payout,2,,,2025-07-02,500.00,EUR",
    ])
    result = parse_booking_csv(text)

    assert [r.reservation_number for r in result.valid_rows] == ["1"]
    assert result.valid_rows[0].currency == "EUR"
    assert _reasons(result, ROW_SKIPPED) == ["Skipped: Type is 'Payout', not 'Reservation'"]


def test_booking_reservation_repeated_header_is_ignored():
    lines = BOOKING_CSV.split("\n")
    text = "\n".join([lines[0], lines[0], lines[1]])
    result = parse_booking_csv(text)
    assert result.summary == {"total": 1, "valid": 1, "invalid": 0}


# ─── Airbnb ─────────────────────────────────────────────────────────────────

def test_airbnb_valid_row():
    r = parse_airbnb_csv(AIRBNB_CSV).valid_rows[0]

    assert r.source == AIRBNB
    assert r.reservation_number == "HMABC123"
    assert (r.arrival_date, r.departure_date) == ("2025-06-28", "2025-07-02")
    assert r.gross_amount == pytest.approx(1234.56)
    assert r.guest_count == 3
    assert r.nights == 4
    assert r.currency == "EUR"
    assert r.property_code == "KLIE"


def test_airbnb_defaults_and_mojibake():
    r = parse_airbnb_csv(AIRBNB_CSV).valid_rows[1]

    assert r.booker_name == "Airbnb Guest"
    assert r.gross_amount == pytest.approx(300.0)
    assert r.nights == 3
    assert r.guest_count is None
    assert r.property_code == "LAMM"


def test_airbnb_invalid_rows():
    result = parse_airbnb_csv(AIRBNB_CSV)

    assert result.summary == {"total": 5, "valid": 2, "invalid": 3}
    assert _reasons(result, ROW_SKIPPED) == [
        "Skipped: Reservation status is 'Canceled by guest'",
        "Skipped: Negative or zero amount (0.0) - likely refund/cancellation",
    ]
    assert _reasons(result, ROW_ERROR) == ["Invalid date format: 32/06/2025"]


@pytest.mark.parametrize("parse,text", [
    (parse_payout_csv, PAYOUT_CSV),
    (parse_booking_csv, BOOKING_CSV),
    (parse_airbnb_csv, AIRBNB_CSV),
])
def test_valid_rows_are_always_positive(parse, text):
    result = parse(text)
    assert all(r.gross_amount > 0 for r in result.valid_rows)
