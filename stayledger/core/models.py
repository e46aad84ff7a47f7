"""
Modelli dati: prenotazione unificata, risultato del parsing, righe contabili,
fattura e i record di impostazione (proprietà, azienda) forniti dall'esterno.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

BOOKING_COM = "BookingCom"
AIRBNB = "Airbnb"
SOURCES = (BOOKING_COM, AIRBNB)

CITY_TAX_SIMPLE = "SIMPLE"
CITY_TAX_VIENNA = "VIENNA_METHOD"

ROW_SKIPPED = "skipped"   # escluso per regola (tipo, stato, importo <= 0)
ROW_ERROR = "error"       # dato non interpretabile


@dataclass
class UnifiedReservation:
    """Una prenotazione normalizzata, indipendente dal file di origine."""
    property_name: str      # testo libero dal file, risolto poi in codice
    booker_name: str
    arrival_date: str       # YYYY-MM-DD ("" se non disponibile)
    departure_date: str     # YYYY-MM-DD
    gross_amount: float     # sempre > 0
    currency: str = "EUR"
    source: str = BOOKING_COM
    reservation_number: str = ""
    nights: Optional[int] = None
    guest_count: Optional[int] = None
    guest_address: Optional[str] = None
    country: Optional[str] = None
    property_code: Optional[str] = None
    invoice_number: Optional[str] = None  # belegnr dalla lista BMD


@dataclass
class InvalidRow:
    line: int               # numero riga dati (1 = prima riga dopo l'header)
    row: List[str]
    errors: List[str]
    kind: str = ROW_ERROR
    origin: str = ""        # dialetto / file di provenienza


@dataclass
class MatchReport:
    """Esito dell'abbinamento lista BMD ↔ prenotazioni."""
    strategy: str           # "direct" | "sequential"
    matched: int = 0
    unmatched_ledger: int = 0
    unpaired_ledger: int = 0
    unpaired_reservations: int = 0


@dataclass
class ParseResult:
    valid_rows: List[UnifiedReservation] = field(default_factory=list)
    invalid_rows: List[InvalidRow] = field(default_factory=list)
    match_report: Optional[MatchReport] = None

    @property
    def summary(self) -> Dict[str, int]:
        """Conteggi; per la lista BMD + prenotazioni anche l'esito dell'abbinamento."""
        counts = {
            "total": len(self.valid_rows) + len(self.invalid_rows),
            "valid": len(self.valid_rows),
            "invalid": len(self.invalid_rows),
        }
        if self.match_report is not None:
            report = self.match_report
            counts["matched"] = report.matched
            counts["unmatched"] = report.unmatched_ledger
            counts["unpaired"] = report.unpaired_ledger + report.unpaired_reservations
        return counts

    @property
    def skipped(self) -> List[InvalidRow]:
        return [r for r in self.invalid_rows if r.kind == ROW_SKIPPED]

    @property
    def errors(self) -> List[InvalidRow]:
        return [r for r in self.invalid_rows if r.kind == ROW_ERROR]


@dataclass(frozen=True)
class TaxBreakdown:
    net: Decimal
    vat: Decimal
    city_tax: Decimal
    gross: Decimal
    total: Optional[Decimal] = None   # solo formula B: lordo + Ortstaxe


@dataclass(frozen=True)
class AccountingRow:
    account: str
    voucher_number: str
    voucher_date: str       # YYYYMMDD
    symbol: str
    amount: str             # già formattato (punto o virgola)
    tax_amount: str
    text: str


@dataclass
class Property:
    id: str
    name: str
    address: str = ""
    invoice_prefix: str = ""
    default_currency: str = "EUR"
    vat_rate: float = 0.10
    city_tax_rate: float = 0.032
    city_tax_mode: str = CITY_TAX_SIMPLE
    service_fee: float = 0.0
    active: bool = True

    def __post_init__(self):
        for name in ("vat_rate", "city_tax_rate"):
            rate = getattr(self, name)
            if not 0 <= rate <= 1:
                raise ValueError(f"{name} must be between 0 and 1, got {rate}")
        if self.city_tax_mode not in (CITY_TAX_SIMPLE, CITY_TAX_VIENNA):
            raise ValueError(f"Unknown city tax mode: {self.city_tax_mode}")


@dataclass
class BankDetails:
    bank_name: str
    iban: str
    bic: str


@dataclass
class Company:
    legal_name: str
    address: str
    email: str
    phone: str
    tax_id: str
    bank_details: BankDetails
    footer_text: str = ""


@dataclass
class Invoice:
    """Dati della fattura passati al renderer PDF esterno."""
    invoice_number: str
    invoice_date: str       # YYYY-MM-DD (= checkout)
    property: Property
    company: Optional[Company]
    guest_name: str
    guest_address: Optional[str]
    guest_country: Optional[str]
    service_description: str
    service_period: str     # "dd.mm.yyyy - dd.mm.yyyy"
    check_in_date: str
    check_out_date: str
    nights: int
    amounts: TaxBreakdown
    currency: str
    reservation_id: str


@dataclass
class InvoiceBatch:
    invoices: List[Invoice] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
