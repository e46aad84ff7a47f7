"""
Scomposizione del lordo in netto, USt e Ortstaxe.

Due formule convivono, usate in contesti diversi:

Formula A (export contabile BMD, una riga per prenotazione)
    netto   = lordo / (1 + Ortstaxe + USt)          default 1,132
    USt     = netto * aliquota USt
    Ortstaxe= netto * aliquota Ortstaxe
    Arrotondati a 2 decimali; la differenza di arrotondamento va sull'USt, così
    netto + USt + Ortstaxe == lordo al centesimo.

Formula B (fattura ospite, modalità configurabile per proprietà)
    netto   = lordo / (1 + USt)
    USt     = lordo - netto
    Ortstaxe= lordo * aliquota (SIMPLE) oppure netto * aliquota (VIENNA_METHOD)
    totale  = lordo + Ortstaxe    (l'Ortstaxe si aggiunge, non si scorpora)
    Ogni valore arrotondato per conto suo, senza riconciliazione.

Il lordo deve essere > 0: il controllo spetta al chiamante.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from stayledger.config import DEFAULT_CITY_TAX_RATE, DEFAULT_VAT_RATE
from stayledger.core.models import CITY_TAX_SIMPLE, CITY_TAX_VIENNA, TaxBreakdown

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # passando da str evitiamo 110.00000000000001 ereditato dal float
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_tax_breakdown_a(gross: Number,
                            vat_rate: Number = DEFAULT_VAT_RATE,
                            city_tax_rate: Number = DEFAULT_CITY_TAX_RATE) -> TaxBreakdown:
    gross = to_decimal(gross)
    vat_rate = to_decimal(vat_rate)
    city_tax_rate = to_decimal(city_tax_rate)

    net = gross / (1 + city_tax_rate + vat_rate)
    vat = net * vat_rate
    city_tax = net * city_tax_rate

    net_r, vat_r, city_r, gross_r = round2(net), round2(vat), round2(city_tax), round2(gross)
    difference = gross_r - (net_r + vat_r + city_r)

    return TaxBreakdown(net=net_r, vat=vat_r + difference, city_tax=city_r, gross=gross_r)


def compute_tax_breakdown_b(gross: Number,
                            vat_rate: Number = DEFAULT_VAT_RATE,
                            city_tax_rate: Number = DEFAULT_CITY_TAX_RATE,
                            mode: str = CITY_TAX_SIMPLE) -> TaxBreakdown:
    gross = to_decimal(gross)
    vat_rate = to_decimal(vat_rate)
    city_tax_rate = to_decimal(city_tax_rate)

    net = gross / (1 + vat_rate)
    vat = gross - net

    if mode == CITY_TAX_VIENNA:
        city_tax = net * city_tax_rate
    else:
        city_tax = gross * city_tax_rate

    total = gross + city_tax

    return TaxBreakdown(
        net=round2(net),
        vat=round2(vat),
        city_tax=round2(city_tax),
        gross=round2(gross),
        total=round2(total),
    )


def format_decimal(value: Number, use_comma: bool = False) -> str:
    """Importo con 2 decimali, separatore '.' oppure ','."""
    value = round2(value)
    if value == 0:
        value = abs(value)  # niente "-0.00"
    formatted = f"{value:.2f}"
    return formatted.replace(".", ",") if use_comma else formatted


def format_currency(amount: Number, currency: str = "EUR") -> str:
    """Formato de-AT: 1.234,56 €"""
    value = round2(amount)
    text = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    symbol = {"EUR": "€", "USD": "$", "GBP": "£"}.get(currency, currency)
    sign = "-" if value < 0 else ""
    return f"{sign}{text} {symbol}"
