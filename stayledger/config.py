"""
Configurazione centralizzata - modifica qui mapping colonne, proprietà e aliquote.

Le tabelle sono dati, non logica: per supportare una nuova variante di export
basta aggiungere lo spelling dell'intestazione nella lista giusta.
L'ordine conta: vince il primo spelling trovato.
"""

# ─── Aliquote di default (Austria) ──────────────────────────────────────────

DEFAULT_VAT_RATE = 0.10         # USt 10% Beherbergung
DEFAULT_CITY_TAX_RATE = 0.032   # Ortstaxe Wien 3,2%
DEFAULT_CURRENCY = "EUR"

# ─── Export contabile BMD ───────────────────────────────────────────────────

ACCOUNT_GROSS = "200000"      # riga A: ricavo lordo
ACCOUNT_NET = "8001"          # riga B: ricavo netto + USt
ACCOUNT_CITY_TAX = "8003"     # riga C: Ortstaxe
VOUCHER_SYMBOL = "AR"
ACCOUNTING_HEADER = "konto;belegnr;belegdat;symbol;betrag;steuer;text"

SOURCE_TAGS = {
    "BookingCom": "Booking.com",
    "Airbnb": "AirBnB",
}

GUEST_PLACEHOLDERS = {
    "BookingCom": "Booking.com Guest",
    "Airbnb": "Airbnb Guest",
}
UNKNOWN_GUEST = "Unknown Guest"

# Proprietà usata dal formato BMD + prenotazioni quando il file non la indica
RECONCILIATION_DEFAULT_PROPERTY = "KLIE"

INVOICE_SERVICE_DESCRIPTION = "Beherbergung / Nächtigung"

# ─── Valute ─────────────────────────────────────────────────────────────────

CURRENCY_CODES = ["EUR", "USD", "GBP", "CHF", "CAD", "AUD", "JPY", "CNY"]
CURRENCY_SYMBOLS = {"€": "EUR", "$": "USD", "£": "GBP"}

# Simboli come arrivano quando il CSV UTF-8 viene letto come latin-1/cp1252
MOJIBAKE_SYMBOLS = ["â‚¬", "Â£", "Â¥", "â‚¹", "Â"]

# ─── Mapping intestazioni per dialetto ──────────────────────────────────────

# Export prenotazioni Booking.com (Extranet → Prenotazioni → Scarica)
BOOKING_RESERVATION_COLUMNS = {
    "reservation_id": [
        "Reference number", "Reservation ID", "Booking ID", "Book number",
        "ReservationID", "BookingID", "Reservation number", "ID",
    ],
    "guest_name": [
        "Guest name", "Booker name", "Guest name(s)", "Guest",
        "Customer Name", "Customer", "Name",
    ],
    "check_in": ["Check-in", "Check-in Date", "Arrival", "CheckIn", "Check In Date"],
    "check_out": [
        "Checkout", "Check-out Date", "Departure", "Check-out", "CheckOut", "Check Out Date",
    ],
    "amount_gross": [
        "Amount", "Total payment", "Gross Amount", "Total", "Total Amount", "Price", "Gross Price",
    ],
    "currency": ["Currency", "Curr"],
    "property_name": ["Property name", "Property", "Hotel name", "Location"],
    "guest_address": ["Address", "Guest Address", "Customer Address"],
    "country": ["Country", "Guest Country", "Customer Country", "Booker country"],
    "nights": ["Nights", "Number of Nights", "Duration (nights)", "Stay Duration", "Room nights"],
    "status": ["Status", "Reservation status"],
    "type": ["Type"],
}

# Export mensile payout Booking.com: intestazioni esatte, niente varianti
BOOKING_PAYOUT_COLUMNS = {
    "type": ["Type"],
    "reservation_id": ["Reference number"],
    "check_in": ["Check-in"],
    "check_out": ["Checkout"],
    "guest_name": ["Guest name"],
    "status": ["Reservation status"],
    "currency": ["Currency"],
    "payment_status": ["Payment status"],
    "amount_gross": ["Amount"],
}
BOOKING_PAYOUT_OPTIONAL_COLUMNS = {
    "property_name": ["Property name", "Property"],
    "payout_id": ["Payout ID"],
}

# Export prenotazioni Airbnb (Hosting → Prenotazioni → Esporta)
AIRBNB_COLUMNS = {
    "reservation_id": ["Confirmation code", "Confirmation Code", "Codice di Conferma"],
    "status": ["Status", "Stato"],
    "guest_name": ["Guest name", "Guest", "Ospite"],
    "adults": ["# of adults", "Adults"],
    "children": ["# of children", "Children"],
    "infants": ["# of infants", "Infants"],
    "check_in": ["Start date", "Start Date", "Check-in", "Data di inizio"],
    "check_out": ["End date", "End Date", "Checkout", "Data di fine"],
    "nights": ["# of nights", "Nights", "Notti"],
    "property_name": ["Listing", "Listing name", "Annuncio"],
    "amount_gross": ["Earnings", "Gross earnings", "Guadagni lordi", "Amount"],
    "currency": ["Currency", "Valuta"],
}

# Lista BMD (export contabile già importato): posizioni fisse
LEDGER_COLUMNS = {
    "account": ["konto"],
    "voucher_number": ["belegnr"],
    "voucher_date": ["belegdat"],
    "symbol": ["symbol"],
    "amount": ["betrag"],
    "tax_amount": ["steuer"],
    "memo": ["text"],
}
LEDGER_POSITIONS = {
    "account": 0, "voucher_number": 1, "voucher_date": 2, "symbol": 3,
    "amount": 4, "tax_amount": 5, "memo": 6,
}

# File prenotazioni del formato riconciliazione
RECONCILIATION_RESERVATION_COLUMNS = {
    "reservation_id": ["Book number", "Reservation number", "Reference number"],
    "status": ["Status"],
    "amount_gross": ["Price", "Total payment"],
    "guest_name": ["Guest name(s)", "Booker name", "Guest name"],
    "check_in": ["Check-in", "Arrival"],
    "check_out": ["Check-out", "Departure"],
    "property_name": ["Property name", "Property"],
}

# ─── Proprietà ──────────────────────────────────────────────────────────────

# Nome struttura esatto → codice interno
PROPERTY_CODE_MAP = {
    "Home Sweet Home - Vienna Central": "BEGA",
    "Home Sweet Home - State Opera": "WAFG",
    "Home Sweet Home - Leopold": "LAS",
    "Home Sweet Home - Stephansdom": "KRA",
    "Home Sweet Home - Stephansdom II": "BM",
    "Margot": "KLIE",
    "Denube Suites": "LAMM",
    "Céleste Suites": "ZIMM",
}

# Nomi annuncio esatti per sorgente (valutati dopo PROPERTY_CODE_MAP)
LISTING_CODE_MAP = {
    "BookingCom": {},
    "Airbnb": {},
}

# Fallback per sottostringa (case-insensitive), in ordine di priorità:
# "stephansdom ii" PRIMA di "stephansdom", altrimenti BM diventa KRA.
PROPERTY_KEYWORDS = [
    (("vienna central", "bechardgasse"), "BEGA"),
    (("state opera", "walfischgasse"), "WAFG"),
    (("leopold", "lassallestraße", "lassallestrasse"), "LAS"),
    (("stephansdom ii", "bauernmarkt"), "BM"),
    (("stephansdom", "kramergasse"), "KRA"),
    (("margot", "kliebergasse"), "KLIE"),
    (("denube",), "LAMM"),
    (("céleste", "celeste"), "ZIMM"),
]
