"""Currency catalog and static fallback rates.

Both tables are plain data loaded at import time and never mutated. Order of
SUPPORTED_CURRENCIES is the order returned to clients.
"""

from typing import Dict, Tuple

BASE_CURRENCY: str = "USD"

# (code, display name, symbol)
SUPPORTED_CURRENCIES: Tuple[Tuple[str, str, str], ...] = (
    ("USD", "US Dollar", "$"),
    ("EUR", "Euro", "€"),
    ("GBP", "British Pound", "£"),
    ("JPY", "Japanese Yen", "¥"),
    ("AUD", "Australian Dollar", "A$"),
    ("CAD", "Canadian Dollar", "C$"),
    ("CHF", "Swiss Franc", "CHF"),
    ("CNY", "Chinese Yuan", "¥"),
    ("INR", "Indian Rupee", "₹"),
    ("MXN", "Mexican Peso", "$"),
    ("BRL", "Brazilian Real", "R$"),
    ("ZAR", "South African Rand", "R"),
    ("SGD", "Singapore Dollar", "S$"),
    ("HKD", "Hong Kong Dollar", "HK$"),
    ("NZD", "New Zealand Dollar", "NZ$"),
    ("KRW", "South Korean Won", "₩"),
    ("SEK", "Swedish Krona", "kr"),
    ("NOK", "Norwegian Krone", "kr"),
    ("DKK", "Danish Krone", "kr"),
    ("PLN", "Polish Zloty", "zł"),
    ("THB", "Thai Baht", "฿"),
    ("MYR", "Malaysian Ringgit", "RM"),
    ("IDR", "Indonesian Rupiah", "Rp"),
    ("PHP", "Philippine Peso", "₱"),
    ("TWD", "Taiwan Dollar", "NT$"),
    ("RUB", "Russian Ruble", "₽"),
    ("TRY", "Turkish Lira", "₺"),
    ("AED", "UAE Dirham", "د.إ"),
    ("SAR", "Saudi Riyal", "ر.س"),
    ("QAR", "Qatari Riyal", "ر.ق"),
    ("EGP", "Egyptian Pound", "E£"),
    ("ILS", "Israeli Shekel", "₪"),
    ("CZK", "Czech Koruna", "Kč"),
    ("HUF", "Hungarian Forint", "Ft"),
    ("BGN", "Bulgarian Lev", "лв"),
    ("RON", "Romanian Leu", "lei"),
    ("HRK", "Croatian Kuna", "kn"),
    ("ISK", "Icelandic Krona", "kr"),
    ("CLP", "Chilean Peso", "$"),
    ("ARS", "Argentine Peso", "$"),
    ("COP", "Colombian Peso", "$"),
    ("PEN", "Peruvian Sol", "S/"),
    ("VND", "Vietnamese Dong", "₫"),
    ("PKR", "Pakistani Rupee", "₨"),
    ("BDT", "Bangladeshi Taka", "৳"),
    ("LKR", "Sri Lankan Rupee", "Rs"),
    ("NPR", "Nepalese Rupee", "Rs"),
    ("KES", "Kenyan Shilling", "KSh"),
    ("NGN", "Nigerian Naira", "₦"),
    ("GHS", "Ghanaian Cedi", "₵"),
)

# Approximate units per 1 USD, used when no live data is available.
FALLBACK_RATES: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.5,
    "AUD": 1.53,
    "CAD": 1.38,
    "CHF": 0.88,
    "CNY": 7.24,
    "INR": 83.12,
    "MXN": 17.05,
    "BRL": 4.97,
    "ZAR": 18.65,
    "SGD": 1.34,
    "HKD": 7.81,
    "NZD": 1.68,
    "KRW": 1320.0,
    "SEK": 10.82,
    "NOK": 10.98,
    "DKK": 6.88,
    "PLN": 3.95,
    "THB": 35.5,
    "MYR": 4.47,
    "IDR": 15680.0,
    "PHP": 55.8,
    "TWD": 31.8,
    "RUB": 92.5,
    "TRY": 32.15,
    "AED": 3.67,
    "SAR": 3.75,
    "QAR": 3.64,
    "EGP": 48.75,
    "ILS": 3.72,
    "CZK": 22.8,
    "HUF": 358.0,
    "BGN": 1.8,
    "RON": 4.57,
    "HRK": 6.94,
    "ISK": 138.0,
    "CLP": 890.0,
    "ARS": 850.0,
    "COP": 4100.0,
    "PEN": 3.78,
    "VND": 24500.0,
    "PKR": 278.0,
    "BDT": 110.0,
    "LKR": 325.0,
    "NPR": 133.0,
    "KES": 154.0,
    "NGN": 775.0,
    "GHS": 15.8,
}
