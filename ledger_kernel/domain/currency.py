"""Currency -- ISO 4217 registry with minor units and display symbols."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str

    @property
    def rounding_tolerance(self) -> Decimal:
        """Smallest representable amount in this currency's minor unit."""
        if self.decimal_places == 0:
            return Decimal("1")
        return Decimal("0." + "0" * (self.decimal_places - 1) + "1")

    @property
    def quantize_string(self) -> str:
        """String for Decimal.quantize() to round to this currency's precision."""
        if self.decimal_places == 0:
            return "1"
        return "0." + "0" * self.decimal_places


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies the bookkeeping portals trade in.

    Rate tables may carry their own symbols; the registry supplies the
    fallback symbol and the ISO minor units used when a formatter is asked
    to honour them.
    """

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        # Rate-table currencies of the multi-currency screen
        "USD": CurrencyInfo("USD", 2, "US Dollar", "$"),
        "EUR": CurrencyInfo("EUR", 2, "Euro", "€"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling", "£"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar", "C$"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar", "A$"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen", "¥"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee", "₹"),
        "NGN": CurrencyInfo("NGN", 2, "Nigerian Naira", "₦"),
        "ZAR": CurrencyInfo("ZAR", 2, "South African Rand", "R"),
        "KES": CurrencyInfo("KES", 2, "Kenyan Shilling", "KSh"),
        "GHS": CurrencyInfo("GHS", 2, "Ghanaian Cedi", "₵"),
        "EGP": CurrencyInfo("EGP", 2, "Egyptian Pound", "E£"),
        # Other majors
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc", "CHF"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan", "¥"),
        "HKD": CurrencyInfo("HKD", 2, "Hong Kong Dollar", "HK$"),
        "NZD": CurrencyInfo("NZD", 2, "New Zealand Dollar", "NZ$"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar", "S$"),
        "SEK": CurrencyInfo("SEK", 2, "Swedish Krona", "kr"),
        "NOK": CurrencyInfo("NOK", 2, "Norwegian Krone", "kr"),
        "DKK": CurrencyInfo("DKK", 2, "Danish Krone", "kr"),
        "MXN": CurrencyInfo("MXN", 2, "Mexican Peso", "MX$"),
        "BRL": CurrencyInfo("BRL", 2, "Brazilian Real", "R$"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham", "AED"),
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal", "SAR"),
        "UGX": CurrencyInfo("UGX", 0, "Ugandan Shilling", "USh"),
        "TZS": CurrencyInfo("TZS", 2, "Tanzanian Shilling", "TSh"),
        "RWF": CurrencyInfo("RWF", 0, "Rwandan Franc", "FRw"),
        "XOF": CurrencyInfo("XOF", 0, "West African CFA Franc", "CFA"),
        "XAF": CurrencyInfo("XAF", 0, "Central African CFA Franc", "FCFA"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won", "₩"),
        "VND": CurrencyInfo("VND", 0, "Vietnamese Dong", "₫"),
        "CLP": CurrencyInfo("CLP", 0, "Chilean Peso", "CLP$"),
        # Three decimal currencies
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar", "BD"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar", "KD"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial", "OMR"),
        "JOD": CurrencyInfo("JOD", 3, "Jordanian Dinar", "JD"),
        "TND": CurrencyInfo("TND", 3, "Tunisian Dinar", "DT"),
    }

    # Fallback for codes a tenant defines that the registry does not know
    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is known to the registry."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """ISO minor units for a currency (default 2 for unknown codes)."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    @classmethod
    def get_symbol(cls, code: str) -> str:
        """Display symbol for a currency; the code itself when unknown."""
        info = cls.get_info(code)
        return info.symbol if info else code.upper().strip()

    @classmethod
    def get_rounding_tolerance(cls, code: str) -> Decimal:
        """Rounding tolerance derived from currency precision."""
        places = cls.get_decimal_places(code)
        if places == 0:
            return Decimal("1")
        return Decimal("0." + "0" * (places - 1) + "1")

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        return frozenset(cls._CURRENCIES.keys())
