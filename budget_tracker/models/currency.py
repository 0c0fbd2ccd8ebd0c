"""
Currency Reference Table

ISO 4217 currencies supported by the tracker. This is static reference
data: no lifecycle, no mutation.
"""

from decimal import Decimal
from enum import Enum


_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF",
    "CNY": "¥",
    "INR": "₹",
    "BRL": "R$",
}

_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
    "INR": "Indian Rupee",
    "BRL": "Brazilian Real",
}

# Currencies without minor units
_ZERO_DECIMAL = {"JPY"}


class Currency(str, Enum):
    """
    Supported currencies.

    The enum value is the ISO 4217 code, so Currency("USD") works
    for deserialization.
    """
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    CHF = "CHF"
    CNY = "CNY"
    INR = "INR"
    BRL = "BRL"

    @property
    def code(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        """Currency symbol for display."""
        return _SYMBOLS[self.value]

    @property
    def display_name(self) -> str:
        return _NAMES[self.value]

    @property
    def decimal_places(self) -> int:
        """Number of minor-unit digits (0 for zero-decimal currencies)."""
        return 0 if self.value in _ZERO_DECIMAL else 2

    @property
    def quantum(self) -> Decimal:
        """Exponent used to round amounts, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.decimal_places)

    def __str__(self) -> str:
        return self.value
