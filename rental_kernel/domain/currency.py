"""
Currency registry.

Rental prices are quoted in the currency of the building site's country.
Each code maps to its ISO 4217 minor-unit precision, which drives
``Money.round()``. Unknown codes are not accepted anywhere.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    decimal_places: int
    name: str

    @property
    def quantize_exponent(self) -> Decimal:
        """``Decimal.quantize`` exponent, e.g. ``0.01`` for two places."""
        return Decimal(1).scaleb(-self.decimal_places)


def _registry(*entries: tuple[str, int, str]) -> dict[str, CurrencyInfo]:
    return {code: CurrencyInfo(code, places, name) for code, places, name in entries}


class CurrencyRegistry:
    """Known currencies and their precision."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = _registry(
        ("BRL", 2, "Brazilian Real"),
        ("ARS", 2, "Argentine Peso"),
        ("CLP", 0, "Chilean Peso"),
        ("COP", 2, "Colombian Peso"),
        ("PEN", 2, "Peruvian Sol"),
        ("PYG", 0, "Paraguayan Guarani"),
        ("UYU", 2, "Uruguayan Peso"),
        ("MXN", 2, "Mexican Peso"),
        ("USD", 2, "US Dollar"),
        ("CAD", 2, "Canadian Dollar"),
        ("EUR", 2, "Euro"),
        ("GBP", 2, "Pound Sterling"),
        ("CHF", 2, "Swiss Franc"),
        ("JPY", 0, "Japanese Yen"),
        ("KWD", 3, "Kuwaiti Dinar"),
        ("BHD", 3, "Bahraini Dinar"),
    )

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return code in cls._CURRENCIES

    @classmethod
    def info(cls, code: str) -> CurrencyInfo:
        """
        Raises:
            KeyError: for an unknown code.
        """
        return cls._CURRENCIES[code]
