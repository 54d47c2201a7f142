"""
Money amounts expressed in minor currency units.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from .errors import ValidationError

__all__ = ["Amount", "currency_exponent"]

# ISO 4217 currencies whose minor unit is not 1/100.
_ZERO_DECIMAL = frozenset(
    {
        "BIF", "CLP", "DJF", "GNF", "ISK", "JPY", "KMF", "KRW", "PYG",
        "RWF", "UGX", "UYI", "VND", "VUV", "XAF", "XOF", "XPF",
    }
)
_THREE_DECIMAL = frozenset({"BHD", "IQD", "JOD", "KWD", "LYD", "OMR", "TND"})


def currency_exponent(currency: str) -> int:
    """Return the number of minor-unit digits used by ``currency``."""
    code = currency.upper()
    if code in _ZERO_DECIMAL:
        return 0
    if code in _THREE_DECIMAL:
        return 3
    return 2


@dataclass(frozen=True)
class Amount:
    """
    A currency code plus an integer value in the currency's smallest unit.

    ``Amount("EUR", 1050)`` is ten euros fifty; ``Amount("JPY", 100)`` is a
    hundred yen, since the yen has no minor unit.
    """

    currency: str
    value: int

    def __post_init__(self) -> None:
        currency = self.currency
        if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
            raise ValidationError("amount.currency", f"Invalid ISO 4217 currency code: {currency!r}")
        if currency != currency.upper():
            object.__setattr__(self, "currency", currency.upper())
        value = self.value
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(
                "amount.value",
                f"Amount value must be a non-negative integer in minor units, got {value!r}",
            )

    @property
    def exponent(self) -> int:
        return currency_exponent(self.currency)

    def to_decimal(self) -> Decimal:
        return Decimal(self.value).scaleb(-self.exponent)

    def to_decimal_string(self) -> str:
        exponent = self.exponent
        if exponent == 0:
            return str(self.value)
        quantum = Decimal(1).scaleb(-exponent)
        return str(self.to_decimal().quantize(quantum))

    @classmethod
    def from_decimal_string(cls, currency: str, text: str) -> "Amount":
        """
        Parse the gateway's decimal representation back into minor units.

        Raises :class:`ValueError` when ``text`` is not a number or carries
        more precision than ``currency`` allows.
        """
        try:
            number = Decimal(text.strip())
        except (InvalidOperation, AttributeError) as exc:
            raise ValueError(f"Amount {text!r} is not a decimal number") from exc
        if not number.is_finite():
            raise ValueError(f"Amount {text!r} is not a decimal number")

        scaled = number.scaleb(currency_exponent(currency))
        integral = scaled.to_integral_value()
        if integral != scaled:
            raise ValueError(
                f"Amount {text} cannot be represented in {currency} minor units"
            )
        return cls(currency=currency, value=int(integral))

    @classmethod
    def coerce(cls, value: Any) -> "Amount":
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            missing = [key for key in ("currency", "value") if value.get(key) is None]
            if missing:
                raise ValidationError(tuple(f"amount.{key}" for key in missing))
            return cls(currency=value["currency"], value=value["value"])
        raise ValidationError("amount", f"Cannot interpret {value!r} as an amount")
