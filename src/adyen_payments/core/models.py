"""
Value types describing the shopper and the instrument used to pay.

A payment is made with exactly one :data:`PaymentMethod`: either full
:class:`Card` details, or a :class:`StoredDetail` pointing at a payment
instrument the gateway stored during an earlier authorisation.
"""

from __future__ import annotations

from dataclasses import MISSING, dataclass, fields
from typing import Any, Mapping, Optional, Tuple, Union

from .errors import ValidationError

__all__ = [
    "Card",
    "Contract",
    "PaymentMethod",
    "Shopper",
    "StoredDetail",
    "LATEST_DETAIL",
]

LATEST_DETAIL = "LATEST"


class Contract:
    RECURRING = "RECURRING"
    ONECLICK = "ONECLICK"
    # Stores the card for both kinds of later payment.
    RECURRING_AND_ONECLICK = "RECURRING,ONECLICK"


def _from_mapping(cls, value: Any, label: str):
    if isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(value) - known)
        if unknown:
            raise ValidationError(
                tuple(f"{label}.{key}" for key in unknown),
                f"Unknown {label} field(s): {', '.join(unknown)}",
            )
        missing = [
            f.name
            for f in fields(cls)
            if f.default is MISSING and f.default_factory is MISSING and f.name not in value
        ]
        if missing:
            raise ValidationError(
                tuple(f"{label}.{name}" for name in missing),
                f"Missing {label} field(s): {', '.join(missing)}",
            )
        return cls(**value)
    raise ValidationError(label, f"Cannot interpret {value!r} as {label}")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class Shopper:
    reference: Optional[str] = None
    email: Optional[str] = None
    ip: Optional[str] = None

    @classmethod
    def coerce(cls, value: Any) -> "Shopper":
        return _from_mapping(cls, value, "shopper")


@dataclass(frozen=True)
class Card:
    holder_name: str
    number: str
    cvc: str
    expiry_month: int | str
    expiry_year: int | str

    def missing_fields(self) -> Tuple[str, ...]:
        return tuple(
            f"card.{f.name}" for f in fields(self) if _blank(getattr(self, f.name))
        )

    @property
    def formatted_expiry_month(self) -> str:
        return f"{int(self.expiry_month):02d}"

    def __repr__(self) -> str:
        number = str(self.number or "")
        masked = "*" * max(len(number) - 4, 0) + number[-4:]
        return f"Card(holder_name={self.holder_name!r}, number={masked!r})"

    @classmethod
    def coerce(cls, value: Any) -> "Card":
        return _from_mapping(cls, value, "card")


@dataclass(frozen=True)
class StoredDetail:
    """
    Reference to payment details stored at the gateway.

    ``reference`` defaults to the shopper's most recently stored detail.
    One-click payments are shopper-initiated and need the card's ``cvc``;
    recurring payments must not carry one.
    """

    contract: str = Contract.RECURRING
    reference: str = LATEST_DETAIL
    cvc: Optional[str] = None

    @classmethod
    def recurring(cls, reference: Optional[str] = None) -> "StoredDetail":
        return cls(Contract.RECURRING, LATEST_DETAIL if reference is None else reference)

    @classmethod
    def one_click(cls, cvc: str, reference: Optional[str] = None) -> "StoredDetail":
        return cls(Contract.ONECLICK, LATEST_DETAIL if reference is None else reference, cvc)

    def missing_fields(self) -> Tuple[str, ...]:
        missing = []
        if _blank(self.reference):
            missing.append("stored_detail.reference")
        if self.contract == Contract.ONECLICK and _blank(self.cvc):
            missing.append("card.cvc")
        return tuple(missing)

    def __post_init__(self) -> None:
        if self.contract not in (Contract.RECURRING, Contract.ONECLICK):
            raise ValidationError(
                "stored_detail.contract", f"Unsupported contract {self.contract!r}"
            )
        if self.contract == Contract.RECURRING and self.cvc is not None:
            raise ValidationError(
                "card.cvc", "Recurring payments are not shopper-initiated and take no cvc"
            )


PaymentMethod = Union[Card, StoredDetail]
