"""
Recurring service: inspect and disable payment details stored at the gateway.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from .codec import ActionReply
from .errors import ParseError, ValidationError
from .models import Contract
from .service import SoapService, require

__all__ = [
    "CardSummary",
    "DisableResponse",
    "ListResponse",
    "RecurringDetail",
    "RecurringService",
]

_FRACTION = re.compile(r"\.(\d+)")


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fractional digits.
    text = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ParseError(f"Invalid timestamp {value!r} in recurring details") from exc


@dataclass(frozen=True)
class CardSummary:
    """The non-sensitive part of a stored card; ``number`` holds the last digits only."""

    holder_name: Optional[str]
    number: Optional[str]
    expiry_month: Optional[int]
    expiry_year: Optional[int]

    @classmethod
    def from_fields(cls, values: Mapping[str, Any]) -> "CardSummary":
        return cls(
            holder_name=values.get("holderName"),
            number=values.get("number"),
            expiry_month=_optional_int(values.get("expiryMonth"), "card.expiryMonth"),
            expiry_year=_optional_int(values.get("expiryYear"), "card.expiryYear"),
        )


def _optional_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{name} {value!r} is not an integer") from exc


@dataclass(frozen=True)
class RecurringDetail:
    reference: str
    variant: Optional[str]
    creation_date: Optional[datetime]
    card: Optional[CardSummary] = None
    bank: Optional[Mapping[str, Any]] = None
    elv: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_fields(cls, values: Any) -> "RecurringDetail":
        if not isinstance(values, Mapping) or not values.get("recurringDetailReference"):
            raise ParseError(f"Recurring detail without a reference: {values!r}")
        card = values.get("card")
        return cls(
            reference=values["recurringDetailReference"],
            variant=values.get("variant"),
            creation_date=_parse_timestamp(values.get("creationDate")),
            card=CardSummary.from_fields(card) if isinstance(card, Mapping) else None,
            bank=values.get("bank") if isinstance(values.get("bank"), Mapping) else None,
            elv=values.get("elv") if isinstance(values.get("elv"), Mapping) else None,
        )


@dataclass(frozen=True)
class ListResponse(Sequence[RecurringDetail]):
    """
    The payment details stored for a shopper, in the order the gateway lists them.

    Behaves as a read-only sequence of :class:`RecurringDetail`; a shopper
    without stored details yields an empty sequence.
    """

    details: Tuple[RecurringDetail, ...] = ()
    shopper_reference: Optional[str] = None
    last_known_shopper_email: Optional[str] = None
    creation_date: Optional[datetime] = None

    def __getitem__(self, index):
        return self.details[index]

    def __len__(self) -> int:
        return len(self.details)

    def __iter__(self) -> Iterator[RecurringDetail]:
        return iter(self.details)

    @property
    def references(self) -> List[str]:
        return [detail.reference for detail in self.details]

    @classmethod
    def from_reply(cls, reply: ActionReply) -> "ListResponse":
        return cls(
            details=tuple(RecurringDetail.from_fields(item) for item in reply.get("details") or ()),
            shopper_reference=reply.get("shopperReference"),
            last_known_shopper_email=reply.get("lastKnownShopperEmail"),
            creation_date=_parse_timestamp(reply.get("creationDate")),
        )


@dataclass(frozen=True)
class DisableResponse:
    DETAIL_DISABLED = "[detail-successfully-disabled]"
    ALL_DISABLED = "[all-details-successfully-disabled]"

    response: str
    detail_reference: Optional[str] = field(default=None)

    @property
    def disabled(self) -> bool:
        return self.response in (self.DETAIL_DISABLED, self.ALL_DISABLED)

    success = disabled

    @property
    def all_disabled(self) -> bool:
        return self.response == self.ALL_DISABLED


class RecurringService(SoapService):
    """
    Manage the recurring contracts stored for shoppers.
    """

    endpoint_attribute = "recurring_url"

    def list(self, shopper_reference: str, *, contract: str = Contract.RECURRING) -> ListResponse:
        require(shopper_reference=shopper_reference)
        fields = [
            ("recurring", [("contract", contract)]),
            ("merchantAccount", self.merchant_account),
            ("shopperReference", str(shopper_reference)),
        ]
        reply = self._call("listRecurringDetails", fields)
        return ListResponse.from_reply(reply)

    def disable(
        self,
        shopper_reference: str,
        detail_reference: Optional[str] = None,
    ) -> DisableResponse:
        """
        Disable stored details for ``shopper_reference``.

        ``detail_reference=None`` disables *all* of the shopper's stored
        details; the request then carries no detail reference at all. Any
        string, including ``""``, is sent as the specific detail to disable.
        """
        require(shopper_reference=shopper_reference)
        if detail_reference is not None and not isinstance(detail_reference, str):
            raise ValidationError("detail_reference", "Detail reference must be a string or None")
        fields = [
            ("merchantAccount", self.merchant_account),
            ("shopperReference", str(shopper_reference)),
            ("recurringDetailReference", detail_reference),
        ]
        reply = self._call("disable", fields)
        return DisableResponse(response=reply.get("response"), detail_reference=detail_reference)
