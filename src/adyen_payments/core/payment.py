"""
Payment service: authorisations and modifications of existing payments.

Note that modification replies (capture, refund, cancel, cancel-or-refund)
only confirm that the gateway *received* the request. Whether it succeeded
is reported later through the gateway's notifications, so store every
notification the gateway sends and key it on the PSP reference.
The same holds for recurring authorisations, whose result is provisional
until the matching notification arrives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from .codec import ActionReply
from .errors import ParseError, ValidationError
from .models import Card, Contract, PaymentMethod, Shopper, StoredDetail
from .money import Amount
from .service import SoapService, require

__all__ = [
    "AuthorisationResponse",
    "ModificationResponse",
    "PaymentService",
]


@dataclass(frozen=True)
class AuthorisationResponse:
    """
    Outcome of an authorisation request.

    A reply the gateway answered without a fault is never an error, even
    when the payment was refused: inspect :attr:`authorised` instead.
    Optional fields the gateway did not send are ``None``.
    """

    AUTHORISED = "Authorised"
    REFUSED = "Refused"
    REDIRECT_SHOPPER = "RedirectShopper"

    psp_reference: str
    result_code: str
    auth_code: Optional[str] = None
    refusal_reason: Optional[str] = None
    fraud_score: Optional[int] = None
    issuer_url: Optional[str] = None
    md: Optional[str] = None
    pa_request: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def authorised(self) -> bool:
        return self.result_code == self.AUTHORISED

    success = authorised

    @property
    def refused(self) -> bool:
        return self.result_code == self.REFUSED

    @property
    def redirect_shopper(self) -> bool:
        """True when the shopper must complete 3-D Secure at ``issuer_url``."""
        return self.result_code == self.REDIRECT_SHOPPER

    @classmethod
    def from_reply(cls, reply: ActionReply) -> "AuthorisationResponse":
        return cls(
            psp_reference=reply.get("pspReference"),
            result_code=reply.get("resultCode"),
            auth_code=reply.get("authCode"),
            refusal_reason=reply.get("refusalReason"),
            fraud_score=_fraud_score(reply.get("fraudResult")),
            issuer_url=reply.get("issuerUrl"),
            md=reply.get("md"),
            pa_request=reply.get("paRequest"),
            raw=reply.fields,
        )


def _fraud_score(fraud_result: Any) -> Optional[int]:
    if not isinstance(fraud_result, Mapping):
        return None
    score = fraud_result.get("accountScore")
    if score is None or score == "":
        return None
    try:
        return int(score)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Fraud score {score!r} is not an integer") from exc


@dataclass(frozen=True)
class ModificationResponse:
    """
    Acknowledgement of a capture, refund, cancel or cancel-or-refund.

    :attr:`received` only says the gateway accepted the request for
    processing. The actual outcome arrives asynchronously as a notification
    for :attr:`psp_reference`.
    """

    action: str
    psp_reference: str
    response: str

    @property
    def received(self) -> bool:
        return self.response == f"[{self.action}-received]"

    success = received


class PaymentService(SoapService):
    """
    Authorise payments and modify authorised payments.

    Example::

        service = PaymentService(config)
        response = service.authorise_payment(
            "invoice-1",
            Amount("EUR", 1050),
            Shopper(reference="user-1", email="s.hopper@example.com", ip="61.294.12.12"),
            Card("Simon Hopper", "4444333322221111", "737", 12, 2030),
        )
        response.authorised  # True
    """

    endpoint_attribute = "payment_url"

    def authorise(
        self,
        reference: str,
        amount: Amount | Mapping[str, Any],
        shopper: Shopper | Mapping[str, Any],
        *,
        card: Card | Mapping[str, Any] | None = None,
        stored_detail: Optional[StoredDetail] = None,
        enable_recurring_contract: bool = False,
    ) -> AuthorisationResponse:
        """
        Authorise a payment with exactly one payment method.

        Pass ``card`` for a regular card payment or ``stored_detail`` for a
        recurring or one-click payment on previously stored details.
        ``enable_recurring_contract`` asks the gateway to store ``card`` for
        later recurring and one-click payments.
        """
        method = _select_method(card, stored_detail)
        require(reference=reference, amount=amount, shopper=shopper)
        amount = Amount.coerce(amount)
        shopper = Shopper.coerce(shopper)

        if isinstance(method, StoredDetail):
            if enable_recurring_contract:
                raise ValidationError(
                    "enable_recurring_contract",
                    "Stored details are already stored; enable_recurring_contract "
                    "only applies to card payments",
                )
            missing = list(method.missing_fields())
            if not shopper.reference:
                missing.append("shopper.reference")
            if not shopper.email:
                missing.append("shopper.email")
            if missing:
                raise ValidationError(missing)
            payment_fields = _stored_detail_fields(method)
        else:
            payment_fields = _card_fields(method, enable_recurring_contract)

        fields = [
            ("merchantAccount", self.merchant_account),
            ("reference", str(reference)),
            ("amount", amount),
            *payment_fields,
            ("shopperEmail", shopper.email),
            ("shopperReference", _optional_str(shopper.reference)),
            ("shopperIP", shopper.ip),
        ]
        reply = self._call("authorise", fields)
        return AuthorisationResponse.from_reply(reply)

    def authorise_payment(
        self,
        reference: str,
        amount: Amount | Mapping[str, Any],
        shopper: Shopper | Mapping[str, Any],
        card: Card | Mapping[str, Any],
        enable_recurring_contract: bool = False,
    ) -> AuthorisationResponse:
        require(card=card)
        return self.authorise(
            reference,
            amount,
            shopper,
            card=card,
            enable_recurring_contract=enable_recurring_contract,
        )

    def authorise_recurring_payment(
        self,
        reference: str,
        amount: Amount | Mapping[str, Any],
        shopper: Shopper | Mapping[str, Any],
        recurring_detail_reference: Optional[str] = None,
    ) -> AuthorisationResponse:
        """
        Charge stored details without the shopper being present.

        When ``recurring_detail_reference`` is omitted the gateway uses the
        shopper's latest stored details.
        """
        return self.authorise(
            reference,
            amount,
            shopper,
            stored_detail=StoredDetail.recurring(recurring_detail_reference),
        )

    def authorise_one_click_payment(
        self,
        reference: str,
        amount: Amount | Mapping[str, Any],
        shopper: Shopper | Mapping[str, Any],
        card_cvc: str,
        recurring_detail_reference: Optional[str] = None,
    ) -> AuthorisationResponse:
        """
        Charge stored details on the shopper's request, confirmed with the card's cvc.
        """
        return self.authorise(
            reference,
            amount,
            shopper,
            stored_detail=StoredDetail.one_click(card_cvc, recurring_detail_reference),
        )

    def capture(self, psp_reference: str, amount: Amount | Mapping[str, Any]) -> ModificationResponse:
        return self._modify("capture", psp_reference, amount)

    def refund(self, psp_reference: str, amount: Amount | Mapping[str, Any]) -> ModificationResponse:
        return self._modify("refund", psp_reference, amount)

    def cancel(self, psp_reference: str) -> ModificationResponse:
        return self._modify("cancel", psp_reference)

    def cancel_or_refund(self, psp_reference: str) -> ModificationResponse:
        """
        Cancel the payment, or refund it when it was already captured.

        Use this when the current state of the payment is unknown.
        """
        return self._modify("cancelOrRefund", psp_reference)

    def _modify(
        self,
        action: str,
        psp_reference: str,
        amount: Amount | Mapping[str, Any] | None = None,
    ) -> ModificationResponse:
        with_amount = action in ("capture", "refund")
        if with_amount:
            require(psp_reference=psp_reference, amount=amount)
            amount = Amount.coerce(amount)
        else:
            require(psp_reference=psp_reference)

        fields: List[Tuple[str, Any]] = [
            ("merchantAccount", self.merchant_account),
            ("originalReference", psp_reference),
        ]
        if with_amount:
            fields.append(("modificationAmount", amount))
        reply = self._call(action, fields)
        return ModificationResponse(
            action=action,
            psp_reference=reply.get("pspReference"),
            response=reply.get("response"),
        )


def _select_method(card: Any, stored_detail: Optional[StoredDetail]) -> PaymentMethod:
    if card is not None and stored_detail is not None:
        raise ValidationError(
            ("card", "stored_detail"),
            "Supply either card details or a stored detail reference, not both",
        )
    if stored_detail is not None:
        if not isinstance(stored_detail, StoredDetail):
            raise ValidationError("stored_detail", f"Cannot interpret {stored_detail!r} as stored detail")
        return stored_detail
    if card is None:
        raise ValidationError(
            ("card", "stored_detail"),
            "Supply card details or a stored detail reference",
        )
    return Card.coerce(card)


def _card_fields(card: Card, enable_recurring_contract: bool) -> List[Tuple[str, Any]]:
    missing = card.missing_fields()
    if missing:
        raise ValidationError(missing)
    try:
        expiry_month = card.formatted_expiry_month
    except (TypeError, ValueError) as exc:
        raise ValidationError("card.expiry_month") from exc

    fields: List[Tuple[str, Any]] = [
        (
            "card",
            [
                ("holderName", card.holder_name),
                ("number", card.number),
                ("cvc", card.cvc),
                ("expiryYear", str(card.expiry_year)),
                ("expiryMonth", expiry_month),
            ],
        )
    ]
    if enable_recurring_contract:
        fields.append(("recurring", [("contract", Contract.RECURRING_AND_ONECLICK)]))
    return fields


def _stored_detail_fields(detail: StoredDetail) -> List[Tuple[str, Any]]:
    fields: List[Tuple[str, Any]] = []
    if detail.contract == Contract.ONECLICK:
        fields.append(("card", [("cvc", detail.cvc)]))
    fields.append(("recurring", [("contract", detail.contract)]))
    fields.append(("selectedRecurringDetailReference", detail.reference))
    if detail.contract == Contract.RECURRING:
        fields.append(("shopperInteraction", "ContAuth"))
    return fields


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)
