"""
Public, high-level helpers for interacting with the payment gateway.

Configure the process once at startup, then call the helpers from anywhere::

    import adyen_payments

    adyen_payments.set_credentials("ws@Company.MyAccount", "secret")
    adyen_payments.set_default_params({"merchant_account": "MyMerchant"})

    response = adyen_payments.authorise_payment(
        invoice.id,
        {"currency": "EUR", "value": invoice.amount},
        {"reference": user.id, "email": user.email, "ip": "8.8.8.8"},
        {"holder_name": "Simon Hopper", "number": "4444333322221111",
         "cvc": "737", "expiry_month": 12, "expiry_year": 2030},
    )
    response.authorised

Configuration follows a single-writer, many-reader discipline: finish
configuring before issuing concurrent requests. Every write installs a new
immutable :class:`ApiConfig` snapshot, and each call reads the snapshot
once, so a call never sees a half-applied update.

Capture, refund, cancel, cancel-or-refund and recurring authorisations only
report that the gateway received the request. Their actual outcome is
delivered later through the gateway's notifications, which must be stored
by the application.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional, Union

from .core.config import ApiConfig
from .core.models import Card, Shopper
from .core.money import Amount
from .core.payment import AuthorisationResponse, ModificationResponse, PaymentService
from .core.recurring import DisableResponse, ListResponse, RecurringService
from .core.service import Transport

__all__ = [
    "authorise_one_click_payment",
    "authorise_payment",
    "authorise_recurring_payment",
    "cancel_or_refund_payment",
    "cancel_payment",
    "capture_payment",
    "configure",
    "disable_recurring_contract",
    "get_config",
    "list_recurring_details",
    "refund_payment",
    "reset_config",
    "set_credentials",
    "set_default_params",
]

_config = ApiConfig()
_write_lock = threading.Lock()

AmountLike = Union[Amount, Mapping[str, Any]]
ShopperLike = Union[Shopper, Mapping[str, Any]]


def get_config() -> ApiConfig:
    """Return the process-wide configuration snapshot."""
    return _config


def configure(config: ApiConfig) -> ApiConfig:
    """Replace the process-wide configuration."""
    global _config
    with _write_lock:
        _config = config
    return config


def set_credentials(username: str, password: str) -> ApiConfig:
    global _config
    with _write_lock:
        _config = _config.with_credentials(username, password)
        return _config


def set_default_params(params: Mapping[str, Any]) -> ApiConfig:
    """Merge ``params`` into the default parameters; later values win."""
    global _config
    with _write_lock:
        _config = _config.with_default_params(params)
        return _config


def reset_config() -> ApiConfig:
    """Forget credentials and default parameters."""
    return configure(ApiConfig())


def _payment_service(config: Optional[ApiConfig], transport: Optional[Transport]) -> PaymentService:
    return PaymentService(config if config is not None else get_config(), transport=transport)


def _recurring_service(
    config: Optional[ApiConfig], transport: Optional[Transport]
) -> RecurringService:
    return RecurringService(config if config is not None else get_config(), transport=transport)


def authorise_payment(
    reference: str,
    amount: AmountLike,
    shopper: ShopperLike,
    card: Card | Mapping[str, Any],
    enable_recurring_contract: bool = False,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> AuthorisationResponse:
    """
    Authorise a regular card payment.

    Of the shopper fields only the IP address is optional, but it feeds the
    gateway's risk checks, so supply it anyway. Set
    ``enable_recurring_contract`` to store the card for future recurring and
    one-click payments.
    """
    return _payment_service(config, transport).authorise_payment(
        reference, amount, shopper, card, enable_recurring_contract
    )


def authorise_recurring_payment(
    reference: str,
    amount: AmountLike,
    shopper: ShopperLike,
    recurring_detail_reference: Optional[str] = None,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> AuthorisationResponse:
    """
    Authorise a payment on stored details, without the shopper present.

    Omitting ``recurring_detail_reference`` charges the latest stored details.
    """
    return _payment_service(config, transport).authorise_recurring_payment(
        reference, amount, shopper, recurring_detail_reference
    )


def authorise_one_click_payment(
    reference: str,
    amount: AmountLike,
    shopper: ShopperLike,
    card_cvc: str,
    recurring_detail_reference: Optional[str] = None,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> AuthorisationResponse:
    return _payment_service(config, transport).authorise_one_click_payment(
        reference, amount, shopper, card_cvc, recurring_detail_reference
    )


def capture_payment(
    psp_reference: str,
    amount: AmountLike,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> ModificationResponse:
    """
    Capture an authorised payment.

    The response only tells whether the request was received; check the
    notification for the actual outcome.
    """
    return _payment_service(config, transport).capture(psp_reference, amount)


def refund_payment(
    psp_reference: str,
    amount: AmountLike,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> ModificationResponse:
    """
    Refund a captured payment.

    The response only tells whether the request was received; check the
    notification for the actual outcome.
    """
    return _payment_service(config, transport).refund(psp_reference, amount)


def cancel_payment(
    psp_reference: str,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> ModificationResponse:
    return _payment_service(config, transport).cancel(psp_reference)


def cancel_or_refund_payment(
    psp_reference: str,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> ModificationResponse:
    """
    Cancel or refund a payment whose current status is unknown.
    """
    return _payment_service(config, transport).cancel_or_refund(psp_reference)


def list_recurring_details(
    shopper_reference: str,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> ListResponse:
    """
    Return the stored payment details of a shopper, in gateway order.

    A shopper without stored details gives an empty :class:`ListResponse`.
    """
    return _recurring_service(config, transport).list(shopper_reference)


def disable_recurring_contract(
    shopper_reference: str,
    detail_reference: Optional[str] = None,
    *,
    config: Optional[ApiConfig] = None,
    transport: Optional[Transport] = None,
) -> DisableResponse:
    """
    Disable one stored detail, or all of them when ``detail_reference`` is ``None``.
    """
    return _recurring_service(config, transport).disable(shopper_reference, detail_reference)
