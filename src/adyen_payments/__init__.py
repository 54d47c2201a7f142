"""
Public facade for the payment gateway client package.

The module re-exports the most useful pieces for integrators so they can
``from adyen_payments import ...`` without navigating the package.
"""

from .api import (
    authorise_one_click_payment,
    authorise_payment,
    authorise_recurring_payment,
    cancel_or_refund_payment,
    cancel_payment,
    capture_payment,
    configure,
    disable_recurring_contract,
    get_config,
    list_recurring_details,
    refund_payment,
    reset_config,
    set_credentials,
    set_default_params,
)
from .core import (
    AdyenError,
    Amount,
    ApiConfig,
    ApiParameters,
    AuthenticationError,
    AuthorisationResponse,
    Card,
    ConfigError,
    Credentials,
    DisableResponse,
    ListResponse,
    ModificationResponse,
    ParseError,
    PaymentService,
    ProtocolFault,
    RecurringDetail,
    RecurringService,
    Shopper,
    SoapTransport,
    StoredDetail,
    TransportError,
    TransportTimeout,
    ValidationError,
    load_api_config,
)

__all__ = (
    "AdyenError",
    "Amount",
    "ApiConfig",
    "ApiParameters",
    "AuthenticationError",
    "AuthorisationResponse",
    "Card",
    "ConfigError",
    "Credentials",
    "DisableResponse",
    "ListResponse",
    "ModificationResponse",
    "ParseError",
    "PaymentService",
    "ProtocolFault",
    "RecurringDetail",
    "RecurringService",
    "Shopper",
    "SoapTransport",
    "StoredDetail",
    "TransportError",
    "TransportTimeout",
    "ValidationError",
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
    "load_api_config",
    "refund_payment",
    "reset_config",
    "set_credentials",
    "set_default_params",
)
