"""
Core primitives that implement the gateway request/response pipeline.
"""

from .codec import ActionReply, Fault, decode, encode
from .config import (
    ApiConfig,
    ApiParameters,
    Credentials,
    load_api_config,
)
from .environment import ApiEnvironment, build_environment
from .errors import (
    AdyenError,
    AuthenticationError,
    ConfigError,
    ParseError,
    ProtocolFault,
    TransportError,
    TransportTimeout,
    ValidationError,
)
from .models import Card, Contract, Shopper, StoredDetail
from .money import Amount, currency_exponent
from .payment import AuthorisationResponse, ModificationResponse, PaymentService
from .recurring import (
    CardSummary,
    DisableResponse,
    ListResponse,
    RecurringDetail,
    RecurringService,
)
from .transport import SoapTransport

__all__ = [
    "ActionReply",
    "AdyenError",
    "Amount",
    "ApiConfig",
    "ApiEnvironment",
    "ApiParameters",
    "AuthenticationError",
    "AuthorisationResponse",
    "Card",
    "CardSummary",
    "ConfigError",
    "Contract",
    "Credentials",
    "DisableResponse",
    "Fault",
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
    "build_environment",
    "currency_exponent",
    "decode",
    "encode",
    "load_api_config",
]
