"""
Exception hierarchy shared by every part of the gateway client.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

__all__ = [
    "AdyenError",
    "AuthenticationError",
    "ConfigError",
    "ParseError",
    "ProtocolFault",
    "TransportError",
    "TransportTimeout",
    "ValidationError",
]


class AdyenError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(AdyenError):
    """Raised when the supplied configuration is invalid or incomplete."""


class ValidationError(AdyenError):
    """
    Raised when request inputs are missing or contradict each other.

    ``fields`` names every offending field, using dotted paths for nested
    values (``card.cvc``, ``shopper.email``).
    """

    def __init__(self, fields: Iterable[str] | str, message: Optional[str] = None) -> None:
        if isinstance(fields, str):
            fields = (fields,)
        self.fields: Tuple[str, ...] = tuple(fields)
        if message is None:
            message = "Missing or invalid field(s): " + ", ".join(self.fields)
        super().__init__(message)


class TransportError(AdyenError):
    """Raised when the HTTP exchange itself failed."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransportTimeout(TransportError):
    """The gateway did not answer within the configured timeout."""


class AuthenticationError(TransportError):
    """The gateway rejected the supplied credentials."""


class ProtocolFault(AdyenError):
    """The gateway answered with a SOAP fault instead of an action reply."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class ParseError(AdyenError):
    """The reply could not be decoded according to the wire schema."""
