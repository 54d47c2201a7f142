"""
Shared request pipeline for the gateway's SOAP services.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from . import codec
from .config import ApiConfig, Credentials
from .errors import ProtocolFault, ValidationError
from .transport import SoapTransport

__all__ = ["SoapService", "Transport", "require"]


class Transport(Protocol):
    def send(
        self,
        document: bytes,
        credentials: Credentials,
        endpoint: str,
        *,
        action: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        ...


class SoapService:
    """
    Base class for one family of gateway actions.

    A service holds no per-call state, so a single instance may be shared
    between threads. Each call validates its inputs, then runs
    encode, send, decode and interpret exactly once.
    """

    endpoint_attribute = ""

    def __init__(
        self,
        config: ApiConfig,
        *,
        transport: Optional[Transport] = None,
        merchant_account: Optional[str] = None,
    ) -> None:
        if transport is None:
            transport = SoapTransport(timeout=config.timeout_seconds)
        self.config = config
        self.transport = transport
        self._merchant_account = merchant_account

    @property
    def endpoint(self) -> str:
        return getattr(self.config, self.endpoint_attribute)

    @property
    def merchant_account(self) -> str:
        account = self._merchant_account or self.config.default("merchant_account")
        if not account:
            raise ValidationError("merchant_account")
        return account

    def _call(self, action: str, fields: codec.Fields) -> codec.ActionReply:
        credentials = self.config.require_credentials()
        document = codec.encode(action, fields)
        raw = self.transport.send(
            document,
            credentials,
            self.endpoint,
            action=action,
            timeout=self.config.timeout_seconds,
        )
        envelope = codec.decode(action, raw)
        if isinstance(envelope, codec.Fault):
            logging.warning(
                "Gateway returned fault %s for %s: %s", envelope.code, action, envelope.message
            )
            raise ProtocolFault(envelope.code, envelope.message)
        return envelope


def require(**values: Any) -> None:
    """Raise :class:`ValidationError` naming every blank keyword argument."""
    missing = [
        name.replace("__", ".")
        for name, value in values.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationError(missing)
