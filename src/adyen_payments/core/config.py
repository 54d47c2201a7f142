"""
Configuration objects and helpers for the gateway client.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .environment import build_environment
from .errors import ConfigError

__all__ = [
    "ApiConfig",
    "ApiParameters",
    "ConfigError",
    "Credentials",
    "ENVIRONMENTS",
    "load_api_config",
]

ENVIRONMENTS = ("test", "live")
_ENDPOINT_TEMPLATE = "https://pal-{environment}.adyen.com/pal/servlet/soap/{service}"

_PARAMETER_TO_ENV_KEY = {
    "username": "ADYEN_USERNAME",
    "password": "ADYEN_PASSWORD",
    "merchant_account": "ADYEN_MERCHANT_ACCOUNT",
    "environment": "ADYEN_ENVIRONMENT",
    "payment_url": "ADYEN_PAYMENT_URL",
    "recurring_url": "ADYEN_RECURRING_URL",
    "timeout_seconds": "ADYEN_TIMEOUT_SECONDS",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Credentials:
    """
    Web-service user credentials, e.g. ``ws@Company.MyAccount``.
    """

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @property
    def complete(self) -> bool:
        return bool(self.username) and bool(self.password)

    def require(self) -> "Credentials":
        if not self.username:
            raise ConfigError("Gateway username is not configured (ADYEN_USERNAME)")
        if not self.password:
            raise ConfigError("Gateway password is not configured (ADYEN_PASSWORD)")
        return self


def default_endpoint(environment: str, service: str) -> str:
    if environment not in ENVIRONMENTS:
        raise ConfigError(
            f"ADYEN_ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}, got '{environment}'"
        )
    return _ENDPOINT_TEMPLATE.format(environment=environment, service=service)


def _freeze(params: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(params or {}))


@dataclass(frozen=True)
class ApiConfig:
    """
    Everything a request needs besides its own business fields.

    Instances are immutable: the ``with_*`` helpers return updated copies,
    which lets a process share one snapshot between many threads.
    ``default_params`` fill in request arguments, such as
    ``merchant_account``, that a caller leaves out.
    """

    credentials: Credentials = field(default_factory=Credentials)
    environment: str = "test"
    payment_url: Optional[str] = None
    recurring_url: Optional[str] = None
    timeout_seconds: Optional[float] = None
    default_params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.payment_url is None:
            object.__setattr__(self, "payment_url", default_endpoint(self.environment, "Payment"))
        if self.recurring_url is None:
            object.__setattr__(
                self, "recurring_url", default_endpoint(self.environment, "Recurring")
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigError("ADYEN_TIMEOUT_SECONDS must be greater than zero")
        object.__setattr__(self, "default_params", _freeze(self.default_params))

    def require_credentials(self) -> Credentials:
        return self.credentials.require()

    def default(self, name: str) -> Any:
        return self.default_params.get(name)

    def with_credentials(self, username: str, password: str) -> "ApiConfig":
        return replace(self, credentials=Credentials(username, password))

    def with_default_params(self, params: Mapping[str, Any]) -> "ApiConfig":
        merged = dict(self.default_params)
        merged.update(params)
        return replace(self, default_params=merged)

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ApiConfig":
        environment = values.get("ADYEN_ENVIRONMENT", "test").strip().lower()
        if environment not in ENVIRONMENTS:
            raise ConfigError(
                f"ADYEN_ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}, got '{environment}'"
            )

        timeout_raw = values.get("ADYEN_TIMEOUT_SECONDS")
        timeout_seconds: Optional[float] = None
        if timeout_raw:
            try:
                timeout_seconds = float(timeout_raw)
            except ValueError as exc:
                raise ConfigError(
                    f"ADYEN_TIMEOUT_SECONDS must be a number, got '{timeout_raw}'"
                ) from exc

        default_params: Dict[str, Any] = {}
        merchant_account = values.get("ADYEN_MERCHANT_ACCOUNT")
        if merchant_account:
            default_params["merchant_account"] = merchant_account

        return cls(
            credentials=Credentials(
                username=values.get("ADYEN_USERNAME") or None,
                password=values.get("ADYEN_PASSWORD") or None,
            ),
            environment=environment,
            payment_url=values.get("ADYEN_PAYMENT_URL") or None,
            recurring_url=values.get("ADYEN_RECURRING_URL") or None,
            timeout_seconds=timeout_seconds,
            default_params=default_params,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional["ApiParameters"] = None,
        **explicit: Any,
    ) -> "ApiConfig":
        parameter_overrides = _collect_parameter_overrides(parameters, explicit)
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        environment = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(environment.variables)


@dataclass(frozen=True)
class ApiParameters:
    """
    Explicit parameter bundle for constructing :class:`ApiConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_api_config`.
    """

    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    merchant_account: Optional[str] = None
    environment: Optional[str] = None
    payment_url: Optional[str] = None
    recurring_url: Optional[str] = None
    timeout_seconds: Optional[float | str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ApiParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if parameters is not None:
        overrides.update(parameters.as_overrides())

    for key, value in explicit.items():
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:
            raise TypeError(f"Unknown gateway parameter '{key}'") from exc
        if value is None:
            continue
        overrides[env_key] = _stringify(value)
    return overrides


def load_api_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ApiParameters] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    merchant_account: Optional[str] = None,
    environment: Optional[str] = None,
    payment_url: Optional[str] = None,
    recurring_url: Optional[str] = None,
    timeout_seconds: Optional[float | str] = None,
) -> ApiConfig:
    """
    Convenience wrapper that mirrors :meth:`ApiConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    Keyword arguments win over ``overrides``, which win over the ``.env``
    file, which only fills gaps left by the process environment.
    """
    return ApiConfig.from_env(
        env_file=env_file,
        overrides=overrides,
        base=base,
        parameters=parameters,
        username=username,
        password=password,
        merchant_account=merchant_account,
        environment=environment,
        payment_url=payment_url,
        recurring_url=recurring_url,
        timeout_seconds=timeout_seconds,
    )
