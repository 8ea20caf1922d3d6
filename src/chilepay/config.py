"""Configuration objects for the Chilepay client."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigError

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_API_VERSION",
    "DEFAULT_TIMEOUT",
    "ChilepayConfig",
]

DEFAULT_API_URL = "https://api.chilepay.cl"
DEFAULT_API_VERSION = "dev"
DEFAULT_TIMEOUT = 30.0

_ENV_KEYS = {
    "api_key": "CHILEPAY_API_KEY",
    "secret_key": "CHILEPAY_SECRET_KEY",
    "base_url": "CHILEPAY_API_URL",
    "api_version": "CHILEPAY_API_VERSION",
    "timeout": "CHILEPAY_TIMEOUT",
}


def _require_credential(value: Any, field_name: str) -> str:
    if value is None:
        raise ConfigError(f"{field_name} is missing")
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string")
    if not value.strip():
        raise ConfigError(f"{field_name} must not be empty")
    return value


def _require_setting(value: Any, field_name: str) -> None:
    if not isinstance(value, str):
        raise ConfigError(f"{field_name} must be a string, got {type(value).__name__}")
    if not value.strip("/ "):
        raise ConfigError(f"{field_name} must not be empty")


def _or_default(value: Any, default: Any) -> Any:
    if value is None or value == "":
        return default
    return value


def _to_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout must be a number of seconds, got {value!r}") from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError("timeout must be a finite number greater than zero")
    return timeout


@dataclass(frozen=True)
class ChilepayConfig:
    """Credentials and connection settings for :class:`chilepay.Chilepay`.

    Both credentials are required and validated on construction, so a bad
    configuration fails before any request is attempted.
    """

    api_key: str
    secret_key: str
    base_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        _require_credential(self.api_key, "api_key")
        _require_credential(self.secret_key, "secret_key")
        _require_setting(self.base_url, "base_url")
        _require_setting(self.api_version, "api_version")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "api_version", self.api_version.strip("/"))
        object.__setattr__(self, "timeout", _to_timeout(self.timeout))

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{self.api_version}/{path.lstrip('/')}"

    def __repr__(self) -> str:
        return (
            f"ChilepayConfig(api_key={self.api_key!r}, secret_key='***', "
            f"base_url={self.base_url!r}, api_version={self.api_version!r}, "
            f"timeout={self.timeout!r})"
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ChilepayConfig":
        """Build a config from a plain mapping.

        Accepts ``apiKey``/``secretKey`` as well as ``api_key``/``secret_key``.
        """
        if not isinstance(values, Mapping):
            raise ConfigError(
                f"config must be a ChilepayConfig or a mapping, got {type(values).__name__}"
            )
        api_key = values.get("api_key", values.get("apiKey"))
        secret_key = values.get("secret_key", values.get("secretKey"))
        return cls(
            api_key=api_key,
            secret_key=secret_key,
            base_url=_or_default(values.get("base_url"), DEFAULT_API_URL),
            api_version=_or_default(values.get("api_version"), DEFAULT_API_VERSION),
            timeout=_or_default(values.get("timeout"), DEFAULT_TIMEOUT),
        )

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ChilepayConfig":
        """Build a config from ``CHILEPAY_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls.from_mapping(
            {name: env.get(env_key) for name, env_key in _ENV_KEYS.items()}
        )
