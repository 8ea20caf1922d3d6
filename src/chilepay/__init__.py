"""Chilepay SDK: Python client for the Chilepay payment API."""
from .client import Chilepay, parse_response, KHIPU, PROVIDERS, WEBPAY
from .config import ChilepayConfig
from .errors import (
    ChilepayError,
    ChilepayRequestError,
    ConfigError,
    ResponseDecodeError,
    TokenError,
    ValidationError,
)
from .crypto import (
    TOKEN_ALGORITHM,
    TOKEN_LIFETIME_SECONDS,
    TokenClaims,
    create_token,
    decode_token,
    notification_signature,
    verify_notification_signature,
)
from .types import ApiResult

__all__ = [
    "Chilepay",
    "ChilepayConfig",
    "ApiResult",
    "parse_response",
    "WEBPAY",
    "KHIPU",
    "PROVIDERS",
    "ChilepayError",
    "ChilepayRequestError",
    "ConfigError",
    "ResponseDecodeError",
    "TokenError",
    "ValidationError",
    "TOKEN_ALGORITHM",
    "TOKEN_LIFETIME_SECONDS",
    "TokenClaims",
    "create_token",
    "decode_token",
    "notification_signature",
    "verify_notification_signature",
]
