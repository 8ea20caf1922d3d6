"""Error classes for the Chilepay SDK."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ApiResult


class ChilepayError(Exception):
    """Base error for Chilepay SDK operations."""

    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class ConfigError(ChilepayError, ValueError):
    """Raised when credentials or client settings are invalid."""

    def __init__(self, message: str):
        super().__init__("CONFIG_ERROR", message)


class ValidationError(ChilepayError, ValueError):
    """Malformed call arguments. Returned inside a failed result, not raised."""

    def __init__(self, message: str):
        super().__init__("VALIDATION_ERROR", message)


class ResponseDecodeError(ChilepayError):
    """The API answered with a body that is not valid JSON."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("INVALID_RESPONSE", message, status_code)


class TokenError(ChilepayError):
    """A signed token is malformed, forged or expired."""

    def __init__(self, message: str):
        super().__init__("INVALID_TOKEN", message)


class ChilepayRequestError(ChilepayError):
    """Raised by ApiResult.unwrap() (failures are also returned as results)."""

    def __init__(self, result: ApiResult):
        if result.error is not None:
            code = getattr(result.error, "code", type(result.error).__name__)
            message = str(result.error)
        else:
            code = "API_ERROR"
            message = f"HTTP {result.status_code}: {result.data!r}"
        super().__init__(code, message, result.status_code)
        self.result: ApiResult = result
