"""Dataclasses for Chilepay SDK response types."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import ChilepayRequestError


@dataclass(frozen=True)
class ApiResult:
    """Outcome of a single API call.

    ``data`` holds the parsed JSON body. On a remote rejection it is the
    API's error body, untouched. ``error`` is set for validation, transport
    and decoding failures.
    """
    success: bool
    status_code: int | None = None
    data: Any = None
    error: Exception | None = None

    @classmethod
    def ok(cls, data: Any, status_code: int) -> ApiResult:
        return cls(success=True, status_code=status_code, data=data)

    @classmethod
    def failure(
        cls,
        *,
        data: Any = None,
        status_code: int | None = None,
        error: Exception | None = None,
    ) -> ApiResult:
        return cls(success=False, status_code=status_code, data=data, error=error)

    @property
    def failed(self) -> bool:
        return not self.success

    def unwrap(self) -> Any:
        """Return ``data`` on success, raise ChilepayRequestError otherwise."""
        if not self.success:
            raise ChilepayRequestError(self)
        return self.data
