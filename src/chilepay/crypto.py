"""Cryptographic utilities for the Chilepay SDK.

Handles request-token signing (HS256 JWT via PyJWT), token verification and
the notification acknowledgment signature.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import jwt

from .errors import TokenError


TOKEN_LIFETIME_SECONDS = 180
TOKEN_TYPE = "api"
TOKEN_ALGORITHM = "HS256"

_RESERVED_CLAIMS = frozenset({"sub", "type", "iat", "exp"})


@dataclass(frozen=True)
class TokenClaims:
    """Claim set carried by a request token."""
    sub: str
    iat: int
    exp: int
    type: str = TOKEN_TYPE
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def issue(
        cls,
        sub: str,
        *,
        now: int | None = None,
        lifetime: int = TOKEN_LIFETIME_SECONDS,
        type: str = TOKEN_TYPE,
        extra: Mapping[str, Any] | None = None,
    ) -> TokenClaims:
        """Build claims valid for ``lifetime`` seconds starting at ``now``."""
        if lifetime <= 0:
            raise ValueError("Token lifetime must be a positive number of seconds")
        issued_at = int(time.time()) if now is None else int(now)
        extra = dict(extra or {})
        clash = _RESERVED_CLAIMS.intersection(extra)
        if clash:
            raise ValueError(f"Reserved claims cannot be overridden: {sorted(clash)}")
        return cls(
            sub=sub,
            iat=issued_at,
            exp=issued_at + lifetime,
            type=type,
            extra=extra,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "sub": self.sub,
            "type": self.type,
            "iat": self.iat,
            "exp": self.exp,
        }


def create_token(claims: TokenClaims, secret_key: str) -> str:
    """Sign ``claims`` into a ``header.payload.signature`` HS256 token."""
    return jwt.encode(claims.as_dict(), secret_key, algorithm=TOKEN_ALGORITHM)


def decode_token(
    token: str, secret_key: str, *, verify_exp: bool = True, leeway: int = 0
) -> dict[str, Any]:
    """Verify a token's signature and return its claims.

    Raises:
        TokenError: If the token is malformed, the signature does not match,
            a required claim is missing, or the token has expired.
    """
    try:
        return jwt.decode(
            token,
            secret_key,
            algorithms=[TOKEN_ALGORITHM],
            leeway=leeway,
            options={"require": ["sub", "iat", "exp"], "verify_exp": verify_exp},
        )
    except jwt.PyJWTError as exc:
        raise TokenError(f"Invalid token: {exc}") from exc


def extract_seed(transaction_or_seed: Any) -> str:
    """Pull the seed out of a transaction record, or accept a bare seed."""
    if isinstance(transaction_or_seed, str):
        seed = transaction_or_seed
    elif isinstance(transaction_or_seed, Mapping):
        seed = transaction_or_seed.get("seed")
    else:
        seed = getattr(transaction_or_seed, "seed", None)

    if not isinstance(seed, str) or not seed:
        raise ValueError("A non-empty seed string or a transaction with a 'seed' is required")
    return seed


def notification_signature(transaction_or_seed: Any, secret_key: str) -> str:
    """Compute the notification acknowledgment for a transaction.

    base64(sha256(seed + secret_key)) with the ``=`` padding removed.
    """
    seed = extract_seed(transaction_or_seed)
    digest = hashlib.sha256((seed + secret_key).encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii").replace("=", "")


def verify_notification_signature(
    transaction_or_seed: Any, signature: str, secret_key: str
) -> bool:
    """Constant-time check of a notification acknowledgment."""
    try:
        expected = notification_signature(transaction_or_seed, secret_key)
    except ValueError:
        return False
    if not isinstance(signature, str):
        return False
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))
