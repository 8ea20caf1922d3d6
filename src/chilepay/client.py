"""Chilepay SDK client."""
from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import requests

from .config import ChilepayConfig
from .crypto import (
    TOKEN_LIFETIME_SECONDS,
    TokenClaims,
    create_token,
    notification_signature,
    verify_notification_signature,
)
from .errors import ResponseDecodeError, ValidationError
from .types import ApiResult

logger = logging.getLogger(__name__)

WEBPAY = "webpay"
KHIPU = "khipu"
PROVIDERS = (WEBPAY, KHIPU)

DEFAULT_FEE_PLAN = "a"


class Chilepay:
    """Chilepay payment API client.

    Example::

        chilepay = Chilepay({'apiKey': '...', 'secretKey': '...'})
        result = chilepay.init_transaction('webpay', {
            'buyerEmail': 'buyer@example.com',
            'amount': 1000,
            'currency': 'clp',
            'urlNotify': 'https://shop.example.com/notify',
            'urlReturn': 'https://shop.example.com/return',
        })
        if result.success:
            redirect_to(result.data['urlRedirection'])

    Every API call returns an :class:`ApiResult`; nothing is raised for remote
    rejections, transport errors or bad arguments.
    """

    def __init__(
        self,
        config: ChilepayConfig | Mapping[str, Any],
        *,
        session: requests.Session | None = None,
    ):
        if not isinstance(config, ChilepayConfig):
            config = ChilepayConfig.from_mapping(config)
        self._config = config
        self._owns_session = session is None
        self._session = requests.Session() if session is None else session

    @property
    def config(self) -> ChilepayConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> Chilepay:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Transactions
    # -----------------------------------------------------------------------

    def init_transaction(
        self, provider: str, parameters: Mapping[str, Any]
    ) -> ApiResult:
        """Start a payment through ``provider`` (``'webpay'`` or ``'khipu'``).

        Expected ``parameters``:

        - ``buyerEmail``: email the receipt is sent to (max 256 chars). It does
          not need to belong to a Chilepay account.
        - ``amount``: transaction amount; must be an integer for ``clp``.
        - ``currency``: ``'clp'``.
        - ``urlNotify``: where Chilepay posts the payment notification.
        - ``urlReturn``: where the buyer is redirected afterwards.
        - ``reseller`` (optional, only when selling on behalf of someone
          else): ``sellerAccountId``, ``feePerc`` and ``feeClf`` (UF, max 4
          decimals). Both fees are capped by what the seller granted through
          :meth:`init_auth`.

        The success payload carries the transaction id and the redirect URL.
        """
        if not isinstance(provider, str) or not provider:
            return ApiResult.failure(
                error=ValidationError("provider must be a non-empty string")
            )
        if not isinstance(parameters, Mapping):
            return ApiResult.failure(
                error=ValidationError("parameters must be a mapping")
            )
        if provider not in PROVIDERS:
            logger.debug("Unknown provider %r, sending anyway", provider)
        return self.post(f"transactions/{_segment(provider)}", parameters)

    def get_transaction(self, transaction_id: str) -> ApiResult:
        return self.get(f"transactions/{_segment(transaction_id)}")

    def make_notification_response(self, transaction_or_seed: Any) -> str:
        """Signature to echo back when acknowledging a payment notification.

        Accepts the seed itself or the transaction returned by
        :meth:`get_transaction` (a dict or any object with a ``seed``).
        """
        return notification_signature(transaction_or_seed, self._config.secret_key)

    def verify_notification_response(
        self, transaction_or_seed: Any, signature: str
    ) -> bool:
        return verify_notification_signature(
            transaction_or_seed, signature, self._config.secret_key
        )

    # -----------------------------------------------------------------------
    # Authorizations and accounts
    # -----------------------------------------------------------------------

    def init_auth(self, parameters: Mapping[str, Any]) -> ApiResult:
        """Ask a user to authorize this account.

        ``parameters`` holds ``urlResponseNotify`` and a ``scope`` object:
        ``additionalInfo`` (bool) to read the user's id, name, email and
        active services, and ``reseller`` with ``feePerc``/``feeClf`` to sell
        in the user's name.
        """
        if not isinstance(parameters, Mapping):
            return ApiResult.failure(
                error=ValidationError("parameters must be a mapping")
            )
        return self.post("auth", parameters)

    def get_auth_account(self, account_id: str) -> ApiResult:
        return self.get(f"auth/{_segment(account_id)}")

    def get_account(self, account_id: str) -> ApiResult:
        return self.get(f"accounts/{_segment(account_id)}")

    def get_fees(self, plan: str | None = None) -> ApiResult:
        return self.get("fees", {"plan": plan or DEFAULT_FEE_PLAN})

    # -----------------------------------------------------------------------
    # HTTP verbs
    # -----------------------------------------------------------------------

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResult:
        return self._request("GET", path, params)

    def post(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResult:
        return self._request("POST", path, params)

    def put(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResult:
        return self._request("PUT", path, params)

    def delete(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResult:
        return self._request("DELETE", path, params)

    def _auth_headers(self) -> dict[str, str]:
        claims = TokenClaims.issue(
            self._config.api_key, lifetime=TOKEN_LIFETIME_SECONDS
        )
        token = create_token(claims, self._config.secret_key)
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "x-api-key": self._config.api_key,
        }

    def _request(
        self, method: str, path: str, params: Mapping[str, Any] | None
    ) -> ApiResult:
        method = method.upper()
        url = self._config.url_for(path)
        payload = dict(params or {})

        # Reads carry parameters in the query string, writes in the body
        if method == "GET":
            query, body = payload, None
        else:
            query, body = None, payload

        logger.debug("Chilepay %s %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                params=query,
                json=body,
                headers=self._auth_headers(),
                timeout=self._config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Chilepay %s %s failed: %s", method, url, exc)
            return ApiResult.failure(error=exc)

        return parse_response(resp)


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def parse_response(resp: requests.Response) -> ApiResult:
    """Turn an HTTP response into an ApiResult.

    2xx is a success; any other status is a failure carrying the body as-is.
    """
    status = resp.status_code
    if not resp.content:
        data = None
    else:
        try:
            data = resp.json()
        except ValueError as exc:
            logger.warning("Chilepay returned non-JSON body (HTTP %s)", status)
            return ApiResult.failure(
                data=resp.text,
                status_code=status,
                error=ResponseDecodeError(f"Invalid JSON in response: {exc}", status),
            )

    if 200 <= status < 300:
        return ApiResult.ok(data, status)

    logger.warning("Chilepay rejected request: HTTP %s", status)
    return ApiResult.failure(data=data, status_code=status)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")
