"""JSON-RPC transport with API key, HMAC and reCAPTCHA request authentication."""

from __future__ import annotations

import hashlib
import hmac
import inspect
import json
import logging
import time
from typing import Any, Awaitable, Callable, Union

import httpx

from kora.config import (
    HEADER_API_KEY,
    HEADER_HMAC_SIGNATURE,
    HEADER_RECAPTCHA_TOKEN,
    HEADER_TIMESTAMP,
)
from kora.errors import InvalidResponseError, RpcError

logger = logging.getLogger(__name__)

RecaptchaTokenProvider = Callable[[], Union[str, Awaitable[str]]]


def build_envelope(method: str, params: Any = None, request_id: int = 1) -> dict:
    """Build a JSON-RPC 2.0 request. ``params`` is left out when None."""
    envelope: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        envelope["params"] = params
    return envelope


def compute_hmac_signature(secret: str, timestamp: str, body: str) -> str:
    """Hex-encoded HMAC-SHA256 of ``timestamp + body`` keyed by ``secret``."""
    message = (timestamp + body).encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def new_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Create the async HTTP session used for RPC calls (no timeout by default)."""
    return httpx.AsyncClient(timeout=timeout)


class RpcTransport:
    """Sends JSON-RPC requests to a single Kora endpoint.

    Each call is one POST and one response; nothing is retried. Errors
    raised by httpx or by JSON decoding propagate unchanged, while a
    JSON-RPC ``error`` member is raised as :class:`~kora.errors.RpcError`.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        api_key: str | None = None,
        hmac_secret: str | None = None,
        get_recaptcha_token: RecaptchaTokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc_url = rpc_url
        self._api_key = api_key
        self._hmac_secret = hmac_secret
        self._get_recaptcha_token = get_recaptcha_token
        self._owns_http = http_client is None
        self._http = http_client or new_http_client()
        self._next_id = 1

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def request(self, method: str, params: Any = None) -> Any:
        request_id = self._next_id
        self._next_id += 1
        body = json.dumps(
            build_envelope(method, params, request_id), separators=(",", ":")
        )
        headers = await self._build_headers(body)

        logger.debug("rpc request id=%d method=%s", request_id, method)
        response = await self._http.post(self._rpc_url, content=body, headers=headers)
        data = response.json()

        if not isinstance(data, dict):
            raise InvalidResponseError(data)
        error = data.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(error.get("code"), error.get("message"))
            raise RpcError(None, None)
        return data.get("result")

    async def _build_headers(self, body: str) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers[HEADER_API_KEY] = self._api_key
        if self._hmac_secret:
            timestamp = str(int(time.time()))
            headers[HEADER_TIMESTAMP] = timestamp
            headers[HEADER_HMAC_SIGNATURE] = compute_hmac_signature(
                self._hmac_secret, timestamp, body
            )
        if self._get_recaptcha_token is not None:
            token = self._get_recaptcha_token()
            if inspect.isawaitable(token):
                token = await token
            headers[HEADER_RECAPTCHA_TOKEN] = token
        return headers

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()
