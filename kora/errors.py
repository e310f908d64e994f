"""Exceptions raised by the Kora client.

Transport failures (``httpx.HTTPError``) and malformed JSON bodies
(``json.JSONDecodeError``) are never wrapped and reach the caller as-is.
"""

from __future__ import annotations

from typing import Any


class KoraError(Exception):
    """Base class for errors raised by this package."""


class RpcError(KoraError):
    """The server answered with a JSON-RPC ``error`` object."""

    def __init__(self, code: Any, message: Any) -> None:
        super().__init__(f"RPC Error {code}: {message}")
        self.code = code
        self.message = message


class InvalidAddressError(KoraError, ValueError):
    """An address-shaped argument is not a valid base58 public key."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"invalid {field} address: {value!r}")
        self.field = field
        self.value = value


class PaymentError(KoraError):
    """A payment instruction could not be composed."""


class UnsupportedTokenError(PaymentError):
    def __init__(self, token: str) -> None:
        super().__init__(f"token {token} is not supported for fee payment")
        self.token = token


class PaymentNotRequiredError(PaymentError):
    def __init__(self) -> None:
        super().__init__("payment not required: server price model is free")


class InvalidResponseError(KoraError):
    """The response body is not a JSON-RPC response object."""

    def __init__(self, body: Any) -> None:
        super().__init__(f"invalid JSON-RPC response: {body!r}")
        self.body = body
