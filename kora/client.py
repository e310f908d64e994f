"""Async client for the Kora paymaster JSON-RPC API."""

from __future__ import annotations

import os
import warnings
from typing import Any

import httpx

from kora.config import DEFAULT_RPC_URL, ENV_API_KEY, ENV_HMAC_SECRET, ENV_RPC_URL
from kora.payment import append_payment_instruction, get_payment_instruction
from kora.rpc import RecaptchaTokenProvider, RpcTransport
from kora.types import (
    Config,
    EstimateBundleFeeResponse,
    EstimateTransactionFeeResponse,
    GetBlockhashResponse,
    GetPayerSignerResponse,
    GetSupportedTokensResponse,
    GetVersionResponse,
    PaymentInstructionResponse,
    SignAndSendBundleResponse,
    SignAndSendTransactionResponse,
    SignBundleResponse,
    SignTransactionIfPaidResponse,
    SignTransactionResponse,
    TransferTransactionResponse,
)


def _params(**kwargs: Any) -> dict[str, Any]:
    """Request params with unset (None) arguments left out."""
    return {k: v for k, v in kwargs.items() if v is not None}


class Client:
    """Client for a Kora paymaster server.

    Every method is a single JSON-RPC call; results are decoded into the
    dataclasses in :mod:`kora.types` without further validation.

        async with Client("http://localhost:8080", api_key="...") as kora:
            config = await kora.get_config()
    """

    def __init__(
        self,
        rpc_url: str,
        api_key: str | None = None,
        hmac_secret: str | None = None,
        get_recaptcha_token: RecaptchaTokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rpc = RpcTransport(
            rpc_url,
            api_key=api_key,
            hmac_secret=hmac_secret,
            get_recaptcha_token=get_recaptcha_token,
            http_client=http_client,
        )

    @classmethod
    def from_environ(cls) -> Client:
        """Create a client from KORA_RPC_URL, KORA_API_KEY and KORA_HMAC_SECRET."""
        return cls(
            os.environ.get(ENV_RPC_URL, DEFAULT_RPC_URL),
            api_key=os.environ.get(ENV_API_KEY) or None,
            hmac_secret=os.environ.get(ENV_HMAC_SECRET) or None,
        )

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._rpc.aclose()

    # -- Server info --

    async def get_config(self) -> Config:
        return Config.from_dict(await self._rpc.request("getConfig"))

    async def get_blockhash(self) -> GetBlockhashResponse:
        return GetBlockhashResponse.from_dict(await self._rpc.request("getBlockhash"))

    async def get_version(self) -> GetVersionResponse:
        return GetVersionResponse.from_dict(await self._rpc.request("getVersion"))

    async def get_supported_tokens(self) -> GetSupportedTokensResponse:
        return GetSupportedTokensResponse.from_dict(
            await self._rpc.request("getSupportedTokens")
        )

    async def get_payer_signer(self) -> GetPayerSignerResponse:
        return GetPayerSignerResponse.from_dict(
            await self._rpc.request("getPayerSigner")
        )

    # -- Fee estimation --

    async def estimate_transaction_fee(
        self,
        transaction: str,
        fee_token: str | None = None,
        signer_key: str | None = None,
        sig_verify: bool | None = None,
    ) -> EstimateTransactionFeeResponse:
        params = _params(
            transaction=transaction,
            fee_token=fee_token,
            signer_key=signer_key,
            sig_verify=sig_verify,
        )
        return EstimateTransactionFeeResponse.from_dict(
            await self._rpc.request("estimateTransactionFee", params)
        )

    async def estimate_bundle_fee(
        self,
        transactions: list[str],
        fee_token: str | None = None,
        signer_key: str | None = None,
        sig_verify: bool | None = None,
        sign_only_indices: list[int] | None = None,
    ) -> EstimateBundleFeeResponse:
        params = _params(
            transactions=transactions,
            fee_token=fee_token,
            signer_key=signer_key,
            sig_verify=sig_verify,
            sign_only_indices=sign_only_indices,
        )
        return EstimateBundleFeeResponse.from_dict(
            await self._rpc.request("estimateBundleFee", params)
        )

    # -- Signing --

    async def sign_transaction(
        self,
        transaction: str,
        signer_key: str | None = None,
        sig_verify: bool | None = None,
    ) -> SignTransactionResponse:
        params = _params(
            transaction=transaction, signer_key=signer_key, sig_verify=sig_verify
        )
        return SignTransactionResponse.from_dict(
            await self._rpc.request("signTransaction", params)
        )

    async def sign_and_send_transaction(
        self,
        transaction: str,
        signer_key: str | None = None,
        sig_verify: bool | None = None,
    ) -> SignAndSendTransactionResponse:
        params = _params(
            transaction=transaction, signer_key=signer_key, sig_verify=sig_verify
        )
        return SignAndSendTransactionResponse.from_dict(
            await self._rpc.request("signAndSendTransaction", params)
        )

    async def sign_bundle(
        self,
        transactions: list[str],
        signer_key: str | None = None,
        sig_verify: bool | None = None,
        sign_only_indices: list[int] | None = None,
        user_id: str | None = None,
    ) -> SignBundleResponse:
        params = _params(
            transactions=transactions,
            signer_key=signer_key,
            sig_verify=sig_verify,
            sign_only_indices=sign_only_indices,
            user_id=user_id,
        )
        return SignBundleResponse.from_dict(await self._rpc.request("signBundle", params))

    async def sign_and_send_bundle(
        self,
        transactions: list[str],
        signer_key: str | None = None,
        sig_verify: bool | None = None,
        sign_only_indices: list[int] | None = None,
        user_id: str | None = None,
    ) -> SignAndSendBundleResponse:
        params = _params(
            transactions=transactions,
            signer_key=signer_key,
            sig_verify=sig_verify,
            sign_only_indices=sign_only_indices,
            user_id=user_id,
        )
        return SignAndSendBundleResponse.from_dict(
            await self._rpc.request("signAndSendBundle", params)
        )

    # -- Deprecated --

    async def sign_transaction_if_paid(
        self,
        transaction: str,
        signer_key: str | None = None,
        sig_verify: bool | None = None,
    ) -> SignTransactionIfPaidResponse:
        """Deprecated: use sign_transaction with a payment instruction instead."""
        warnings.warn(
            "sign_transaction_if_paid is deprecated, use sign_transaction",
            DeprecationWarning,
            stacklevel=2,
        )
        params = _params(
            transaction=transaction, signer_key=signer_key, sig_verify=sig_verify
        )
        return SignTransactionIfPaidResponse.from_dict(
            await self._rpc.request("signTransactionIfPaid", params)
        )

    async def transfer_transaction(
        self, amount: int, token: str, source: str, destination: str
    ) -> TransferTransactionResponse:
        """Deprecated: build transfer transactions on the client side instead."""
        warnings.warn(
            "transfer_transaction is deprecated, build the transfer client-side",
            DeprecationWarning,
            stacklevel=2,
        )
        params = _params(
            amount=amount, token=token, source=source, destination=destination
        )
        return TransferTransactionResponse.from_dict(
            await self._rpc.request("transferTransaction", params)
        )

    # -- Payment helpers --

    async def get_payment_instruction(
        self,
        transaction: str,
        fee_token: str,
        source_wallet: str,
        token_program_id: str | None = None,
    ) -> PaymentInstructionResponse:
        return await get_payment_instruction(
            self, transaction, fee_token, source_wallet, token_program_id
        )

    async def append_payment_instruction(
        self,
        transaction: str,
        fee_token: str,
        source_wallet: str,
        token_program_id: str | None = None,
        check_config: bool = True,
    ) -> str:
        return await append_payment_instruction(
            self, transaction, fee_token, source_wallet, token_program_id, check_config
        )
