"""Send instructions through a Kora paymaster, paying its fee in an SPL token.

:class:`Paymaster` wraps a :class:`~kora.client.Client` for wallets that
hold no SOL. Kora is the transaction fee payer; the wallet pays Kora back
with a token transfer appended to the same transaction.

    async with Client(url) as kora:
        paymaster = await Paymaster.create(kora, fee_token=USDC, fee_payer_wallet=wallet)
        signature = await paymaster.send_transaction([ix])
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from solders.compute_budget import (  # type: ignore[import-untyped]
    set_compute_unit_limit,
    set_compute_unit_price,
)
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import MessageV0  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from kora.address import TOKEN_PROGRAM_ID, parse_address
from kora.payment import build_payment_instruction, fee_in_token
from kora.transaction import decode_transaction, encode_transaction, partially_sign
from kora.types import (
    EstimateTransactionFeeResponse,
    GetBlockhashResponse,
    GetPayerSignerResponse,
    SignAndSendTransactionResponse,
)

logger = logging.getLogger(__name__)


class PaymasterRpc(Protocol):
    async def get_payer_signer(self) -> GetPayerSignerResponse: ...

    async def get_blockhash(self) -> GetBlockhashResponse: ...

    async def estimate_transaction_fee(
        self, transaction: str, fee_token: str | None = None
    ) -> EstimateTransactionFeeResponse: ...

    async def sign_and_send_transaction(
        self, transaction: str
    ) -> SignAndSendTransactionResponse: ...


def compute_budget_instructions(
    compute_unit_limit: int | None = None, compute_unit_price: int | None = None
) -> list[Instruction]:
    """Compute budget instructions for the limits that are set, limit first."""
    instructions = []
    if compute_unit_limit is not None:
        instructions.append(set_compute_unit_limit(compute_unit_limit))
    if compute_unit_price is not None:
        instructions.append(set_compute_unit_price(compute_unit_price))
    return instructions


class Paymaster:
    """Builds, pays for and submits v0 transactions through Kora."""

    def __init__(
        self,
        client: PaymasterRpc,
        fee_token: Pubkey,
        fee_payer_wallet: Keypair,
        payer_address: Pubkey,
        payment_address: Pubkey,
        token_program_id: Pubkey = TOKEN_PROGRAM_ID,
        compute_unit_limit: int | None = None,
        compute_unit_price: int | None = None,
    ) -> None:
        self.client = client
        self.fee_token = fee_token
        self.fee_payer_wallet = fee_payer_wallet
        self.payer_address = payer_address
        self.payment_address = payment_address
        self.token_program_id = token_program_id
        self.compute_unit_limit = compute_unit_limit
        self.compute_unit_price = compute_unit_price

    @classmethod
    async def create(
        cls,
        client: PaymasterRpc,
        fee_token: str | Pubkey,
        fee_payer_wallet: Keypair,
        token_program_id: str | Pubkey | None = None,
        compute_unit_limit: int | None = None,
        compute_unit_price: int | None = None,
    ) -> Paymaster:
        """Look up the server's fee payer and payment destination once."""
        mint = parse_address(fee_token, "fee_token")
        program_id = (
            parse_address(token_program_id, "token_program_id")
            if token_program_id is not None
            else TOKEN_PROGRAM_ID
        )
        payer = await client.get_payer_signer()
        return cls(
            client,
            mint,
            fee_payer_wallet,
            parse_address(payer.signer, "signer"),
            parse_address(payer.payment_destination, "payment_destination"),
            program_id,
            compute_unit_limit,
            compute_unit_price,
        )

    def _compile(self, instructions: Sequence[Instruction], blockhash: Hash) -> MessageV0:
        return MessageV0.try_compile(self.payer_address, list(instructions), [], blockhash)

    async def build_transaction(self, instructions: Sequence[Instruction]) -> str:
        """Return the base64 transaction ready for ``signAndSendTransaction``.

        The wallet's signature is included; the fee payer slot is left for
        Kora. No payment is appended when the estimated fee is zero.
        """
        resp = await self.client.get_blockhash()
        blockhash = Hash.from_string(resp.blockhash)
        body = (
            compute_budget_instructions(self.compute_unit_limit, self.compute_unit_price)
            + list(instructions)
        )
        signers = [self.fee_payer_wallet]

        pre_payment = encode_transaction(
            partially_sign(self._compile(body, blockhash), signers)
        )
        estimate = await self.client.estimate_transaction_fee(
            pre_payment, fee_token=str(self.fee_token)
        )
        amount = fee_in_token(estimate, str(self.fee_token))
        if amount == 0:
            logger.debug("zero fee, sending without payment")
            return pre_payment

        payment = build_payment_instruction(
            self.fee_payer_wallet.pubkey(),
            self.payment_address,
            self.fee_token,
            amount,
            self.token_program_id,
        )
        logger.debug("paying %d of %s to %s", amount, self.fee_token, self.payment_address)
        return encode_transaction(
            partially_sign(self._compile(body + [payment], blockhash), signers)
        )

    async def send_transaction(self, instructions: Sequence[Instruction]) -> Signature:
        """Pay for and submit ``instructions``; returns the transaction signature."""
        result = await self.client.sign_and_send_transaction(
            await self.build_transaction(instructions)
        )
        if result.signature:
            return Signature.from_string(result.signature)
        return decode_transaction(result.signed_transaction).signatures[0]
