"""Compose the token transfer that pays the paymaster for a transaction."""

from __future__ import annotations

import logging
from typing import Protocol

from solders.instruction import Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from spl.token.instructions import TransferParams, transfer  # type: ignore[import-untyped]

from kora.address import (
    TOKEN_PROGRAM_ID,
    address,
    derive_associated_token_address,
    parse_address,
)
from kora.errors import PaymentError, PaymentNotRequiredError, UnsupportedTokenError
from kora.transaction import append_instruction, decode_transaction, encode_transaction
from kora.types import Config, EstimateTransactionFeeResponse, PaymentInstructionResponse

logger = logging.getLogger(__name__)


class PaymasterClient(Protocol):
    async def get_config(self) -> Config: ...

    async def estimate_transaction_fee(
        self, transaction: str, fee_token: str | None = None
    ) -> EstimateTransactionFeeResponse: ...


def build_payment_instruction(
    source_wallet: Pubkey,
    destination_wallet: Pubkey,
    mint: Pubkey,
    amount: int,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """SPL Token transfer between the two wallets' associated token accounts.

    The source wallet is the transfer authority; it signs the final
    transaction on the client side.
    """
    source_ata = derive_associated_token_address(source_wallet, mint, token_program_id)
    destination_ata = derive_associated_token_address(
        destination_wallet, mint, token_program_id
    )
    return transfer(
        TransferParams(
            program_id=token_program_id,
            source=source_ata,
            dest=destination_ata,
            owner=source_wallet,
            amount=amount,
        )
    )


def fee_in_token(estimate: EstimateTransactionFeeResponse, fee_token: str) -> int:
    """The token fee of ``estimate``; PaymentError when missing or negative."""
    if estimate.fee_in_token is None:
        raise PaymentError(f"fee estimate did not include a fee in token {fee_token}")
    if estimate.fee_in_token < 0:
        raise PaymentError(
            f"fee estimate returned a negative fee ({estimate.fee_in_token})"
        )
    return estimate.fee_in_token


async def get_payment_instruction(
    client: PaymasterClient,
    transaction: str,
    fee_token: str,
    source_wallet: str,
    token_program_id: str | None = None,
) -> PaymentInstructionResponse:
    """Estimate the fee for ``transaction`` and build the matching payment.

    Address arguments are validated before any request is sent.
    """
    mint = parse_address(fee_token, "fee_token")
    wallet = parse_address(source_wallet, "source_wallet")
    program_id = (
        parse_address(token_program_id, "token_program_id")
        if token_program_id is not None
        else TOKEN_PROGRAM_ID
    )

    estimate = await client.estimate_transaction_fee(transaction, fee_token=fee_token)
    amount = fee_in_token(estimate, fee_token)
    destination = parse_address(estimate.payment_address, "payment_address")

    instruction = build_payment_instruction(wallet, destination, mint, amount, program_id)
    logger.debug("payment instruction: %d of %s to %s", amount, mint, destination)
    return PaymentInstructionResponse(
        original_transaction=transaction,
        payment_instruction=instruction,
        payment_amount=amount,
        payment_token=address(fee_token),
        payment_address=address(estimate.payment_address),
        signer_address=address(estimate.signer_pubkey),
    )


async def append_payment_instruction(
    client: PaymasterClient,
    transaction: str,
    fee_token: str,
    source_wallet: str,
    token_program_id: str | None = None,
    check_config: bool = True,
) -> str:
    """Return ``transaction`` (base64) with the paymaster payment appended.

    With ``check_config`` the server config is fetched first: the fee token
    must be one of ``allowed_spl_paid_tokens`` and the price model must not
    be free. A zero fee returns ``transaction`` unchanged.
    """
    parse_address(fee_token, "fee_token")
    parse_address(source_wallet, "source_wallet")
    if token_program_id is not None:
        parse_address(token_program_id, "token_program_id")
    tx = decode_transaction(transaction)

    if check_config:
        config = await client.get_config()
        validation = config.validation_config
        if fee_token not in validation.allowed_spl_paid_tokens:
            raise UnsupportedTokenError(fee_token)
        if validation.price.is_free:
            raise PaymentNotRequiredError()

    payment = await get_payment_instruction(
        client, transaction, fee_token, source_wallet, token_program_id
    )
    if payment.payment_amount == 0:
        logger.debug("zero fee, transaction left unchanged")
        return transaction
    return encode_transaction(append_instruction(tx, payment.payment_instruction))
