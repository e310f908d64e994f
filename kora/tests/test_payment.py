"""Payment instruction composition tests."""

import pytest
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import Message, MessageV0  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]
from solders.system_program import TransferParams, transfer  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

from kora.address import TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID, derive_associated_token_address
from kora.errors import (
    InvalidAddressError,
    PaymentError,
    PaymentNotRequiredError,
    RpcError,
    UnsupportedTokenError,
)
from kora.transaction import decode_transaction, decompile_instructions, encode_transaction

FEE_TOKEN = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
WALLET = "4uQeVj5tqViQh7yWWGStvkEG1Zmhx6uasJtWCJziofM"
PAYMASTER_SIGNER = str(Keypair().pubkey())
PAYMENT_ADDRESS = str(Keypair().pubkey())


def unsigned_transaction() -> str:
    payer = Pubkey.from_string(PAYMASTER_SIGNER)
    ix = transfer(
        TransferParams(
            from_pubkey=Pubkey.from_string(WALLET), to_pubkey=Keypair().pubkey(), lamports=1
        )
    )
    message = Message.new_with_blockhash([ix], payer, Hash.new_unique())
    signatures = [Signature.default()] * message.header.num_required_signatures
    return encode_transaction(VersionedTransaction.populate(message, signatures))


TX = unsigned_transaction()


def fee_estimate(fee_in_token=50000) -> dict:
    return {
        "fee_in_lamports": 5000,
        "fee_in_token": fee_in_token,
        "signer_pubkey": PAYMASTER_SIGNER,
        "payment_address": PAYMENT_ADDRESS,
    }


def server_config(allowed=(FEE_TOKEN,), price=None) -> dict:
    return {
        "fee_payers": [PAYMASTER_SIGNER],
        "validation_config": {
            "allowed_spl_paid_tokens": list(allowed),
            "price": price or {"type": "margin", "margin": 0.0},
        },
        "enabled_methods": {},
    }


def ata(owner: str, program: Pubkey = TOKEN_PROGRAM_ID) -> Pubkey:
    return derive_associated_token_address(
        Pubkey.from_string(owner), Pubkey.from_string(FEE_TOKEN), program
    )


@pytest.mark.asyncio
async def test_get_payment_instruction(fake_kora):
    fake_kora.results["estimateTransactionFee"] = fee_estimate()
    async with fake_kora.client() as kora:
        resp = await kora.get_payment_instruction(TX, FEE_TOKEN, WALLET)

    assert fake_kora.bodies()[0]["method"] == "estimateTransactionFee"
    assert fake_kora.bodies()[0]["params"] == {"transaction": TX, "fee_token": FEE_TOKEN}

    ix = resp.payment_instruction
    assert ix.program_id == TOKEN_PROGRAM_ID
    assert [m.pubkey for m in ix.accounts] == [
        ata(WALLET),
        ata(PAYMENT_ADDRESS),
        Pubkey.from_string(WALLET),
    ]
    assert ix.accounts[0].is_writable and ix.accounts[1].is_writable
    assert ix.accounts[2].is_signer and not ix.accounts[2].is_writable
    assert bytes(ix.data) == bytes([3]) + (50000).to_bytes(8, "little")

    assert resp.original_transaction == TX
    assert resp.payment_amount == 50000
    assert resp.payment_token == FEE_TOKEN
    assert resp.payment_address == PAYMENT_ADDRESS
    assert resp.signer_address == PAYMASTER_SIGNER


@pytest.mark.asyncio
async def test_get_payment_instruction_token_2022(fake_kora):
    fake_kora.results["estimateTransactionFee"] = fee_estimate(1234)
    async with fake_kora.client() as kora:
        resp = await kora.get_payment_instruction(
            TX, FEE_TOKEN, WALLET, token_program_id=str(TOKEN_2022_PROGRAM_ID)
        )

    ix = resp.payment_instruction
    assert ix.program_id == TOKEN_2022_PROGRAM_ID
    assert ix.accounts[0].pubkey == ata(WALLET, TOKEN_2022_PROGRAM_ID)
    assert ix.accounts[1].pubkey == ata(PAYMENT_ADDRESS, TOKEN_2022_PROGRAM_ID)
    assert resp.payment_amount == 1234


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"source_wallet": "invalid_address"}, "source_wallet"),
        ({"fee_token": "not-a-mint"}, "fee_token"),
        ({"token_program_id": "0OIl"}, "token_program_id"),
    ],
)
async def test_invalid_address_fails_before_any_request(fake_kora, kwargs, field):
    args = {"fee_token": FEE_TOKEN, "source_wallet": WALLET, **kwargs}
    async with fake_kora.client() as kora:
        with pytest.raises(InvalidAddressError) as exc_info:
            await kora.get_payment_instruction(TX, **args)
        with pytest.raises(InvalidAddressError):
            await kora.append_payment_instruction(TX, **args)

    assert exc_info.value.field == field
    assert fake_kora.requests == []


@pytest.mark.asyncio
async def test_get_payment_instruction_rpc_error(fake_kora):
    fake_kora.fail("estimateTransactionFee", -32602, "Invalid params")
    async with fake_kora.client() as kora:
        with pytest.raises(RpcError, match="RPC Error -32602: Invalid params"):
            await kora.get_payment_instruction(TX, FEE_TOKEN, WALLET)


@pytest.mark.asyncio
async def test_get_payment_instruction_without_token_fee(fake_kora):
    fake_kora.results["estimateTransactionFee"] = fee_estimate(None)
    async with fake_kora.client() as kora:
        with pytest.raises(PaymentError):
            await kora.get_payment_instruction(TX, FEE_TOKEN, WALLET)


def v0_transaction() -> str:
    ix = transfer(
        TransferParams(
            from_pubkey=Pubkey.from_string(WALLET), to_pubkey=Keypair().pubkey(), lamports=1
        )
    )
    message = MessageV0.try_compile(
        Pubkey.from_string(PAYMASTER_SIGNER), [ix], [], Hash.new_unique()
    )
    signatures = [Signature.default()] * message.header.num_required_signatures
    return encode_transaction(VersionedTransaction.populate(message, signatures))


@pytest.mark.asyncio
@pytest.mark.parametrize("tx", [TX, v0_transaction()], ids=["legacy", "v0"])
async def test_append_payment_instruction(fake_kora, tx):
    fake_kora.results["getConfig"] = server_config()
    fake_kora.results["estimateTransactionFee"] = fee_estimate()
    async with fake_kora.client() as kora:
        new_tx = await kora.append_payment_instruction(tx, FEE_TOKEN, WALLET)

    assert fake_kora.methods() == ["getConfig", "estimateTransactionFee"]

    original = decode_transaction(tx)
    result = decode_transaction(new_tx)
    message = result.message
    assert type(message) is type(original.message)
    assert message.recent_blockhash == original.message.recent_blockhash
    assert message.account_keys[0] == Pubkey.from_string(PAYMASTER_SIGNER)
    assert all(sig == Signature.default() for sig in result.signatures)

    *kept, payment = decompile_instructions(message)
    assert kept == decompile_instructions(original.message)
    assert payment.program_id == TOKEN_PROGRAM_ID
    assert [m.pubkey for m in payment.accounts] == [
        ata(WALLET),
        ata(PAYMENT_ADDRESS),
        Pubkey.from_string(WALLET),
    ]
    assert [m.is_signer for m in payment.accounts] == [False, False, True]
    assert payment.accounts[0].is_writable and payment.accounts[1].is_writable
    assert bytes(payment.data) == bytes([3]) + (50000).to_bytes(8, "little")


@pytest.mark.asyncio
async def test_append_payment_instruction_zero_fee_keeps_transaction(fake_kora):
    fake_kora.results["getConfig"] = server_config()
    fake_kora.results["estimateTransactionFee"] = fee_estimate(0)
    async with fake_kora.client() as kora:
        new_tx = await kora.append_payment_instruction(TX, FEE_TOKEN, WALLET)

    assert new_tx == TX
    assert fake_kora.methods() == ["getConfig", "estimateTransactionFee"]


@pytest.mark.asyncio
async def test_negative_fee_is_rejected(fake_kora):
    fake_kora.results["getConfig"] = server_config()
    fake_kora.results["estimateTransactionFee"] = fee_estimate(-5)
    async with fake_kora.client() as kora:
        with pytest.raises(PaymentError, match="negative fee"):
            await kora.get_payment_instruction(TX, FEE_TOKEN, WALLET)
        with pytest.raises(PaymentError, match="negative fee"):
            await kora.append_payment_instruction(TX, FEE_TOKEN, WALLET)



@pytest.mark.asyncio
async def test_append_payment_instruction_unsupported_token(fake_kora):
    fake_kora.results["getConfig"] = server_config(allowed=[])
    async with fake_kora.client() as kora:
        with pytest.raises(UnsupportedTokenError):
            await kora.append_payment_instruction(TX, FEE_TOKEN, WALLET)

    assert fake_kora.methods() == ["getConfig"]


@pytest.mark.asyncio
async def test_append_payment_instruction_free_pricing(fake_kora):
    fake_kora.results["getConfig"] = server_config(price={"type": "free"})
    async with fake_kora.client() as kora:
        with pytest.raises(PaymentNotRequiredError):
            await kora.append_payment_instruction(TX, FEE_TOKEN, WALLET)

    assert fake_kora.methods() == ["getConfig"]


@pytest.mark.asyncio
async def test_append_payment_instruction_without_config_check(fake_kora):
    fake_kora.results["estimateTransactionFee"] = fee_estimate()
    async with fake_kora.client() as kora:
        await kora.append_payment_instruction(TX, FEE_TOKEN, WALLET, check_config=False)

    assert fake_kora.methods() == ["estimateTransactionFee"]
