"""Wire-format transaction helpers.

Transactions travel as base64 (or base58) encoded bytes. These helpers
decode them into solders objects, splice in extra instructions and encode
them again.
"""

from __future__ import annotations

import base64
from typing import Sequence

import base58  # type: ignore[import-untyped]
from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import Message, MessageV0, to_bytes_versioned  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

ENCODING_BASE64 = "base64"
ENCODING_BASE58 = "base58"


def decode_transaction(data: str, encoding: str = ENCODING_BASE64) -> VersionedTransaction:
    if encoding == ENCODING_BASE64:
        raw = base64.b64decode(data)
    elif encoding == ENCODING_BASE58:
        raw = base58.b58decode(data)
    else:
        raise ValueError(f"unsupported transaction encoding: {encoding}")
    return VersionedTransaction.from_bytes(raw)


def encode_transaction(tx: VersionedTransaction, encoding: str = ENCODING_BASE64) -> str:
    raw = bytes(tx)
    if encoding == ENCODING_BASE64:
        return base64.b64encode(raw).decode()
    if encoding == ENCODING_BASE58:
        return base58.b58encode(raw).decode()
    raise ValueError(f"unsupported transaction encoding: {encoding}")


def _is_writable(message: Message | MessageV0, index: int) -> bool:
    if isinstance(message, MessageV0):
        return message.is_maybe_writable(index)
    return message.is_writable(index)


def decompile_instructions(message: Message | MessageV0) -> list[Instruction]:
    """Expand compiled instructions back into full account metas.

    Only static account keys are resolved, so v0 messages that load accounts
    from address lookup tables are rejected.
    """
    if isinstance(message, MessageV0) and message.address_table_lookups:
        raise ValueError("cannot decompile a message that uses address lookup tables")

    keys = message.account_keys
    instructions = []
    for ix in message.instructions:
        accounts = [
            AccountMeta(keys[i], message.is_signer(i), _is_writable(message, i))
            for i in bytes(ix.accounts)
        ]
        instructions.append(
            Instruction(keys[ix.program_id_index], bytes(ix.data), accounts)
        )
    return instructions


def partially_sign(
    message: Message | MessageV0, signers: Sequence[Keypair]
) -> VersionedTransaction:
    """Sign ``message`` with whichever of ``signers`` it requires.

    Signature slots for required signers that are not given stay default,
    for the paymaster to fill in.
    """
    keypairs = {kp.pubkey(): kp for kp in signers}
    payload = to_bytes_versioned(message)
    signatures = []
    for key in message.account_keys[: message.header.num_required_signatures]:
        kp = keypairs.get(key)
        signatures.append(kp.sign_message(payload) if kp else Signature.default())
    return VersionedTransaction.populate(message, signatures)


def append_instruction(
    tx: VersionedTransaction, instruction: Instruction
) -> VersionedTransaction:
    """Return a new unsigned transaction with ``instruction`` appended.

    The fee payer, blockhash and message version are kept. All signatures
    are reset because the message bytes change.
    """
    message = tx.message
    payer = message.account_keys[0]
    instructions = decompile_instructions(message) + [instruction]

    if isinstance(message, MessageV0):
        new_message = MessageV0.try_compile(
            payer, instructions, [], message.recent_blockhash
        )
    else:
        new_message = Message.new_with_blockhash(
            instructions, payer, message.recent_blockhash
        )

    signatures = [Signature.default()] * new_message.header.num_required_signatures
    return VersionedTransaction.populate(new_message, signatures)
