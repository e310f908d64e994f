"""Address helpers and associated token account derivation."""

from __future__ import annotations

from typing import NewType

from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from spl.token.instructions import get_associated_token_address  # type: ignore[import-untyped]

from kora.config import (
    ASSOCIATED_TOKEN_PROGRAM_ID as _ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID as _TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID as _TOKEN_PROGRAM_ID,
)
from kora.errors import InvalidAddressError

Address = NewType("Address", str)
Blockhash = NewType("Blockhash", str)

TOKEN_PROGRAM_ID = Pubkey.from_string(_TOKEN_PROGRAM_ID)
TOKEN_2022_PROGRAM_ID = Pubkey.from_string(_TOKEN_2022_PROGRAM_ID)
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(_ASSOCIATED_TOKEN_PROGRAM_ID)


def address(value: str) -> Address:
    """Tag a base58 string as an address. The value is not checked."""
    return Address(value)


def blockhash(value: str) -> Blockhash:
    return Blockhash(value)


def parse_address(value: str | Pubkey, field: str) -> Pubkey:
    """Parse a base58 address, raising InvalidAddressError naming ``field``."""
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(value)
    except (ValueError, TypeError) as e:
        raise InvalidAddressError(field, str(value)) from e


def derive_associated_token_address(
    owner: Pubkey, mint: Pubkey, token_program_id: Pubkey = TOKEN_PROGRAM_ID
) -> Pubkey:
    """Associated token account of ``owner`` for ``mint`` under ``token_program_id``."""
    return get_associated_token_address(owner, mint, token_program_id)
