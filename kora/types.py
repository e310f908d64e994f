"""Typed request/response shapes for the Kora JSON-RPC methods.

Attribute names match the server's JSON field names exactly. ``from_dict``
copies values through unchanged: address- and blockhash-typed fields are
only annotated, never parsed, and missing fields fall back to empty
defaults. No other validation is applied to server responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from solders.instruction import Instruction  # type: ignore[import-untyped]

from kora.address import Address, Blockhash


def _flags(cls: type, data: dict | None) -> Any:
    data = data or {}
    return cls(**{f.name: data.get(f.name, False) for f in fields(cls)})


# ---------------------------------------------------------------------------
# Server configuration (getConfig)
# ---------------------------------------------------------------------------


@dataclass
class NonceInstructionPolicy:
    allow_initialize: bool = False
    allow_advance: bool = False
    allow_withdraw: bool = False
    allow_authorize: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> NonceInstructionPolicy:
        return _flags(cls, data)


@dataclass
class SystemInstructionPolicy:
    allow_transfer: bool = False
    allow_assign: bool = False
    allow_create_account: bool = False
    allow_allocate: bool = False
    nonce: NonceInstructionPolicy = field(default_factory=NonceInstructionPolicy)

    @classmethod
    def from_dict(cls, data: dict | None) -> SystemInstructionPolicy:
        data = data or {}
        return cls(
            allow_transfer=data.get("allow_transfer", False),
            allow_assign=data.get("allow_assign", False),
            allow_create_account=data.get("allow_create_account", False),
            allow_allocate=data.get("allow_allocate", False),
            nonce=NonceInstructionPolicy.from_dict(data.get("nonce")),
        )


@dataclass
class SplTokenInstructionPolicy:
    allow_transfer: bool = False
    allow_burn: bool = False
    allow_close_account: bool = False
    allow_approve: bool = False
    allow_revoke: bool = False
    allow_set_authority: bool = False
    allow_mint_to: bool = False
    allow_initialize_mint: bool = False
    allow_initialize_account: bool = False
    allow_initialize_multisig: bool = False
    allow_freeze_account: bool = False
    allow_thaw_account: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> SplTokenInstructionPolicy:
        return _flags(cls, data)


@dataclass
class Token2022InstructionPolicy(SplTokenInstructionPolicy):
    pass


@dataclass
class FeePayerPolicy:
    """What the fee payer account may be used for, per program."""

    system: SystemInstructionPolicy = field(default_factory=SystemInstructionPolicy)
    spl_token: SplTokenInstructionPolicy = field(
        default_factory=SplTokenInstructionPolicy
    )
    token_2022: Token2022InstructionPolicy = field(
        default_factory=Token2022InstructionPolicy
    )

    @classmethod
    def from_dict(cls, data: dict | None) -> FeePayerPolicy:
        data = data or {}
        return cls(
            system=SystemInstructionPolicy.from_dict(data.get("system")),
            spl_token=SplTokenInstructionPolicy.from_dict(data.get("spl_token")),
            token_2022=Token2022InstructionPolicy.from_dict(data.get("token_2022")),
        )


@dataclass
class Token2022Config:
    blocked_mint_extensions: list[str] = field(default_factory=list)
    blocked_account_extensions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict | None) -> Token2022Config:
        data = data or {}
        return cls(
            blocked_mint_extensions=list(data.get("blocked_mint_extensions") or []),
            blocked_account_extensions=list(data.get("blocked_account_extensions") or []),
        )


PRICE_MODEL_MARGIN = "margin"
PRICE_MODEL_FIXED = "fixed"
PRICE_MODEL_FREE = "free"


@dataclass
class PriceConfig:
    """Server pricing model, tagged by ``type``.

    ``margin`` is set for the margin model; ``amount`` and ``token`` for the
    fixed model; the free model carries no extra fields.
    """

    type: str = PRICE_MODEL_MARGIN
    margin: float | None = None
    amount: int | None = None
    token: Address | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> PriceConfig:
        if not data:
            return cls(type=PRICE_MODEL_MARGIN, margin=0.0)
        return cls(
            type=data.get("type", PRICE_MODEL_MARGIN),
            margin=data.get("margin"),
            amount=data.get("amount"),
            token=data.get("token"),
        )

    @property
    def is_free(self) -> bool:
        return self.type == PRICE_MODEL_FREE


@dataclass
class ValidationConfig:
    max_allowed_lamports: int = 0
    max_signatures: int = 0
    price_source: str = ""
    allowed_programs: list[Address] = field(default_factory=list)
    allowed_tokens: list[Address] = field(default_factory=list)
    allowed_spl_paid_tokens: list[Address] = field(default_factory=list)
    disallowed_accounts: list[Address] = field(default_factory=list)
    fee_payer_policy: FeePayerPolicy = field(default_factory=FeePayerPolicy)
    price: PriceConfig = field(default_factory=PriceConfig)
    token2022: Token2022Config = field(default_factory=Token2022Config)

    @classmethod
    def from_dict(cls, data: dict | None) -> ValidationConfig:
        data = data or {}
        return cls(
            max_allowed_lamports=data.get("max_allowed_lamports", 0),
            max_signatures=data.get("max_signatures", 0),
            price_source=data.get("price_source", ""),
            allowed_programs=list(data.get("allowed_programs") or []),
            allowed_tokens=list(data.get("allowed_tokens") or []),
            allowed_spl_paid_tokens=list(data.get("allowed_spl_paid_tokens") or []),
            disallowed_accounts=list(data.get("disallowed_accounts") or []),
            fee_payer_policy=FeePayerPolicy.from_dict(data.get("fee_payer_policy")),
            price=PriceConfig.from_dict(data.get("price")),
            token2022=Token2022Config.from_dict(data.get("token2022")),
        )


@dataclass
class EnabledMethods:
    liveness: bool = False
    estimate_transaction_fee: bool = False
    estimate_bundle_fee: bool = False
    get_supported_tokens: bool = False
    get_payer_signer: bool = False
    sign_transaction: bool = False
    sign_and_send_transaction: bool = False
    sign_bundle: bool = False
    sign_and_send_bundle: bool = False
    transfer_transaction: bool = False
    get_blockhash: bool = False
    get_config: bool = False
    get_version: bool = False
    sign_transaction_if_paid: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> EnabledMethods:
        return _flags(cls, data)


@dataclass
class Config:
    """Snapshot of the server's policy as returned by ``getConfig``."""

    fee_payers: list[Address] = field(default_factory=list)
    validation_config: ValidationConfig = field(default_factory=ValidationConfig)
    enabled_methods: EnabledMethods = field(default_factory=EnabledMethods)

    @classmethod
    def from_dict(cls, data: dict | None) -> Config:
        data = data or {}
        return cls(
            fee_payers=list(data.get("fee_payers") or []),
            validation_config=ValidationConfig.from_dict(data.get("validation_config")),
            enabled_methods=EnabledMethods.from_dict(data.get("enabled_methods")),
        )


# ---------------------------------------------------------------------------
# Method results
# ---------------------------------------------------------------------------


@dataclass
class GetBlockhashResponse:
    blockhash: Blockhash

    @classmethod
    def from_dict(cls, data: dict | None) -> GetBlockhashResponse:
        data = data or {}
        return cls(blockhash=data.get("blockhash"))


@dataclass
class GetVersionResponse:
    version: str

    @classmethod
    def from_dict(cls, data: dict | None) -> GetVersionResponse:
        data = data or {}
        return cls(version=data.get("version"))


@dataclass
class GetSupportedTokensResponse:
    tokens: list[Address]

    @classmethod
    def from_dict(cls, data: dict | None) -> GetSupportedTokensResponse:
        data = data or {}
        return cls(tokens=list(data.get("tokens") or []))


@dataclass
class GetPayerSignerResponse:
    signer: Address
    payment_destination: Address

    @classmethod
    def from_dict(cls, data: dict | None) -> GetPayerSignerResponse:
        data = data or {}
        return cls(
            signer=data.get("signer"),
            payment_destination=data.get("payment_destination"),
        )


@dataclass
class EstimateTransactionFeeResponse:
    fee_in_lamports: int
    fee_in_token: int | None
    signer_pubkey: Address
    payment_address: Address

    @classmethod
    def from_dict(cls, data: dict | None) -> EstimateTransactionFeeResponse:
        data = data or {}
        return cls(
            fee_in_lamports=data.get("fee_in_lamports"),
            fee_in_token=data.get("fee_in_token"),
            signer_pubkey=data.get("signer_pubkey"),
            payment_address=data.get("payment_address"),
        )


@dataclass
class EstimateBundleFeeResponse(EstimateTransactionFeeResponse):
    pass


@dataclass
class SignTransactionResponse:
    signed_transaction: str
    signer_pubkey: Address
    signature: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> SignTransactionResponse:
        data = data or {}
        return cls(
            signed_transaction=data.get("signed_transaction"),
            signer_pubkey=data.get("signer_pubkey"),
            signature=data.get("signature"),
        )


@dataclass
class SignAndSendTransactionResponse:
    signature: str
    signed_transaction: str
    signer_pubkey: Address

    @classmethod
    def from_dict(cls, data: dict | None) -> SignAndSendTransactionResponse:
        data = data or {}
        return cls(
            signature=data.get("signature"),
            signed_transaction=data.get("signed_transaction"),
            signer_pubkey=data.get("signer_pubkey"),
        )


@dataclass
class SignTransactionIfPaidResponse:
    transaction: str
    signed_transaction: str
    signer_pubkey: Address

    @classmethod
    def from_dict(cls, data: dict | None) -> SignTransactionIfPaidResponse:
        data = data or {}
        return cls(
            transaction=data.get("transaction"),
            signed_transaction=data.get("signed_transaction"),
            signer_pubkey=data.get("signer_pubkey"),
        )


@dataclass
class SignBundleResponse:
    signed_transactions: list[str]
    signer_pubkey: Address

    @classmethod
    def from_dict(cls, data: dict | None) -> SignBundleResponse:
        data = data or {}
        return cls(
            signed_transactions=list(data.get("signed_transactions") or []),
            signer_pubkey=data.get("signer_pubkey"),
        )


@dataclass
class SignAndSendBundleResponse:
    signed_transactions: list[str]
    signer_pubkey: Address
    bundle_uuid: str

    @classmethod
    def from_dict(cls, data: dict | None) -> SignAndSendBundleResponse:
        data = data or {}
        return cls(
            signed_transactions=list(data.get("signed_transactions") or []),
            signer_pubkey=data.get("signer_pubkey"),
            bundle_uuid=data.get("bundle_uuid"),
        )


@dataclass
class TransferTransactionResponse:
    transaction: str
    message: str
    blockhash: Blockhash
    signer_pubkey: Address | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> TransferTransactionResponse:
        data = data or {}
        return cls(
            transaction=data.get("transaction"),
            message=data.get("message"),
            blockhash=data.get("blockhash"),
            signer_pubkey=data.get("signer_pubkey"),
        )


@dataclass
class PaymentInstructionResponse:
    """A token transfer paying the paymaster, ready to append to a transaction."""

    original_transaction: str
    payment_instruction: Instruction
    payment_amount: int
    payment_token: Address
    payment_address: Address
    signer_address: Address
