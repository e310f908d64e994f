import logging

from kora.address import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    Address,
    Blockhash,
    address,
    blockhash,
    derive_associated_token_address,
    parse_address,
)
from kora.client import Client
from kora.config import DEFAULT_RPC_URL
from kora.errors import (
    InvalidAddressError,
    InvalidResponseError,
    KoraError,
    PaymentError,
    PaymentNotRequiredError,
    RpcError,
    UnsupportedTokenError,
)
from kora.payment import (
    append_payment_instruction,
    build_payment_instruction,
    get_payment_instruction,
)
from kora.paymaster import Paymaster, compute_budget_instructions
from kora.rpc import RpcTransport, compute_hmac_signature
from kora.transaction import (
    append_instruction,
    decode_transaction,
    encode_transaction,
    partially_sign,
)
from kora.types import (
    Config,
    EnabledMethods,
    EstimateBundleFeeResponse,
    EstimateTransactionFeeResponse,
    FeePayerPolicy,
    GetBlockhashResponse,
    GetPayerSignerResponse,
    GetSupportedTokensResponse,
    GetVersionResponse,
    NonceInstructionPolicy,
    PaymentInstructionResponse,
    PriceConfig,
    SignAndSendBundleResponse,
    SignAndSendTransactionResponse,
    SignBundleResponse,
    SignTransactionIfPaidResponse,
    SignTransactionResponse,
    SplTokenInstructionPolicy,
    SystemInstructionPolicy,
    Token2022Config,
    Token2022InstructionPolicy,
    TransferTransactionResponse,
    ValidationConfig,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Client",
    "DEFAULT_RPC_URL",
    "RpcTransport",
    "compute_hmac_signature",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "TOKEN_2022_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    "Address",
    "Blockhash",
    "address",
    "blockhash",
    "derive_associated_token_address",
    "parse_address",
    "InvalidAddressError",
    "InvalidResponseError",
    "KoraError",
    "PaymentError",
    "PaymentNotRequiredError",
    "RpcError",
    "UnsupportedTokenError",
    "append_payment_instruction",
    "build_payment_instruction",
    "get_payment_instruction",
    "Paymaster",
    "compute_budget_instructions",
    "append_instruction",
    "decode_transaction",
    "encode_transaction",
    "partially_sign",
    "Config",
    "EnabledMethods",
    "EstimateBundleFeeResponse",
    "EstimateTransactionFeeResponse",
    "FeePayerPolicy",
    "GetBlockhashResponse",
    "GetPayerSignerResponse",
    "GetSupportedTokensResponse",
    "GetVersionResponse",
    "NonceInstructionPolicy",
    "PaymentInstructionResponse",
    "PriceConfig",
    "SignAndSendBundleResponse",
    "SignAndSendTransactionResponse",
    "SignBundleResponse",
    "SignTransactionIfPaidResponse",
    "SignTransactionResponse",
    "SplTokenInstructionPolicy",
    "SystemInstructionPolicy",
    "Token2022Config",
    "Token2022InstructionPolicy",
    "TransferTransactionResponse",
    "ValidationConfig",
]
