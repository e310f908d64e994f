"""Network configuration for the Kora paymaster client."""

DEFAULT_RPC_URL = "http://localhost:8080"

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

HEADER_API_KEY = "x-api-key"
HEADER_TIMESTAMP = "x-timestamp"
HEADER_HMAC_SIGNATURE = "x-hmac-signature"
HEADER_RECAPTCHA_TOKEN = "x-recaptcha-token"

ENV_RPC_URL = "KORA_RPC_URL"
ENV_API_KEY = "KORA_API_KEY"
ENV_HMAC_SECRET = "KORA_HMAC_SECRET"
