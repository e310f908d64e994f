#!/usr/bin/env python3
"""Example CLI that appends a paymaster fee payment to an unsigned transaction.

The input transaction is read as base64 from --transaction (or stdin). The
amended transaction still needs the source wallet's signature before it is
sent to signTransaction / signAndSendTransaction.
"""

import argparse
import asyncio
import sys

from kora.client import Client
from kora.config import DEFAULT_RPC_URL
from kora.errors import KoraError


async def run(args: argparse.Namespace) -> None:
    transaction = args.transaction or sys.stdin.read().strip()

    async with Client(args.rpc_url, api_key=args.api_key, hmac_secret=args.hmac_secret) as kora:
        try:
            if not args.instruction_only:
                # stdout: the amended transaction only
                print(
                    await kora.append_payment_instruction(
                        transaction, args.fee_token, args.wallet, args.token_program
                    )
                )
                return
            payment = await kora.get_payment_instruction(
                transaction, args.fee_token, args.wallet, args.token_program
            )
        except KoraError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        print("=== Payment ===")
        print(f"Amount:                 {payment.payment_amount}")
        print(f"Token:                  {payment.payment_token}")
        print(f"Pay To:                 {payment.payment_address}")
        print(f"Paymaster Signer:       {payment.signer_address}")
        print(f"Program:                {payment.payment_instruction.program_id}")
        for meta in payment.payment_instruction.accounts:
            print(f"  {meta.pubkey} signer={meta.is_signer} writable={meta.is_writable}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Pay the Kora paymaster in an SPL token")
    parser.add_argument("--rpc-url", default=DEFAULT_RPC_URL, help="Kora RPC endpoint")
    parser.add_argument("--api-key", default=None)
    parser.add_argument("--hmac-secret", default=None)
    parser.add_argument("--fee-token", required=True, help="Mint of the token used to pay")
    parser.add_argument("--wallet", required=True, help="Wallet that pays the fee")
    parser.add_argument("--token-program", default=None, help="Token program id (default: SPL Token)")
    parser.add_argument("--transaction", default=None, help="Base64 transaction (default: stdin)")
    parser.add_argument(
        "--instruction-only",
        action="store_true",
        help="print the payment instruction instead of the amended transaction",
    )
    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
