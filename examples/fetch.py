#!/usr/bin/env python3
"""Example CLI that fetches and displays a Kora server's configuration."""

import argparse
import asyncio
import sys

from kora.client import Client
from kora.config import DEFAULT_RPC_URL


async def run(args: argparse.Namespace) -> None:
    print(f"Fetching paymaster configuration from {args.rpc_url}...\n")

    async with Client(args.rpc_url, api_key=args.api_key, hmac_secret=args.hmac_secret) as kora:
        try:
            config = await kora.get_config()
        except Exception as e:
            print(f"Error fetching config: {e}")
            sys.exit(1)

        try:
            version = await kora.get_version()
            print(f"Server Version:         {version.version}")
        except Exception as e:
            print(f"Server Version:         unavailable ({e})")
        print()

        print("=== Fee Payers ===")
        for payer in config.fee_payers:
            print(f"  {payer}")
        print()

        vc = config.validation_config
        print("=== Validation ===")
        print(f"Max Allowed Lamports:   {vc.max_allowed_lamports}")
        print(f"Max Signatures:         {vc.max_signatures}")
        print(f"Price Source:           {vc.price_source}")
        print(f"Price Model:            {vc.price.type}")
        if vc.price.margin is not None:
            print(f"Margin:                 {vc.price.margin * 100:.2f}%")
        if vc.price.amount is not None:
            print(f"Fixed Amount:           {vc.price.amount} of {vc.price.token}")
        print(f"Allowed Programs:       {len(vc.allowed_programs)}")
        print(f"Disallowed Accounts:    {len(vc.disallowed_accounts)}")
        print()

        print(f"=== Paid Tokens ({len(vc.allowed_spl_paid_tokens)}) ===")
        for token in vc.allowed_spl_paid_tokens:
            print(f"  {token}")
        print()

        policy = vc.fee_payer_policy
        print("=== Fee Payer Policy ===")
        print(f"System Transfer:        {policy.system.allow_transfer}")
        print(f"SPL Transfer:           {policy.spl_token.allow_transfer}")
        print(f"Token-2022 Transfer:    {policy.token_2022.allow_transfer}")
        print()

        enabled = [name for name, on in vars(config.enabled_methods).items() if on]
        print(f"=== Enabled Methods ({len(enabled)}) ===")
        for name in enabled:
            print(f"  {name}")
        print()

        try:
            signer = await kora.get_payer_signer()
            print("=== Payer Signer ===")
            print(f"Signer:                 {signer.signer}")
            print(f"Payment Destination:    {signer.payment_destination}")
        except Exception as e:
            print("=== Payer Signer ===")
            print(f"  Error: {e}")
        print()

    print("Done.")


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch Kora paymaster configuration")
    parser.add_argument("--rpc-url", default=DEFAULT_RPC_URL, help="Kora RPC endpoint")
    parser.add_argument("--api-key", default=None, help="API key, if the server requires one")
    parser.add_argument("--hmac-secret", default=None, help="HMAC secret, if the server requires one")
    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
