#!/usr/bin/env python3
"""
Generate a test wallet for development and testing.

Creates a random EVM key (default) or Solana ed25519 key that can be used
with scripts/sign.py to exercise the login flow.

SECURITY WARNING: Only use this for development/testing!
Never use these wallets with real funds!
"""

import argparse
import sys

import base58
from eth_account import Account
from nacl.signing import SigningKey


def generate(chain: str) -> tuple[str, str]:
    """Return (address, private key) for a fresh wallet."""
    if chain == "solana":
        signing_key = SigningKey.generate()
        address = base58.b58encode(bytes(signing_key.verify_key)).decode()
        return address, base58.b58encode(bytes(signing_key)).decode()

    account = Account.create()
    return account.address, account.key.hex()


def main():
    parser = argparse.ArgumentParser(description="Generate a development wallet")
    parser.add_argument("--chain", default="ethereum", help="ethereum (or any EVM chain) or solana")
    args = parser.parse_args()
    chain = args.chain.lower()

    print("=" * 60)
    print("SocialChain - Test Wallet Generator")
    print("=" * 60)
    print()

    address, private_key = generate(chain)

    print("-" * 60)
    print("Wallet Details:")
    print("-" * 60)
    print(f"Chain:       {chain}")
    print(f"Address:     {address}")
    print(f"Private Key: {private_key}")
    print("-" * 60)
    print()

    print("Environment Variables:")
    print("-" * 60)
    print(f"export CHAIN={chain}")
    print(f"export PRIVATE_KEY={private_key}")
    print("-" * 60)
    print()
    print("Then run: python scripts/sign.py")
    print()

    print("[WARNING] SECURITY WARNING:")
    print("-" * 60)
    print("- This is a TEST WALLET for development only!")
    print("- DO NOT use this wallet with real funds!")
    print("- DO NOT commit the private key to version control!")
    print("-" * 60)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        sys.exit(1)
