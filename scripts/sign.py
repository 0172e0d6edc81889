"""
Run the wallet login flow against a running server and print the token.

EVM (default):
    export PRIVATE_KEY=0x...  CHAIN=ethereum
Solana:
    export PRIVATE_KEY=<base58 32-byte seed>  CHAIN=solana

Use development keys only.
"""

import json
import os
import sys
from typing import Any, Dict, Tuple

import base58
import requests
from eth_account import Account
from eth_account.messages import encode_defunct
from nacl.signing import SigningKey


def getenv_or_exit(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        print(f"Environment variable {name} is required", file=sys.stderr)
        sys.exit(1)
    return value


def post_json(url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    try:
        resp = requests.post(url, json=payload, timeout=15)
        resp.raise_for_status()
        return resp.json()
    except requests.RequestException as exc:
        print(f"HTTP error calling {url}: {exc}", file=sys.stderr)
        if exc.response is not None:
            print(exc.response.text, file=sys.stderr)
        sys.exit(2)


def evm_wallet(private_key: str) -> Tuple[str, Any]:
    account = Account.from_key(private_key)

    def sign(message: str) -> str:
        signature = Account.sign_message(encode_defunct(text=message), private_key=private_key).signature.hex()
        return signature if signature.startswith("0x") else f"0x{signature}"

    return account.address, sign


def solana_wallet(seed: str) -> Tuple[str, Any]:
    signing_key = SigningKey(base58.b58decode(seed)[:32])
    address = base58.b58encode(bytes(signing_key.verify_key)).decode()

    def sign(message: str) -> str:
        return base58.b58encode(signing_key.sign(message.encode("utf-8")).signature).decode()

    return address, sign


def main() -> None:
    api_base = os.environ.get("API_BASE", "http://localhost:8080")
    chain = os.environ.get("CHAIN", "ethereum").lower()
    private_key = getenv_or_exit("PRIVATE_KEY")

    address, sign = solana_wallet(private_key) if chain == "solana" else evm_wallet(private_key)

    # 1) Request challenge
    challenge = post_json(
        f"{api_base}/auth/challenge",
        {"wallet_address": address, "chain_type": chain},
    )

    # 2) Sign the exact message returned by the server
    signature = sign(challenge["message"])

    # 3) Exchange the signature for a session token
    data = post_json(
        f"{api_base}/auth/wallet-login",
        {
            "wallet_address": address,
            "chain_type": chain,
            "signature": signature,
            "challenge_id": challenge["challenge_id"],
            "message": challenge["message"],
        },
    )

    token = data.get("token")
    if not token:
        print("Login did not return a token", file=sys.stderr)
        print(json.dumps(data, indent=2), file=sys.stderr)
        sys.exit(4)

    print(token)
    print("\nExport for curl:")
    print(f"export AUTH='Authorization: Bearer {token}'")
    print('# example: curl -H "$AUTH"', f"{api_base}/users/me")


if __name__ == "__main__":
    main()
