"""
Wallet signature verifiers.

One verifier per chain family:

- ``Secp256k1RecoveryVerifier`` for EVM chains: EIP-191 personal-message
  prefix, keccak hash, public key recovery, address comparison.
- ``Ed25519Verifier`` for Solana: the base58 address is the public key and
  the signature is checked directly over the raw message bytes.

Everything reaching a verifier comes from unauthenticated clients, so
malformed input is a normal ``False``/``None`` outcome and never raises.
"""

import binascii
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

import base58
from eth_account import Account
from eth_account.messages import encode_defunct
from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

from ..core.exceptions import UnsupportedChainError
from ..core.logging import get_logger

logger = get_logger(__name__)


class ChainFamily(str, Enum):
    """Signature scheme shared by a group of chains."""

    SECP256K1 = "secp256k1"
    ED25519 = "ed25519"


class Chain(str, Enum):
    """Chains a wallet can sign in with."""

    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    BSC = "bsc"
    ARBITRUM = "arbitrum"
    BASE = "base"
    SOLANA = "solana"

    @property
    def family(self) -> ChainFamily:
        return CHAIN_FAMILIES[self]


CHAIN_FAMILIES: Dict[Chain, ChainFamily] = {
    Chain.ETHEREUM: ChainFamily.SECP256K1,
    Chain.POLYGON: ChainFamily.SECP256K1,
    Chain.BSC: ChainFamily.SECP256K1,
    Chain.ARBITRUM: ChainFamily.SECP256K1,
    Chain.BASE: ChainFamily.SECP256K1,
    Chain.SOLANA: ChainFamily.ED25519,
}


def parse_chain(value: str) -> Chain:
    """
    Resolve a client-supplied chain identifier.

    Raises:
        UnsupportedChainError: No chain is registered under ``value``
    """
    try:
        return Chain((value or "").strip().lower())
    except ValueError as e:
        raise UnsupportedChainError(str(value)) from e


def short_address(address: str) -> str:
    """Shortened address for log lines."""
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


class SignatureVerifier(ABC):
    """Verifies that a wallet's key produced a signature over a message."""

    family: ChainFamily

    @abstractmethod
    def normalize_address(self, address: str) -> Optional[str]:
        """Canonical form of ``address``, or None if it is malformed."""

    @abstractmethod
    def decode_signature(self, signature: str) -> Optional[bytes]:
        """Signature bytes from their wire encoding, or None if malformed."""

    @abstractmethod
    def verify(self, message: bytes, signature: bytes, claimed_address: str) -> bool:
        """True only if ``signature`` over ``message`` belongs to ``claimed_address``."""


class Secp256k1RecoveryVerifier(SignatureVerifier):
    """EVM personal_sign verification by public key recovery."""

    family = ChainFamily.SECP256K1

    SIGNATURE_LENGTH = 65
    _ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

    def normalize_address(self, address: str) -> Optional[str]:
        if not isinstance(address, str):
            return None
        address = address.strip()
        if not address.lower().startswith("0x"):
            address = f"0x{address}"
        if not self._ADDRESS_RE.match(address):
            return None
        return address.lower()

    def decode_signature(self, signature: str) -> Optional[bytes]:
        if not isinstance(signature, str):
            return None
        value = signature.strip()
        if value[:2].lower() == "0x":
            value = value[2:]
        try:
            signature_bytes = bytes.fromhex(value)
        except ValueError:
            return None
        if len(signature_bytes) != self.SIGNATURE_LENGTH:
            return None
        return signature_bytes

    def verify(self, message: bytes, signature: bytes, claimed_address: str) -> bool:
        expected = self.normalize_address(claimed_address)
        if expected is None:
            logger.warning("Rejected EVM signature: malformed address")
            return False
        if len(signature) != self.SIGNATURE_LENGTH:
            logger.warning(f"Rejected EVM signature: invalid length {len(signature)}")
            return False

        # Only the personal_sign recovery ids; anything else would be read as EIP-155
        v = signature[64]
        if v in (0, 1):
            signature = signature[:64] + bytes([v + 27])
        elif v not in (27, 28):
            logger.warning(f"Rejected EVM signature: invalid recovery byte {v}")
            return False

        try:
            signable = encode_defunct(primitive=message)
            recovered = Account.recover_message(signable, signature=signature)
        except Exception as e:
            # Recovery errors come from several libraries (eth_keys, eth_utils, coincurve)
            logger.warning(f"EVM signature recovery failed: {type(e).__name__}")
            return False

        if recovered.lower() != expected:
            logger.warning(f"EVM signature does not match wallet {short_address(expected)}")
            return False
        return True


class Ed25519Verifier(SignatureVerifier):
    """Solana ed25519 verification against the base58 public key."""

    family = ChainFamily.ED25519

    PUBLIC_KEY_LENGTH = 32
    SIGNATURE_LENGTH = 64

    def _public_key(self, address: str) -> Optional[bytes]:
        try:
            public_key = base58.b58decode(address)
        except ValueError:
            return None
        if len(public_key) != self.PUBLIC_KEY_LENGTH:
            return None
        return public_key

    def normalize_address(self, address: str) -> Optional[str]:
        if not isinstance(address, str):
            return None
        address = address.strip()
        if not (32 <= len(address) <= 44):
            return None
        if self._public_key(address) is None:
            return None
        return address

    def decode_signature(self, signature: str) -> Optional[bytes]:
        if not isinstance(signature, str):
            return None
        value = signature.strip()
        signature_bytes: Optional[bytes]
        if value[:2].lower() == "0x" or len(value) == self.SIGNATURE_LENGTH * 2:
            try:
                signature_bytes = binascii.unhexlify(value[2:] if value[:2].lower() == "0x" else value)
            except (binascii.Error, ValueError):
                signature_bytes = None
        else:
            try:
                signature_bytes = base58.b58decode(value)
            except ValueError:
                signature_bytes = None
        if signature_bytes is None or len(signature_bytes) != self.SIGNATURE_LENGTH:
            return None
        return signature_bytes

    def verify(self, message: bytes, signature: bytes, claimed_address: str) -> bool:
        address = self.normalize_address(claimed_address)
        public_key = self._public_key(address) if address else None
        if public_key is None:
            logger.warning("Rejected Solana signature: malformed address")
            return False
        if len(signature) != self.SIGNATURE_LENGTH:
            logger.warning(f"Rejected Solana signature: invalid length {len(signature)}")
            return False

        try:
            VerifyKey(public_key).verify(message, signature)
        except (CryptoError, ValueError, TypeError):
            logger.warning(f"Invalid signature for wallet {short_address(address)}")
            return False
        return True


class VerifierRegistry:
    """Lookup table from chain to the verifier of its family."""

    def __init__(self, verifiers: Optional[Mapping[ChainFamily, SignatureVerifier]] = None):
        if verifiers is None:
            verifiers = {
                ChainFamily.SECP256K1: Secp256k1RecoveryVerifier(),
                ChainFamily.ED25519: Ed25519Verifier(),
            }
        missing = [family for family in ChainFamily if family not in verifiers]
        if missing:
            raise ValueError(f"No verifier registered for {', '.join(f.value for f in missing)}")
        self._verifiers: Dict[ChainFamily, SignatureVerifier] = dict(verifiers)

    def for_chain(self, value: str) -> Tuple[Chain, SignatureVerifier]:
        """
        Resolve a chain identifier to its chain and verifier.

        Raises:
            UnsupportedChainError: Unknown chain identifier
        """
        chain = parse_chain(value)
        return chain, self._verifiers[chain.family]
