"""
Services module for business logic.

Includes:
- AuthService: Wallet challenge/response login and session admission
- ChallengeStore: Single-use login challenges
- VerifierRegistry: Signature verification per chain family
- IdentityResolver: Wallet identity find-or-create
"""

from .auth_service import AuthService, LoginResult
from .challenge_store import ChallengeStore
from .identity_resolver import IdentityResolver
from .repositories import ChallengeRepository, UserRepository
from .verifiers import (
    Chain,
    ChainFamily,
    Ed25519Verifier,
    Secp256k1RecoveryVerifier,
    SignatureVerifier,
    VerifierRegistry,
    parse_chain,
)

__all__ = [
    "AuthService",
    "LoginResult",
    "ChallengeStore",
    "IdentityResolver",
    "ChallengeRepository",
    "UserRepository",
    "Chain",
    "ChainFamily",
    "SignatureVerifier",
    "Secp256k1RecoveryVerifier",
    "Ed25519Verifier",
    "VerifierRegistry",
    "parse_chain",
]
