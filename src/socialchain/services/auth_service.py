"""
Wallet authentication orchestration.

Ties the challenge store, signature verifiers, identity resolver and
session issuer into the login handshake and the admission gate for
protected requests.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    AuthenticationError,
    ChallengeExpiredError,
    ChallengeNotFoundError,
    InvalidAddressError,
)
from ..core.logging import get_logger
from ..core.security import (
    AuthenticatedUser,
    SessionIssuer,
    extract_bearer_token,
)
from ..models.challenge import Challenge
from ..models.user import User
from .challenge_store import ChallengeStore
from .identity_resolver import IdentityResolver
from .verifiers import VerifierRegistry, short_address

logger = get_logger("auth")


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful wallet login."""

    token: str
    user: User
    is_new_user: bool


class AuthService:
    """Challenge/response wallet login and session admission."""

    def __init__(
        self,
        challenge_store: ChallengeStore,
        verifiers: VerifierRegistry,
        identity_resolver: IdentityResolver,
        session_issuer: SessionIssuer,
    ):
        self.challenge_store = challenge_store
        self.verifiers = verifiers
        self.identity_resolver = identity_resolver
        self.session_issuer = session_issuer

    async def issue_challenge(self, db: AsyncSession, wallet_address: str, chain_type: str) -> Challenge:
        """
        Issue a login challenge for a wallet.

        Raises:
            UnsupportedChainError: Unknown chain identifier
            InvalidAddressError: Address is malformed for the chain
        """
        chain, verifier = self.verifiers.for_chain(chain_type)
        address = verifier.normalize_address(wallet_address)
        if address is None:
            raise InvalidAddressError(chain.value)

        challenge = await self.challenge_store.issue_challenge(db, address, chain.value)
        logger.info(
            "Challenge issued",
            extra={"wallet": short_address(address), "wallet_chain": chain.value},
        )
        return challenge

    async def login(
        self,
        db: AsyncSession,
        wallet_address: str,
        chain_type: str,
        challenge_id: str,
        signature: str,
        message: Optional[str] = None,
    ) -> LoginResult:
        """
        Exchange a signed challenge for a session token.

        The challenge is consumed before the signature is checked, so every
        attempt burns it whether or not it succeeds. Nothing is created for
        a failed attempt.

        Args:
            db: Database session
            wallet_address: Address the client claims to control
            chain_type: Chain identifier
            challenge_id: Id returned by ``issue_challenge``
            signature: Encoded signature over the challenge message
            message: Message the client signed, if it sends it back

        Returns:
            LoginResult with the token and resolved identity

        Raises:
            UnsupportedChainError: Unknown chain identifier
            AuthenticationError: Any challenge, address or signature failure
        """
        chain, verifier = self.verifiers.for_chain(chain_type)
        address = verifier.normalize_address(wallet_address)
        log_context = {
            "wallet": short_address(address or str(wallet_address)),
            "wallet_chain": chain.value,
        }

        try:
            challenge = await self.challenge_store.consume_challenge(db, challenge_id)
        except (ChallengeNotFoundError, ChallengeExpiredError) as e:
            raise self._rejection(e.code.lower(), log_context) from e

        if address is None:
            raise self._rejection("malformed address", log_context)
        if challenge.wallet_address != address or challenge.chain != chain.value:
            raise self._rejection("challenge bound to another wallet", log_context)

        expected_message = self.challenge_store.build_sign_message(challenge.nonce)
        if message is not None and message != expected_message:
            raise self._rejection("signed message does not match challenge", log_context)

        signature_bytes = verifier.decode_signature(signature)
        if signature_bytes is None:
            raise self._rejection("malformed signature", log_context)
        if not verifier.verify(expected_message.encode("utf-8"), signature_bytes, address):
            raise self._rejection("signature verification failed", log_context)

        user, created = await self.identity_resolver.resolve_or_create(db, address, chain.value)
        token = self.session_issuer.issue(user.id, user.wallet_address, user.chain)

        logger.info(
            "Wallet login succeeded",
            extra={**log_context, "user_id": user.id, "is_new_user": created},
        )
        return LoginResult(token=token, user=user, is_new_user=created)

    def admit(self, authorization: Optional[str]) -> AuthenticatedUser:
        """
        Gate for protected requests.

        Args:
            authorization: Raw ``Authorization`` header value

        Raises:
            MissingTokenError: No bearer token
            InvalidTokenError: Token fails verification
            TokenExpiredError: Token is past its expiry
        """
        token = extract_bearer_token(authorization)
        credential = self.session_issuer.validate(token)
        return AuthenticatedUser(
            user_id=credential.subject,
            wallet_address=credential.wallet_address,
            wallet_chain=credential.wallet_chain,
        )

    @staticmethod
    def _rejection(reason: str, log_context: dict) -> AuthenticationError:
        logger.warning(f"Wallet login rejected: {reason}", extra=log_context)
        return AuthenticationError(reason)
