"""
Login challenge store.

Issues short-lived random nonces bound to a wallet and chain, and consumes
them exactly once. Consumption is a single conditional delete so that two
requests racing on the same challenge cannot both succeed.
"""

import secrets
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ChallengeExpiredError, ChallengeNotFoundError
from ..core.logging import get_logger
from ..core.security import Clock, utc_now
from ..models.challenge import Challenge
from .repositories import ChallengeRepository

logger = get_logger(__name__)

NONCE_BYTES = 32


class ChallengeStore:
    """Issues and consumes single-use login challenges."""

    def __init__(
        self,
        repository: ChallengeRepository | None = None,
        ttl_seconds: int = 900,
        app_name: str = "SocialChain",
        clock: Clock = utc_now,
    ):
        if ttl_seconds <= 0:
            raise ValueError("Challenge TTL must be positive")
        self._repository = repository or ChallengeRepository()
        self._ttl = timedelta(seconds=ttl_seconds)
        self._app_name = app_name
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def build_sign_message(self, nonce: str) -> str:
        """The exact text a wallet signs for ``nonce``."""
        return f"Sign in to {self._app_name}\n\nNonce: {nonce}"

    async def issue_challenge(self, db: AsyncSession, wallet_address: str, chain: str) -> Challenge:
        """
        Create and persist a challenge for an already normalized wallet.

        Expired challenges are purged in the same transaction.

        Returns:
            The stored challenge, with its id and expiry populated
        """
        now = self._clock()
        await self._repository.delete_expired(db, now)

        challenge = Challenge(
            wallet_address=wallet_address,
            chain=chain,
            nonce=secrets.token_hex(NONCE_BYTES),
            expires_at=now + self._ttl,
        )
        await self._repository.create(db, challenge)
        await db.commit()

        logger.debug(f"Issued challenge {challenge.id} for chain {chain}")
        return challenge

    async def consume_challenge(self, db: AsyncSession, challenge_id: str) -> Challenge:
        """
        Atomically remove a challenge and return it.

        The deletion is committed before any expiry check, so a challenge is
        gone after its first presentation whatever the outcome.

        Raises:
            ChallengeNotFoundError: Unknown id, or already consumed
            ChallengeExpiredError: The challenge existed but had expired
        """
        challenge = await self._repository.delete_if_unused(db, challenge_id)
        await db.commit()

        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)
        if challenge.is_expired(self._clock()):
            raise ChallengeExpiredError(challenge_id)
        return challenge

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete every expired challenge and return how many were removed."""
        deleted = await self._repository.delete_expired(db, self._clock())
        await db.commit()
        if deleted:
            logger.info(f"Purged {deleted} expired challenges")
        return deleted
