"""
Identity resolution for verified wallets.

Maps a verified (wallet_address, chain) pair to its stable user, creating
the user on first sight. Uniqueness is enforced by the database; losing an
insert race is resolved by reading the winner's row.
"""

from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import DatabaseError, IdentityNotFoundError
from ..core.logging import get_logger
from ..models.user import User
from .repositories import UserRepository

logger = get_logger(__name__)


class IdentityResolver:
    """Find-or-create for wallet identities."""

    def __init__(self, repository: UserRepository | None = None):
        self._repository = repository or UserRepository()

    async def resolve_or_create(
        self, db: AsyncSession, wallet_address: str, chain: str
    ) -> Tuple[User, bool]:
        """
        Return the identity for a wallet, creating it if needed.

        Args:
            db: Database session
            wallet_address: Normalized wallet address
            chain: Chain identifier

        Returns:
            Tuple of (user, created)

        Raises:
            DatabaseError: The insert conflicted but no row could be re-read
        """
        user = await self._repository.find_by_unique_key(db, wallet_address, chain)
        if user is not None:
            return user, False

        try:
            user = await self._repository.create(db, User(wallet_address=wallet_address, chain=chain))
            await db.commit()
        except IntegrityError:
            # Another request created the same identity first
            await db.rollback()
            existing = await self._repository.find_by_unique_key(db, wallet_address, chain)
            if existing is None:
                raise DatabaseError("Identity insert conflicted but no existing row was found")
            logger.info(f"Identity for chain {chain} created concurrently, using existing row")
            return existing, False

        await db.refresh(user)
        logger.info(
            "Created identity",
            extra={"user_id": user.id, "wallet_chain": chain},
        )
        return user, True

    async def get_by_id(self, db: AsyncSession, user_id: str) -> User:
        """
        Raises:
            IdentityNotFoundError: No identity has this id
        """
        user = await self._repository.find_by_id(db, user_id)
        if user is None:
            raise IdentityNotFoundError(user_id)
        return user
