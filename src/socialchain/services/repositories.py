"""Database repositories for challenges and wallet identities.

Repositories do not commit; the calling service owns the transaction.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.challenge import Challenge
from ..models.user import User


class ChallengeRepository:
    """Repository for challenge database operations."""

    async def create(self, db: AsyncSession, challenge: Challenge) -> Challenge:
        db.add(challenge)
        await db.flush()
        return challenge

    async def find_by_unique_key(self, db: AsyncSession, challenge_id: str) -> Optional[Challenge]:
        result = await db.execute(select(Challenge).where(Challenge.id == challenge_id))
        return result.scalar_one_or_none()

    async def delete_if_unused(self, db: AsyncSession, challenge_id: str) -> Optional[Challenge]:
        """
        Delete a challenge and return the deleted row.

        A single ``DELETE ... RETURNING`` statement: of several concurrent
        callers presenting the same id, only one gets the row back.

        Returns:
            The deleted challenge, or None if it did not exist
        """
        result = await db.execute(
            delete(Challenge)
            .where(Challenge.id == challenge_id)
            .returning(
                Challenge.id,
                Challenge.wallet_address,
                Challenge.chain,
                Challenge.nonce,
                Challenge.created_at,
                Challenge.expires_at,
            )
            .execution_options(synchronize_session=False)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return Challenge(
            id=row.id,
            wallet_address=row.wallet_address,
            chain=row.chain,
            nonce=row.nonce,
            created_at=row.created_at,
            expires_at=row.expires_at,
        )

    async def delete_expired(self, db: AsyncSession, now: datetime) -> int:
        result = await db.execute(
            delete(Challenge)
            .where(Challenge.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0


class UserRepository:
    """Repository for wallet identity database operations."""

    async def create(self, db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.flush()
        return user

    async def find_by_unique_key(self, db: AsyncSession, wallet_address: str, chain: str) -> Optional[User]:
        result = await db.execute(
            select(User).where(User.wallet_address == wallet_address, User.chain == chain)
        )
        return result.scalar_one_or_none()

    async def find_by_id(self, db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
