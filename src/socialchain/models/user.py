"""
User model for wallet identities.

An identity is keyed by the (wallet_address, chain) pair. Profile fields
are owned by profile management and start out empty.
"""

from typing import Optional

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("wallet_address", "chain", name="uq_users_wallet_chain"),)

    wallet_address: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    chain: Mapped[str] = mapped_column(String(32), nullable=False)
    username: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)
    nickname: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    avatar_cid: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, wallet_address={self.wallet_address}, chain={self.chain})>"
