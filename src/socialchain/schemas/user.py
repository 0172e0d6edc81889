"""
User schemas for request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    """Wallet identity returned to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Unique user identifier (UUID)")
    wallet_address: str = Field(..., description="Normalized wallet address")
    chain: str = Field(..., description="Chain the wallet signed in with")
    username: Optional[str] = None
    nickname: Optional[str] = None
    avatar_cid: Optional[str] = Field(default=None, description="Content id of the avatar image")
    created_at: datetime = Field(..., description="Timestamp when user was created")
    updated_at: datetime = Field(..., description="Timestamp when user was last updated")
