"""
Wallet authentication schemas for request/response validation.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ChallengeRequest(BaseModel):
    """Request a login challenge for a wallet."""

    wallet_address: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Wallet address on the given chain",
        examples=["0x1234567890123456789012345678901234567890"],
    )
    chain_type: str = Field(
        ...,
        min_length=1,
        max_length=32,
        description="Chain identifier, e.g. ethereum, polygon or solana",
        examples=["ethereum"],
    )


class ChallengeResponse(BaseModel):
    """Challenge the wallet must sign."""

    challenge_id: str = Field(..., description="Id to send back with the signature")
    nonce: str = Field(..., description="Random nonce embedded in the message")
    message: str = Field(..., description="Exact message to sign")
    expires_at: datetime = Field(..., description="Challenge expiry (UTC)")


class WalletLoginRequest(BaseModel):
    """Signed challenge submitted for login."""

    wallet_address: str = Field(..., min_length=1, max_length=128)
    chain_type: str = Field(..., min_length=1, max_length=32)
    signature: str = Field(
        ...,
        min_length=1,
        max_length=256,
        description="Hex (EVM, Solana) or base58 (Solana) encoded signature",
    )
    challenge_id: str = Field(..., min_length=1, max_length=64)
    message: Optional[str] = Field(
        default=None,
        max_length=512,
        description="Message that was signed; must match the challenge when given",
    )


class LoginResponse(BaseModel):
    """Session issued after a successful login."""

    token: str
    token_type: str = "bearer"
    user_id: str
    wallet_address: str
    wallet_chain: str
    is_new_user: bool
    expires_at: datetime


class VerifyResponse(BaseModel):
    status: str = "success"
    message: str = "Token is valid"
