"""
Pydantic schemas for request/response validation.

Exports all schemas for easy importing.
"""

from .auth import (
    ChallengeRequest,
    ChallengeResponse,
    LoginResponse,
    VerifyResponse,
    WalletLoginRequest,
)
from .base import ErrorResponse, HealthResponse
from .user import UserRead

__all__ = [
    # Auth
    "ChallengeRequest",
    "ChallengeResponse",
    "WalletLoginRequest",
    "LoginResponse",
    "VerifyResponse",
    # User
    "UserRead",
    # Common
    "ErrorResponse",
    "HealthResponse",
]
