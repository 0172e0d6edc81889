"""
SQLAlchemy ORM models for the SocialChain backend.

Exports all models for easy importing.
"""

from .base import Base, BaseModel
from .challenge import Challenge
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "Challenge",
    "User",
]
