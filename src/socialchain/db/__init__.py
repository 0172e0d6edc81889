"""
Database module for the SocialChain backend.

Exports database session management and utilities.
"""

from .session import Database, get_db, to_async_url

__all__ = [
    "Database",
    "get_db",
    "to_async_url",
]
