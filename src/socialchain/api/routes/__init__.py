"""
API routes for the SocialChain backend.

Exports all route modules for easy importing.
"""

from . import auth, users

__all__ = ["auth", "users"]
