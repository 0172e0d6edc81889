"""
SocialChain Backend

Wallet-authenticated backend for a social application: users prove
ownership of an EVM or Solana address by signing a one-time challenge and
receive a session token for protected endpoints.
"""

__version__ = "1.0.0"
__author__ = "SocialChain Development Team"
__description__ = "Wallet signature authentication and session issuance"
