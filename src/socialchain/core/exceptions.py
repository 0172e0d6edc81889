"""
Custom exception classes for the SocialChain backend.

Provides domain-specific exceptions for error handling. Every exception
carries a machine readable ``code``; ``to_http_status`` maps codes to the
HTTP status returned to clients.
"""

from fastapi import status


class SocialChainException(Exception):
    """Base exception for the SocialChain backend."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class AuthenticationError(SocialChainException):
    """Raised when a wallet login attempt fails for any reason.

    The public message is always the same so that clients cannot tell which
    check failed. The specific reason is kept in ``reason`` for logging.
    """

    def __init__(self, reason: str = "authentication failed"):
        self.reason = reason
        super().__init__("Signature verification failed", "AUTHENTICATION_ERROR")


class UnsupportedChainError(SocialChainException):
    """Raised when no verifier is registered for a chain identifier."""

    def __init__(self, chain: str):
        self.chain = chain
        super().__init__(f"Unsupported chain type: {chain}", "UNSUPPORTED_CHAIN")


class InvalidAddressError(SocialChainException):
    """Raised when a wallet address is malformed for its chain."""

    def __init__(self, chain: str):
        super().__init__(f"Invalid wallet address for chain {chain}", "INVALID_ADDRESS")


class ChallengeNotFoundError(SocialChainException):
    """Raised when a challenge id is unknown or was already consumed."""

    def __init__(self, challenge_id: str):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge {challenge_id} not found", "CHALLENGE_NOT_FOUND")


class ChallengeExpiredError(SocialChainException):
    """Raised when a challenge is presented after its expiry."""

    def __init__(self, challenge_id: str):
        self.challenge_id = challenge_id
        super().__init__(f"Challenge {challenge_id} expired", "CHALLENGE_EXPIRED")


class MissingTokenError(SocialChainException):
    """Raised when a protected request carries no bearer token."""

    def __init__(self):
        super().__init__("Missing authorization token", "MISSING_TOKEN")


class InvalidTokenError(SocialChainException):
    """Raised when a session token fails signature or payload checks."""

    def __init__(self, message: str = "Invalid authorization token"):
        super().__init__(message, "INVALID_TOKEN")


class TokenExpiredError(SocialChainException):
    """Raised when a session token is past its expiry."""

    def __init__(self):
        super().__init__("Token expired", "TOKEN_EXPIRED")


class IdentityNotFoundError(SocialChainException):
    """Raised when an identity id does not resolve to a user."""

    def __init__(self, user_id: str):
        super().__init__(f"User with id {user_id} not found", "IDENTITY_NOT_FOUND")


class DatabaseError(SocialChainException):
    """Raised when there's a database error."""

    def __init__(self, message: str):
        super().__init__(message, "DATABASE_ERROR")


class ConfigurationError(SocialChainException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str):
        super().__init__(message, "CONFIGURATION_ERROR")


STATUS_CODE_MAP = {
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "MISSING_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "TOKEN_EXPIRED": status.HTTP_401_UNAUTHORIZED,
    "UNSUPPORTED_CHAIN": status.HTTP_400_BAD_REQUEST,
    "INVALID_ADDRESS": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "IDENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DATABASE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_status(exc: SocialChainException) -> int:
    """Return the HTTP status code for a SocialChainException."""
    return STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def to_error_body(exc: SocialChainException) -> dict:
    """Build the JSON error body returned to clients.

    Server-side failures never expose their message.
    """
    status_code = to_http_status(exc)
    message = exc.message if status_code < 500 else "Internal server error"
    return {"status": "error", "code": exc.code, "message": message}
