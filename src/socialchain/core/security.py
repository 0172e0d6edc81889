"""
Session token issuance and validation.

Session credentials are stateless JWTs signed with the server secret. They
carry the identity id as ``sub`` plus the wallet binding, and are checked
for signature and expiry on every protected request.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from .exceptions import (
    ConfigurationError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
)

Clock = Callable[[], datetime]

REQUIRED_CLAIMS = ("sub", "wallet_address", "wallet_chain", "iat", "exp")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionCredential:
    """Decoded, validated contents of a session token."""

    subject: str
    wallet_address: str
    wallet_chain: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity attached to a request once the admission gate lets it through."""

    user_id: str
    wallet_address: str
    wallet_chain: str


class SessionIssuer:
    """Mints and validates signed, time-boxed session tokens.

    The secret is captured once at construction; rotating it invalidates
    every outstanding token.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 86400,
        clock: Clock = utc_now,
    ):
        if not secret:
            raise ConfigurationError("JWT_SECRET is not configured")
        if ttl_seconds <= 0:
            raise ConfigurationError("TOKEN_TTL_SECONDS must be positive")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, identity_id: str, wallet_address: str, chain: str) -> str:
        """
        Create a session token bound to an identity and its wallet.

        Args:
            identity_id: Stable identity id (UUID string)
            wallet_address: Normalized wallet address
            chain: Chain identifier the wallet signed in with

        Returns:
            Serialized JWT for the ``Authorization: Bearer`` header
        """
        now = self._clock()
        claims: Dict[str, Any] = {
            "sub": str(identity_id),
            "wallet_address": wallet_address,
            "wallet_chain": chain,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def validate(self, token: str) -> SessionCredential:
        """
        Verify a session token and return its credential.

        Expiry is checked here against the issuer's clock, not left to the
        token library alone.

        Raises:
            InvalidTokenError: Bad signature, malformed token or payload
            TokenExpiredError: Token is past its ``exp``
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except JWTError as e:
            raise InvalidTokenError() from e

        missing = [claim for claim in REQUIRED_CLAIMS if claim not in payload]
        if missing:
            raise InvalidTokenError("Invalid token payload")

        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidTokenError("Invalid token payload") from e

        if self._clock() >= expires_at:
            raise TokenExpiredError()

        return SessionCredential(
            subject=str(payload["sub"]),
            wallet_address=str(payload["wallet_address"]),
            wallet_chain=str(payload["wallet_chain"]),
            issued_at=issued_at,
            expires_at=expires_at,
        )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization`` header value.

    Raises:
        MissingTokenError: Header absent, or empty once ``Bearer `` is stripped
    """
    if not authorization:
        raise MissingTokenError()

    authorization = authorization.strip()
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer":
        token = credentials.strip()
    else:
        token = authorization
    if not token:
        raise MissingTokenError()
    return token


async def get_current_user(request: Request) -> AuthenticatedUser:
    """
    Dependency returning the user admitted for this request.

    The authentication middleware normally populates ``request.state.user``;
    routes outside its protected prefixes run the gate here instead.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return user

    auth_service = request.app.state.auth_service
    user = auth_service.admit(request.headers.get("Authorization"))
    request.state.user = user
    return user
