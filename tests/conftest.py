"""
Test configuration and fixtures.

Provides common fixtures and setup for all tests. Every test gets its own
in-memory SQLite database.
"""

import os
from datetime import datetime, timedelta, timezone

import base58
import pytest
import pytest_asyncio
from eth_account import Account
from eth_account.messages import encode_defunct
from httpx import ASGITransport, AsyncClient
from nacl.signing import SigningKey

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"

from socialchain.core.config import TestingConfig
from socialchain.core.security import SessionIssuer
from socialchain.db.session import Database
from socialchain.main import create_app
from socialchain.services.auth_service import AuthService
from socialchain.services.challenge_store import ChallengeStore
from socialchain.services.identity_resolver import IdentityResolver
from socialchain.services.verifiers import VerifierRegistry

TEST_SECRET = "testing-secret"


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def sign_evm(account, message: str) -> str:
    """personal_sign a message, returning the 0x-prefixed hex signature."""
    signature = Account.sign_message(encode_defunct(text=message), private_key=account.key).signature.hex()
    return signature if signature.startswith("0x") else f"0x{signature}"


def solana_address(signing_key: SigningKey) -> str:
    return base58.b58encode(bytes(signing_key.verify_key)).decode()


def sign_solana(signing_key: SigningKey, message: str) -> str:
    """Sign a message with an ed25519 key, returning the base58 signature."""
    return base58.b58encode(signing_key.sign(message.encode("utf-8")).signature).decode()


@pytest.fixture
def test_config():
    """Configuration for an isolated in-memory database."""
    return TestingConfig()


@pytest.fixture
def clock():
    """Clock starting at a fixed instant."""
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture(scope="function")
async def database(test_config):
    """Create an initialized database with all tables."""
    database = Database(test_config)
    database.init()
    await database.create_all()
    try:
        yield database
    finally:
        await database.close()


@pytest_asyncio.fixture(scope="function")
async def db_session_factory(database):
    """Create a database session factory for testing."""
    yield database.get_session_factory()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_session_factory):
    """Create a database session for testing."""
    async with db_session_factory() as session:
        yield session


@pytest.fixture
def session_issuer(clock):
    return SessionIssuer(secret=TEST_SECRET, ttl_seconds=86400, clock=clock)


@pytest.fixture
def challenge_store(clock):
    return ChallengeStore(ttl_seconds=900, app_name="SocialChain", clock=clock)


@pytest.fixture
def auth_service(challenge_store, session_issuer):
    """Orchestrator wired with the fake clock."""
    return AuthService(
        challenge_store=challenge_store,
        verifiers=VerifierRegistry(),
        identity_resolver=IdentityResolver(),
        session_issuer=session_issuer,
    )


@pytest.fixture
def evm_account():
    return Account.create()


@pytest.fixture
def solana_key():
    return SigningKey.generate()


@pytest_asyncio.fixture
async def app(test_config):
    """Application with its database initialized and tables created."""
    application = create_app(test_config)
    application.state.database.init()
    await application.state.database.create_all()
    try:
        yield application
    finally:
        await application.state.database.close()


@pytest_asyncio.fixture
async def client(app):
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class Signers:
    """Wallet-side signing helpers, exposed to tests as a fixture."""

    evm = staticmethod(sign_evm)
    solana = staticmethod(sign_solana)
    solana_address = staticmethod(solana_address)


@pytest.fixture
def signers():
    return Signers
