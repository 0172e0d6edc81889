"""
Unit tests for the challenge store.

**Property: a challenge is consumed at most once**
**Property: a challenge presented at or after its expiry is rejected**
"""

import asyncio
import re
from datetime import timedelta

import pytest
from sqlalchemy import func, select

from socialchain.core.exceptions import ChallengeExpiredError, ChallengeNotFoundError
from socialchain.models.challenge import Challenge
from socialchain.services.challenge_store import ChallengeStore

ADDRESS = "0x" + "12" * 20


async def count_challenges(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(Challenge))
    return result.scalar_one()


@pytest.mark.unit
class TestChallengeStore:
    def test_sign_message_format(self, challenge_store):
        assert challenge_store.build_sign_message("abc123") == "Sign in to SocialChain\n\nNonce: abc123"

    def test_sign_message_uses_app_name(self):
        store = ChallengeStore(app_name="Example")

        assert store.build_sign_message("n").startswith("Sign in to Example\n")

    def test_non_positive_ttl_is_rejected(self):
        with pytest.raises(ValueError):
            ChallengeStore(ttl_seconds=0)

    @pytest.mark.asyncio
    async def test_issue_challenge_persists_random_nonce(self, challenge_store, db_session, clock):
        challenge = await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")

        assert challenge.id
        assert re.fullmatch(r"[0-9a-f]{64}", challenge.nonce)
        assert challenge.wallet_address == ADDRESS
        assert challenge.chain == "ethereum"
        assert challenge.expires_at == clock.now + timedelta(minutes=15)
        assert await count_challenges(db_session) == 1

    @pytest.mark.asyncio
    async def test_nonces_are_unique(self, challenge_store, db_session):
        nonces = {
            (await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")).nonce
            for _ in range(20)
        }

        assert len(nonces) == 20

    @pytest.mark.asyncio
    async def test_consume_returns_challenge_once(self, challenge_store, db_session):
        issued = await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")

        consumed = await challenge_store.consume_challenge(db_session, issued.id)

        assert consumed.id == issued.id
        assert consumed.nonce == issued.nonce
        assert consumed.wallet_address == ADDRESS
        with pytest.raises(ChallengeNotFoundError):
            await challenge_store.consume_challenge(db_session, issued.id)

    @pytest.mark.asyncio
    async def test_consume_from_separate_sessions_succeeds_once(self, challenge_store, db_session_factory):
        async with db_session_factory() as session:
            issued = await challenge_store.issue_challenge(session, ADDRESS, "solana")

        outcomes = []
        for _ in range(3):
            async with db_session_factory() as session:
                try:
                    await challenge_store.consume_challenge(session, issued.id)
                    outcomes.append("consumed")
                except ChallengeNotFoundError:
                    outcomes.append("missing")

        assert outcomes == ["consumed", "missing", "missing"]

    @pytest.mark.asyncio
    async def test_concurrent_consumes_succeed_once(self, challenge_store, db_session_factory):
        async with db_session_factory() as session:
            issued = await challenge_store.issue_challenge(session, ADDRESS, "ethereum")

        async def attempt() -> str:
            async with db_session_factory() as session:
                try:
                    await challenge_store.consume_challenge(session, issued.id)
                except ChallengeNotFoundError:
                    return "missing"
                return "consumed"

        outcomes = await asyncio.gather(*(attempt() for _ in range(5)))

        assert outcomes.count("consumed") == 1
        assert outcomes.count("missing") == 4

    @pytest.mark.asyncio
    async def test_unknown_challenge_raises(self, challenge_store, db_session):
        with pytest.raises(ChallengeNotFoundError):
            await challenge_store.consume_challenge(db_session, "00000000-0000-0000-0000-000000000000")

    @pytest.mark.asyncio
    async def test_challenge_valid_just_before_expiry(self, challenge_store, db_session, clock):
        issued = await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        clock.advance(899)

        consumed = await challenge_store.consume_challenge(db_session, issued.id)

        assert consumed.id == issued.id

    @pytest.mark.asyncio
    async def test_expired_challenge_is_rejected_and_removed(self, challenge_store, db_session, clock):
        issued = await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        clock.advance(900)

        with pytest.raises(ChallengeExpiredError):
            await challenge_store.consume_challenge(db_session, issued.id)

        assert await count_challenges(db_session) == 0
        with pytest.raises(ChallengeNotFoundError):
            await challenge_store.consume_challenge(db_session, issued.id)

    @pytest.mark.asyncio
    async def test_purge_expired_removes_only_expired(self, challenge_store, db_session, clock):
        await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        clock.advance(600)
        fresh = await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        clock.advance(300)

        deleted = await challenge_store.purge_expired(db_session)

        assert deleted == 2
        assert await count_challenges(db_session) == 1
        assert (await challenge_store.consume_challenge(db_session, fresh.id)).id == fresh.id

    @pytest.mark.asyncio
    async def test_issue_purges_expired_challenges(self, challenge_store, db_session, clock):
        await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")
        clock.advance(901)

        await challenge_store.issue_challenge(db_session, ADDRESS, "ethereum")

        assert await count_challenges(db_session) == 1
