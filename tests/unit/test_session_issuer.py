"""
Unit tests for session token issuance and validation.
"""

from datetime import timedelta

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from jose import jwt

from socialchain.core.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
)
from socialchain.core.security import SessionIssuer, extract_bearer_token

USER_ID = "3f2c0f0e-8d1b-4b8e-9a57-2f0b7f1c6a10"
ADDRESS = "0x" + "ab" * 20


@pytest.mark.unit
class TestSessionIssuer:
    def test_issue_then_validate_round_trip(self, session_issuer, clock):
        token = session_issuer.issue(USER_ID, ADDRESS, "ethereum")

        credential = session_issuer.validate(token)

        assert credential.subject == USER_ID
        assert credential.wallet_address == ADDRESS
        assert credential.wallet_chain == "ethereum"
        assert credential.issued_at == clock.now
        assert credential.expires_at == clock.now + timedelta(hours=24)

    def test_claims_are_integer_unix_seconds(self, session_issuer, clock):
        token = session_issuer.issue(USER_ID, ADDRESS, "ethereum")

        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == USER_ID
        assert claims["iat"] == int(clock.now.timestamp())
        assert claims["exp"] - claims["iat"] == 86400

    def test_token_valid_until_just_before_expiry(self, session_issuer, clock):
        token = session_issuer.issue(USER_ID, ADDRESS, "ethereum")
        clock.advance(86399)

        assert session_issuer.validate(token).subject == USER_ID

    def test_token_expires_after_ttl(self, session_issuer, clock):
        token = session_issuer.issue(USER_ID, ADDRESS, "ethereum")
        clock.advance(86400)

        with pytest.raises(TokenExpiredError):
            session_issuer.validate(token)

    def test_token_signed_with_other_secret_is_rejected(self, session_issuer, clock):
        other = SessionIssuer(secret="another-secret", clock=clock)
        token = other.issue(USER_ID, ADDRESS, "ethereum")

        with pytest.raises(InvalidTokenError):
            session_issuer.validate(token)

    def test_tampered_payload_is_rejected(self, session_issuer):
        header, payload, signature = session_issuer.issue(USER_ID, ADDRESS, "ethereum").split(".")
        forged = jwt.encode({"sub": "someone-else"}, "guess", algorithm="HS256").split(".")[1]

        with pytest.raises(InvalidTokenError):
            session_issuer.validate(f"{header}.{forged}.{signature}")

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_garbage_is_rejected(self, session_issuer, token):
        with pytest.raises(InvalidTokenError):
            session_issuer.validate(token)

    def test_missing_claims_are_rejected(self, session_issuer, clock):
        token = jwt.encode(
            {"sub": USER_ID, "exp": int(clock.now.timestamp()) + 60},
            "testing-secret",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError, match="payload"):
            session_issuer.validate(token)

    def test_empty_secret_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            SessionIssuer(secret="")

    def test_non_positive_ttl_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            SessionIssuer(secret="secret", ttl_seconds=0)

    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(
        user_id=st.uuids().map(str),
        address=st.text(alphabet="123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz", min_size=32, max_size=44),
        chain=st.sampled_from(["ethereum", "polygon", "bsc", "arbitrum", "base", "solana"]),
    )
    def test_round_trip_preserves_identity(self, session_issuer, user_id, address, chain):
        """validate(issue(x)) returns x for any identity."""
        credential = session_issuer.validate(session_issuer.issue(user_id, address, chain))

        assert (credential.subject, credential.wallet_address, credential.wallet_chain) == (
            user_id,
            address,
            chain,
        )


@pytest.mark.unit
class TestExtractBearerToken:
    def test_strips_bearer_prefix(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_prefix_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    def test_raw_token_is_accepted(self):
        assert extract_bearer_token("abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "   "])
    def test_missing_token_raises(self, header):
        with pytest.raises(MissingTokenError):
            extract_bearer_token(header)
