"""
Unit tests for access token issuance and verification.

Tests cover:
- Payload round trip through issue/verify
- One hour default lifetime
- Expired, tampered, foreign-secret and malformed tokens
- Caller supplied exp/aud claims
"""

import pytest
from datetime import timedelta
from jose import jwt

from api.src.exceptions import InvalidTokenError
from api.src.services.token_service import TokenService


# ============================================================================
# ISSUE / VERIFY
# ============================================================================


class TestIssueAndVerify:
    """Tests for the happy path."""

    def test_verify_returns_issued_payload(self, token_service: TokenService):
        """Test that every payload key survives the round trip."""
        payload = {"email": "a@x.com", "name": "Alice", "roles": ["customer"]}

        decoded = token_service.verify(token_service.issue(payload))

        for key, value in payload.items():
            assert decoded[key] == value

    def test_token_expires_after_one_hour(self, token_service: TokenService):
        """Test default lifetime is 3600 seconds."""
        decoded = token_service.verify(token_service.issue({"email": "a@x.com"}))

        assert decoded["exp"] - decoded["iat"] == 3600

    def test_any_json_object_is_accepted(self, token_service: TokenService):
        """Test that payload shape is not validated."""
        decoded = token_service.verify(token_service.issue({}))

        assert "email" not in decoded
        assert "exp" in decoded

    def test_issue_does_not_mutate_payload(self, token_service: TokenService):
        """Test that iat/exp are added to a copy."""
        payload = {"email": "a@x.com"}

        token_service.issue(payload)

        assert payload == {"email": "a@x.com"}

    def test_caller_exp_is_overwritten(self, token_service: TokenService):
        """Test that a caller cannot extend the lifetime through the payload."""
        decoded = token_service.verify(token_service.issue({"email": "a@x.com", "exp": 4102444800}))

        assert decoded["exp"] - decoded["iat"] == 3600

    def test_audience_claim_is_not_enforced(self, token_service: TokenService):
        """Test that an aud claim in the payload does not break verification."""
        decoded = token_service.verify(token_service.issue({"email": "a@x.com", "aud": "storefront"}))

        assert decoded["aud"] == "storefront"

    @pytest.mark.parametrize("claims", [{"sub": 42}, {"jti": 7}, {"sub": {"id": 1}, "jti": [1, 2]}])
    def test_non_string_registered_claims_round_trip(self, token_service: TokenService, claims):
        """Test that sub/jti of any JSON type survive verification unchanged."""
        payload = {"email": "a@x.com", **claims}

        decoded = token_service.verify(token_service.issue(payload))

        assert {k: decoded[k] for k in payload} == payload


# ============================================================================
# REJECTIONS
# ============================================================================


class TestVerifyRejects:
    """Tests for tokens that must fail verification."""

    def test_expired_token(self, token_service: TokenService):
        """Test that an expired token is rejected."""
        token = token_service.issue({"email": "a@x.com"}, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidTokenError) as exc_info:
            token_service.verify(token)

        assert exc_info.value.reason == "Token expired"

    def test_tampered_signature(self, token_service: TokenService):
        """Test that changing the signature invalidates the token."""
        token = token_service.issue({"email": "a@x.com"})
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(InvalidTokenError):
            token_service.verify(tampered)

    def test_tampered_payload(self, token_service: TokenService):
        """Test that a payload re-signed with another secret is rejected."""
        forged = jwt.encode({"email": "victim@x.com"}, "another-secret", algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_service.verify(forged)

    def test_token_from_another_deployment(self, settings):
        """Test that tokens only verify against the secret that signed them."""
        other = TokenService(settings.model_copy(update={"access_token_secret": settings.access_token_secret + "-other"}))
        token = other.issue({"email": "a@x.com"})

        with pytest.raises(InvalidTokenError):
            TokenService(settings).verify(token)

    @pytest.mark.parametrize("token", ["not-a-jwt", "a.b.c", ""])
    def test_malformed_token(self, token_service: TokenService, token: str):
        """Test that garbage strings are rejected."""
        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_missing_token(self, token_service: TokenService):
        """Test that None is rejected."""
        with pytest.raises(InvalidTokenError) as exc_info:
            token_service.verify(None)

        assert exc_info.value.reason == "Token not provided"
