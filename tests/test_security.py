"""Tests for password hashing and session tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from wattboard.core.exceptions import TokenExpiredError, TokenInvalidError, UnauthorizedError
from wattboard.core.security import PasswordHasher, TokenService
from wattboard.schemas.user import TokenData

# =============================================================================
# Unit Tests: Password Hashing
# =============================================================================


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_is_bcrypt_and_not_the_password(self, hasher):
        """Test that the stored value is a bcrypt hash, never the raw input."""
        hashed = hasher.hash("password123")
        assert hashed != "password123"
        # bcrypt hashes start with $2b$ or $2a$
        assert hashed.startswith("$2")

    def test_hash_uses_configured_rounds(self):
        """Test that the cost factor is embedded in the hash."""
        hashed = PasswordHasher(rounds=5).hash("password123")
        assert hashed.split("$")[2] == "05"

    def test_hash_different_for_same_input(self, hasher):
        """Test that same password produces different hashes (due to salt)."""
        assert hasher.hash("password123") != hasher.hash("password123")

    def test_verify_correct(self, hasher):
        hashed = hasher.hash("mysecretpassword")
        assert hasher.verify("mysecretpassword", hashed) is True

    def test_verify_incorrect(self, hasher):
        hashed = hasher.hash("correctpassword")
        assert hasher.verify("wrongpassword", hashed) is False

    def test_verify_empty_password(self, hasher):
        hashed = hasher.hash("somepassword")
        assert hasher.verify("", hashed) is False

    def test_verify_unicode(self, hasher):
        hashed = hasher.hash("pässwörd✓")
        assert hasher.verify("pässwörd✓", hashed) is True

    def test_verify_malformed_hash(self, hasher):
        """Test that a corrupt stored hash is a mismatch, not a crash."""
        assert hasher.verify("password123", "not-a-bcrypt-hash") is False


# =============================================================================
# Unit Tests: Session Tokens
# =============================================================================


class TestTokenService:
    """Tests for TokenService."""

    def test_issue_then_verify_returns_identity(self, tokens):
        token = tokens.issue(42, "alice")
        data = tokens.verify(token)
        assert data.user_id == 42
        assert data.username == "alice"

    def test_username_is_optional(self, tokens):
        data = tokens.verify(tokens.issue(7))
        assert data.user_id == 7
        assert data.username is None

    def test_default_ttl_is_seven_days(self, tokens):
        claims = jwt.get_unverified_claims(tokens.issue(1))
        assert claims["exp"] - claims["iat"] == int(timedelta(days=7).total_seconds())

    def test_token_valid_before_ttl(self, tokens):
        token = tokens.issue(1, ttl=timedelta(minutes=5))
        assert tokens.verify(token).user_id == 1

    def test_token_expired_after_ttl(self, tokens):
        token = tokens.issue(1, ttl=timedelta(seconds=-1))
        with pytest.raises(TokenExpiredError) as exc_info:
            tokens.verify(token)
        assert exc_info.value.message == "Token has expired"

    def test_malformed_token(self, tokens):
        with pytest.raises(TokenInvalidError):
            tokens.verify("invalid.token.here")

    def test_wrong_signature(self, tokens):
        forged = TokenService(secret_key="another-secret").issue(1)
        with pytest.raises(TokenInvalidError) as exc_info:
            tokens.verify(forged)
        assert exc_info.value.message == "Invalid token"

    def test_missing_subject(self, tokens):
        token = jwt.encode({"username": "alice"}, "test-secret", algorithm="HS256")
        with pytest.raises(TokenInvalidError):
            tokens.verify(token)

    def test_non_integer_subject(self, tokens):
        token = jwt.encode({"sub": "alice"}, "test-secret", algorithm="HS256")
        with pytest.raises(TokenInvalidError):
            tokens.verify(token)

    def test_token_errors_are_unauthorized(self):
        assert issubclass(TokenExpiredError, UnauthorizedError)
        assert issubclass(TokenInvalidError, UnauthorizedError)

    def test_refresh_issues_new_token_for_same_user(self, tokens):
        refreshed = tokens.refresh(TokenData(user_id=3, username="carol"))
        data = tokens.verify(refreshed)
        assert data.user_id == 3
        assert data.username == "carol"
