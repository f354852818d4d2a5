"""Unit tests for auth backend (JWT and password handling)."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import jwt

from orgmanager.core.auth.backend import PasswordHasher, TokenIssuer
from orgmanager.core.errors import InvalidTokenError


SECRET = "unit-test-secret-key-with-more-than-32-chars"


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(SECRET)


class TestPasswordHasher:
    """Tests for bcrypt hashing and verification."""

    def test_hash_returns_bcrypt_hash(self, fast_hasher):
        """hash should return a bcrypt hash, never the password."""
        hashed = fast_hasher.hash("mysecretpassword")

        assert hashed != "mysecretpassword"
        assert hashed.startswith("$2b$")

    def test_hash_different_each_time(self, fast_hasher):
        """Random salt makes two hashes of the same password differ."""
        assert fast_hasher.hash("mysecretpassword") != fast_hasher.hash("mysecretpassword")

    def test_verify_correct_password(self, fast_hasher):
        hashed = fast_hasher.hash("mysecretpassword")

        assert fast_hasher.verify("mysecretpassword", hashed) is True

    def test_verify_wrong_password(self, fast_hasher):
        hashed = fast_hasher.hash("mysecretpassword")

        assert fast_hasher.verify("wrongpassword", hashed) is False

    @pytest.mark.parametrize("stored", [None, "", "not-a-bcrypt-hash"])
    def test_verify_unusable_hash_is_false(self, fast_hasher, stored):
        """An empty or unrecognised stored hash never raises."""
        assert fast_hasher.verify("mysecretpassword", stored) is False

    def test_verify_empty_password_is_false(self, fast_hasher):
        hashed = fast_hasher.hash("mysecretpassword")

        assert fast_hasher.verify("", hashed) is False

    def test_default_rounds(self):
        """The default work factor is 12."""
        hashed = PasswordHasher().hash("pw")

        assert hashed.startswith("$2b$12$")


class TestTokenIssuer:
    """Tests for access and refresh token issuance and verification."""

    def test_issue_access_claims(self, token_issuer):
        """Access tokens carry the principal, organization and role."""
        admin_id, org_id = uuid4(), uuid4()

        token = token_issuer.issue_access(admin_id, org_id, "Acme Inc", "org_admin")
        claims = token_issuer.verify(token)

        assert token.count(".") == 2
        assert claims["sub"] == str(admin_id)
        assert claims["org_id"] == str(org_id)
        assert claims["org_name"] == "Acme Inc"
        assert claims["role"] == "org_admin"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == 15 * 60

    def test_issue_refresh_claims(self, token_issuer):
        """Refresh tokens carry a type marker and a unique jti."""
        admin_id = uuid4()

        claims = token_issuer.verify(token_issuer.issue_refresh(admin_id, uuid4()))

        assert claims["sub"] == str(admin_id)
        assert claims["type"] == "refresh"
        assert claims["jti"]
        assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60

    def test_refresh_tokens_are_distinct(self, token_issuer):
        """Two refresh tokens issued back to back differ."""
        admin_id, org_id = uuid4(), uuid4()

        first = token_issuer.issue_refresh(admin_id, org_id)
        second = token_issuer.issue_refresh(admin_id, org_id)

        assert first != second
        assert token_issuer.fingerprint(first) != token_issuer.fingerprint(second)

    def test_access_without_organization(self, token_issuer):
        claims = token_issuer.verify(token_issuer.issue_access(uuid4(), None, None))

        assert claims["org_id"] is None
        assert claims["org_name"] is None

    def test_verify_expired_token(self, token_issuer):
        token = token_issuer.issue_access(
            uuid4(), uuid4(), "Acme Inc", expires_delta=timedelta(seconds=-1)
        )

        with pytest.raises(InvalidTokenError):
            token_issuer.verify(token)

    def test_verify_wrong_secret(self, token_issuer):
        other = TokenIssuer("another-secret-key-with-more-than-32-chars")
        token = other.issue_access(uuid4(), uuid4(), "Acme Inc")

        with pytest.raises(InvalidTokenError):
            token_issuer.verify(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
    def test_verify_malformed_token(self, token_issuer, token):
        with pytest.raises(InvalidTokenError):
            token_issuer.verify(token)

    def test_verify_token_without_subject(self, token_issuer):
        token = jwt.encode({"type": "access", "exp": 9999999999}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            token_issuer.verify(token)

    def test_verify_access_returns_claims(self, token_issuer):
        admin_id, org_id = uuid4(), uuid4()
        token = token_issuer.issue_access(admin_id, org_id, "Acme Inc", "admin")

        principal = token_issuer.verify_access(token)

        assert principal.admin_id == str(admin_id)
        assert principal.organization_id == str(org_id)
        assert principal.organization_name == "Acme Inc"
        assert principal.role == "admin"

    def test_verify_access_rejects_refresh_token(self, token_issuer):
        """A refresh token cannot be used as a bearer access token."""
        token = token_issuer.issue_refresh(uuid4(), uuid4())

        with pytest.raises(InvalidTokenError):
            token_issuer.verify_access(token)

    def test_fingerprint_is_sha256_hex(self, token_issuer):
        fingerprint = token_issuer.fingerprint("some-token")

        assert len(fingerprint) == 64
        assert fingerprint == token_issuer.fingerprint("some-token")
        assert fingerprint != token_issuer.fingerprint("other-token")

    def test_from_settings(self, settings):
        token_issuer = TokenIssuer.from_settings(settings)

        assert token_issuer.secret_key == settings.secret_key
        assert token_issuer.algorithm == "HS256"
        assert token_issuer.access_expires_in == 15 * 60
