from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from scholax.core.enums import Role
from scholax.core.exceptions import AuthenticationError, AuthorizationError
from scholax.users.access import AccessPolicy
from scholax.users.model import Identity
from scholax.users.otp import generate_otp
from scholax.users.tokens import SessionTokenService

TEACHER = Identity(account_id=7, email="rao@faculty.org", role=Role.TEACHER)


@pytest.fixture
def tokens():
    return SessionTokenService("test-secret", session_days=7)


def test_token_round_trip_carries_identity(tokens):
    assert tokens.verify(tokens.issue(TEACHER)) == TEACHER


def test_token_expires_after_session_lifetime(tokens):
    issued = datetime.now(timezone.utc) - timedelta(days=8)

    assert tokens.verify(tokens.issue(TEACHER, now=issued)) is None


def test_token_signed_with_other_key_is_rejected(tokens):
    forged = SessionTokenService("other-secret").issue(TEACHER)

    assert tokens.verify(forged) is None


def test_garbage_token_is_rejected(tokens):
    assert tokens.verify("not.a.jwt") is None
    assert tokens.verify("") is None


def test_token_claims(tokens):
    claims = jwt.decode(tokens.issue(TEACHER), "test-secret", algorithms=["HS256"])

    assert claims["sub"] == "7"
    assert claims["email"] == "rao@faculty.org"
    assert claims["role"] == "teacher"
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


def test_require_role_without_token_is_unauthorized(tokens):
    with pytest.raises(AuthenticationError):
        AccessPolicy(tokens).require_role(None, [Role.ADMIN])


def test_require_role_with_other_role_is_forbidden(tokens):
    with pytest.raises(AuthorizationError):
        AccessPolicy(tokens).require_role(tokens.issue(TEACHER), [Role.ADMIN])


def test_require_role_returns_identity(tokens):
    assert AccessPolicy(tokens).require_role(tokens.issue(TEACHER), [Role.TEACHER, Role.ADMIN]) == TEACHER


def test_generate_otp_is_six_digits():
    for _ in range(200):
        code = generate_otp()
        assert len(code) == 6 and code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_require_any_skips_tokens_that_fail_verification(tokens):
    policy = AccessPolicy(tokens)

    identity = policy.require_any(["stale.session.token", tokens.issue(TEACHER)], [Role.TEACHER])

    assert identity == TEACHER


def test_require_any_with_only_invalid_tokens_is_unauthorized(tokens):
    with pytest.raises(AuthenticationError):
        AccessPolicy(tokens).require_any(["stale.session.token", None], [Role.ADMIN])
