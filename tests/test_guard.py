"""Tests for the session guard: token extraction and verification."""

import pytest
from jose import jwt

from estatehub.core.exceptions import AuthError
from estatehub.core.guard import INVALID_TOKEN, MISSING_TOKEN, SessionGuard
from estatehub.core.security import create_access_token

T0 = 1_700_000_000
CLAIMS = {"sub": "42", "email": "agent@example.com", "role": "user"}


@pytest.fixture
def token(test_settings) -> str:
    return create_access_token(CLAIMS, test_settings, clock=lambda: T0)


def _guard(settings, now: int) -> SessionGuard:
    return SessionGuard(settings, clock=lambda: now)


def test_token_accepted_just_before_expiry(test_settings, token):
    identity = _guard(test_settings, T0 + 3599).verify(token)
    assert identity.user_id == 42
    assert identity.email == "agent@example.com"
    assert identity.role == "user"
    assert identity.issued_at == T0
    assert identity.expires_at == T0 + 3600


def test_token_rejected_after_expiry(test_settings, token):
    with pytest.raises(AuthError) as exc_info:
        _guard(test_settings, T0 + 3601).verify(token)
    assert exc_info.value.message == INVALID_TOKEN


def test_cookie_preferred_over_header(test_settings, token):
    other = create_access_token({**CLAIMS, "sub": "7"}, test_settings, clock=lambda: T0)
    identity = _guard(test_settings, T0).authenticate(
        {"authentication": token}, {"authorization": f"Bearer {other}"}
    )
    assert identity.user_id == 42


@pytest.mark.parametrize("scheme", ["Bearer", "bearer", "BEARER"])
def test_bearer_header_scheme_is_case_insensitive(test_settings, token, scheme):
    identity = _guard(test_settings, T0).authenticate({}, {"authorization": f"{scheme} {token}"})
    assert identity.user_id == 42


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer", "Token xyz"])
def test_missing_token(test_settings, header):
    headers = {"authorization": header} if header is not None else {}
    with pytest.raises(AuthError) as exc_info:
        _guard(test_settings, T0).authenticate({}, headers)
    assert exc_info.value.message == MISSING_TOKEN


def test_bad_signature_rejected(test_settings):
    forged = jwt.encode({**CLAIMS, "iat": T0, "exp": T0 + 3600}, "not-the-secret", algorithm="HS256")
    with pytest.raises(AuthError) as exc_info:
        _guard(test_settings, T0).verify(forged)
    assert exc_info.value.message == INVALID_TOKEN


@pytest.mark.parametrize("garbage", ["not-a-jwt", "a.b.c", ""])
def test_malformed_token_rejected(test_settings, garbage):
    with pytest.raises(AuthError) as exc_info:
        _guard(test_settings, T0).verify(garbage)
    assert exc_info.value.message == INVALID_TOKEN


def test_non_numeric_subject_rejected(test_settings):
    bad = create_access_token({"sub": "abc"}, test_settings, clock=lambda: T0)
    with pytest.raises(AuthError) as exc_info:
        _guard(test_settings, T0).verify(bad)
    assert exc_info.value.message == INVALID_TOKEN


def test_verification_does_not_extend_token(test_settings, token):
    guard = _guard(test_settings, T0 + 10)
    first = guard.verify(token)
    second = guard.verify(token)
    assert first == second
    assert first.expires_at == T0 + 3600
