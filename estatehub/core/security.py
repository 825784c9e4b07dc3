"""
JWT token creation / verification and password hashing (bcrypt).

Nothing here reads global configuration: the secret, algorithm and
token lifetime come from the ``Settings`` passed by the caller, and the
current time from an injectable clock.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from estatehub.core.config import Settings

Clock = Callable[[], float]

_contexts: dict[int, CryptContext] = {}
_dummy_hashes: dict[int, str] = {}

BCRYPT_MAX_BYTES = 72


def _pwd_context(rounds: int) -> CryptContext:
    ctx = _contexts.get(rounds)
    if ctx is None:
        ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        _contexts[rounds] = ctx
    return ctx


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str, rounds: int = 10) -> bool:
    try:
        return _pwd_context(rounds).verify(plain, hashed)
    except ValueError:
        # Malformed or foreign hash in the store
        return False


def get_password_hash(plain: str, rounds: int = 10) -> str:
    return _pwd_context(rounds).hash(plain)


def dummy_password_hash(rounds: int = 10) -> str:
    """A fixed hash at the given cost, checked when no stored hash applies."""
    hashed = _dummy_hashes.get(rounds)
    if hashed is None:
        hashed = _dummy_hashes[rounds] = get_password_hash("unused-Passw0rd", rounds)
    return hashed


# ── JWT tokens ──────────────────────────────────────────────────────
def create_access_token(
    claims: dict[str, Any],
    settings: Settings,
    clock: Clock = time.time,
) -> str:
    issued_at = int(clock())
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(
    token: str,
    settings: Settings,
    clock: Clock = time.time,
) -> dict | None:
    """Return payload dict if the token is well-signed and unexpired, else ``None``."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": False},
        )
    except JWTError:
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or clock() >= exp:
        return None
    return payload
