"""
Session guard — turns an inbound request into an ``Identity``.

Token sources, in order: the HTTP-only session cookie, then an
``Authorization: Bearer`` header.  Verification failures are reported
with one undifferentiated message.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass

from estatehub.core.config import Settings
from estatehub.core.exceptions import AuthError
from estatehub.core.security import Clock, decode_access_token

MISSING_TOKEN = "missing token"
INVALID_TOKEN = "invalid or expired token"


@dataclass(frozen=True)
class Identity:
    user_id: int
    email: str | None
    role: str
    issued_at: int | None
    expires_at: int


class SessionGuard:
    def __init__(self, settings: Settings, clock: Clock = time.time) -> None:
        self.settings = settings
        self.clock = clock

    def extract_token(
        self,
        cookies: Mapping[str, str],
        headers: Mapping[str, str],
    ) -> str:
        token = cookies.get(self.settings.AUTH_COOKIE_NAME)
        if token:
            return token

        auth_header = headers.get("authorization")
        if auth_header:
            scheme, _, credentials = auth_header.strip().partition(" ")
            credentials = credentials.strip()
            if scheme.lower() == "bearer" and credentials:
                return credentials

        raise AuthError(MISSING_TOKEN)

    def verify(self, token: str) -> Identity:
        payload = decode_access_token(token, self.settings, self.clock)
        if payload is None:
            raise AuthError(INVALID_TOKEN)

        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthError(INVALID_TOKEN, reason="token subject missing or malformed") from None

        return Identity(
            user_id=user_id,
            email=payload.get("email"),
            role=payload.get("role", "user"),
            issued_at=payload.get("iat"),
            expires_at=payload["exp"],
        )

    def authenticate(
        self,
        cookies: Mapping[str, str],
        headers: Mapping[str, str],
    ) -> Identity:
        return self.verify(self.extract_token(cookies, headers))
