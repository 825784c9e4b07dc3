"""
Credential service — registration, authentication and token issuance.

Email normalisation and the password policy are enforced here, once,
so every entry point (public signup, admin seeding) rejects the same
inputs with the same messages.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.core.config import Settings
from estatehub.core.exceptions import AuthError, ConflictError, StorageError, ValidationError
from estatehub.core.security import (BCRYPT_MAX_BYTES, Clock, create_access_token,
                                     dummy_password_hash, get_password_hash, verify_password)
from estatehub.models.user import User

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
INVALID_CREDENTIALS = "invalid credentials"


def normalise_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")


def validate_password(password: str) -> None:
    """Raise ``ValidationError`` naming the first policy rule the password breaks."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")


class CredentialService:
    def __init__(self, db: AsyncSession, settings: Settings, clock: Clock = time.time) -> None:
        self.db = db
        self.settings = settings
        self.clock = clock

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
        role: str = "user",
    ) -> User:
        validate_email(email)
        validate_password(password)
        email = normalise_email(email)

        if await self._find_by_email(email) is not None:
            logger.warning("Registration attempt with existing email: %s", email)
            raise ConflictError("Email already registered")

        user = User(
            email=email,
            password_hash=get_password_hash(password, self.settings.BCRYPT_ROUNDS),
            name=name,
            role=role,
            is_active=True,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same address
            await self.db.rollback()
            logger.warning("Concurrent registration for %s", email)
            raise ConflictError("Email already registered") from None
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("could not store user", reason=str(exc)) from exc

        await self.db.refresh(user)
        logger.info("User registered: %s (id=%d)", email, user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        email = normalise_email(email)
        user = await self._find_by_email(email)

        rounds = self.settings.BCRYPT_ROUNDS
        # Every path pays for one bcrypt check
        if user is not None and user.is_active:
            hashed = user.password_hash
        else:
            hashed = dummy_password_hash(rounds)
        password_ok = verify_password(password, hashed, rounds)

        if user is None:
            logger.warning("Login attempt with unknown email: %s", email)
            raise AuthError(INVALID_CREDENTIALS, reason="unknown email")
        if not user.is_active:
            logger.warning("Login attempt with inactive account: %s", email)
            raise AuthError(INVALID_CREDENTIALS, reason="account inactive")
        if not password_ok or len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            logger.warning("Invalid password attempt for: %s", email)
            raise AuthError(INVALID_CREDENTIALS, reason="password mismatch")

        user.last_login = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("could not update user", reason=str(exc)) from exc
        return user

    def issue_token(self, user: User) -> str:
        claims = {"sub": str(user.id), "email": user.email, "role": user.role}
        return create_access_token(claims, self.settings, self.clock)
