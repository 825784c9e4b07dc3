"""Pydantic schemas for registration, login and session responses.

Field rules (email format, password policy) are enforced by the
credential service, not here, so every caller gets the same errors.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str
    name: str | None = Field(default=None, max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str


class AuthResponse(BaseModel):
    id: int
    email: str
    message: str


class MessageResponse(BaseModel):
    message: str


class IdentityRead(BaseModel):
    user_id: int
    email: str | None
    role: str
    issued_at: int | None
    expires_at: int

    model_config = {"from_attributes": True}
