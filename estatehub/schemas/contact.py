"""Pydantic schemas for contact and agent-contact submissions."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactCreate(BaseModel):
    name: str = Field(max_length=200)
    email: str = Field(max_length=320)
    message: str = Field(max_length=5000)
    property_id: int | None = None

    @field_validator("name", "message")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError("must be a valid email address")
        return v


class ContactCreated(BaseModel):
    ok: bool = True
    id: int
    created_at: datetime | None


class AgentContactCreate(BaseModel):
    property_id: int | None = None
    name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    message: str | None = Field(default=None, max_length=5000)
    metadata: dict[str, Any] | None = None


class AgentContactCreated(BaseModel):
    ok: bool = True
    id: int
