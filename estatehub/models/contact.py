"""
Contact submissions — append-only audit of inbound contact requests.

``Contact`` backs the public form, ``AgentContact`` the authenticated
agent form which also stamps the submitting user.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from estatehub.db.base import Base


class ContactColumnsMixin:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=True)
    email = Column(String(320), nullable=True)
    message = Column(Text, nullable=True)
    property_id = Column(Integer, nullable=True)
    request_path = Column(String(500), nullable=True)
    request_body = Column(JSON, nullable=True)
    response_status = Column(Integer, nullable=True)
    user_agent = Column(String(500), nullable=True)
    ip_address = Column(String(64), nullable=True)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )


class Contact(ContactColumnsMixin, Base):
    __tablename__ = "contacts"


class AgentContact(ContactColumnsMixin, Base):
    __tablename__ = "agent_contacts"

    user_id: int | None = Column(Integer, ForeignKey("users.id"), nullable=True)  # type: ignore[assignment]
