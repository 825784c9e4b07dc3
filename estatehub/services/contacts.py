"""
Contact recorder — persists contact and agent-contact submissions.

Rows are append-only: every submission is stored verbatim alongside the
request context it arrived with.  Nothing is deduplicated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.core.exceptions import StorageError
from estatehub.core.guard import Identity
from estatehub.models.contact import AgentContact, Contact

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestMeta:
    path: str
    user_agent: str | None = None
    ip_address: str | None = None
    raw_body: Any = None


class ContactRecorder:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def record(
        self,
        model: type[Contact] | type[AgentContact],
        body: dict[str, Any],
        meta: RequestMeta,
        *,
        response_status: int,
        identity: Identity | None = None,
    ) -> Contact | AgentContact:
        row = model(
            name=body.get("name"),
            email=body.get("email"),
            message=body.get("message"),
            property_id=body.get("property_id"),
            request_path=meta.path,
            request_body=meta.raw_body if meta.raw_body is not None else body,
            response_status=response_status,
            user_agent=meta.user_agent,
            ip_address=meta.ip_address,
            extra_metadata=body.get("metadata") or {},
        )
        if identity is not None and model is AgentContact:
            row.user_id = identity.user_id

        self.db.add(row)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Failed to store %s submission: %s", model.__tablename__, exc)
            raise StorageError("could not store submission", reason=str(exc)) from exc

        await self.db.refresh(row)
        logger.info(
            "Recorded %s id=%d (user=%s)",
            model.__tablename__,
            row.id,
            identity.user_id if identity else None,
        )
        return row
