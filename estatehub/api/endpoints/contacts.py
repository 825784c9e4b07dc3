"""
Contact endpoints — public contact form and authenticated agent contact.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from estatehub.api.deps import get_contact_recorder, get_request_meta, require_identity
from estatehub.core.guard import Identity
from estatehub.models.contact import AgentContact, Contact
from estatehub.schemas.contact import (AgentContactCreate, AgentContactCreated,
                                       ContactCreate, ContactCreated)
from estatehub.services.contacts import ContactRecorder, RequestMeta

router = APIRouter(tags=["contacts"])


@router.post("/contacts", response_model=ContactCreated, status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactCreate,
    meta: RequestMeta = Depends(get_request_meta),
    recorder: ContactRecorder = Depends(get_contact_recorder),
) -> ContactCreated:
    row = await recorder.record(
        Contact, body.model_dump(), meta, response_status=status.HTTP_201_CREATED
    )
    return ContactCreated(id=row.id, created_at=row.created_at)


@router.post(
    "/agent-contact",
    response_model=AgentContactCreated,
    status_code=status.HTTP_202_ACCEPTED,
)
async def create_agent_contact(
    body: AgentContactCreate,
    meta: RequestMeta = Depends(get_request_meta),
    identity: Identity = Depends(require_identity),
    recorder: ContactRecorder = Depends(get_contact_recorder),
) -> AgentContactCreated:
    """Record an agent contact request stamped with the caller's user id."""
    row = await recorder.record(
        AgentContact,
        body.model_dump(),
        meta,
        response_status=status.HTTP_202_ACCEPTED,
        identity=identity,
    )
    return AgentContactCreated(id=row.id)
