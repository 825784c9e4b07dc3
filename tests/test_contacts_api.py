"""Tests for the contact and agent-contact endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from estatehub.models.contact import AgentContact, Contact

from conftest import STRONG_PASSWORD

CONTACT = {"name": "Ann", "email": "ann@example.com", "message": "Is it still available?"}


async def _session_token(client: AsyncClient) -> tuple[int, str]:
    resp = await client.post(
        "/auth/register", json={"email": "agent@example.com", "password": STRONG_PASSWORD}
    )
    token = resp.cookies["authentication"]
    client.cookies.clear()
    return resp.json()["id"], token


@pytest.mark.asyncio
async def test_create_contact(async_client: AsyncClient, db_session):
    resp = await async_client.post(
        "/contacts", json={**CONTACT, "property_id": 3}, headers={"User-Agent": "pytest-agent"}
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["ok"] is True
    assert isinstance(data["id"], int)
    assert data["created_at"] is not None

    row = (await db_session.execute(select(Contact))).scalar_one()
    assert row.property_id == 3
    assert row.request_path == "/contacts"
    assert row.response_status == 201
    assert row.user_agent == "pytest-agent"
    assert row.request_body == {**CONTACT, "property_id": 3}


@pytest.mark.asyncio
async def test_identical_contacts_create_distinct_rows(async_client: AsyncClient):
    first = await async_client.post("/contacts", json=CONTACT)
    second = await async_client.post("/contacts", json=CONTACT)
    assert first.status_code == second.status_code == 201
    assert first.json()["id"] != second.json()["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {**CONTACT, "email": "nope"},
        {**CONTACT, "name": "   "},
        {"name": "Ann", "email": "ann@example.com"},
        {**CONTACT, "property_id": "abc"},
    ],
)
async def test_create_contact_validation(async_client: AsyncClient, payload):
    resp = await async_client.post("/contacts", json=payload)
    assert resp.status_code == 400
    assert resp.json()["statusCode"] == 400


@pytest.mark.asyncio
async def test_agent_contact_requires_session(async_client: AsyncClient):
    resp = await async_client.post("/agent-contact", json={"message": "Call me"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "missing token"


@pytest.mark.asyncio
async def test_agent_contact_stamps_user(async_client: AsyncClient, db_session):
    user_id, token = await _session_token(async_client)
    payload = {"property_id": 1, "message": "Please contact me", "metadata": {"source": "detail"}}

    resp = await async_client.post(
        "/agent-contact", json=payload, headers={"Authorization": f"Bearer {token}"}
    )
    assert resp.status_code == 202
    assert resp.json()["ok"] is True

    row = (await db_session.execute(select(AgentContact))).scalar_one()
    assert row.id == resp.json()["id"]
    assert row.user_id == user_id
    assert row.property_id == 1
    assert row.response_status == 202
    assert row.extra_metadata == {"source": "detail"}
    assert row.request_body == payload
    assert row.request_path == "/agent-contact"


@pytest.mark.asyncio
async def test_agent_contact_accepts_cookie(async_client: AsyncClient):
    _, token = await _session_token(async_client)
    resp = await async_client.post(
        "/agent-contact", json={}, headers={"Cookie": f"authentication={token}"}
    )
    assert resp.status_code == 202


@pytest.mark.asyncio
async def test_storage_failure_is_scrubbed(async_client: AsyncClient):
    from estatehub.api.deps import get_contact_recorder
    from estatehub.core.exceptions import GENERIC_SERVER_MESSAGE, StorageError
    from estatehub.main import app

    class _BrokenRecorder:
        async def record(self, *args, **kwargs):
            raise StorageError("could not store submission", reason="disk full")

    app.dependency_overrides[get_contact_recorder] = lambda: _BrokenRecorder()
    try:
        resp = await async_client.post("/contacts", json=CONTACT)
    finally:
        app.dependency_overrides.pop(get_contact_recorder, None)

    assert resp.status_code == 500
    body = resp.json()
    assert body["message"] == GENERIC_SERVER_MESSAGE
    assert "disk full" not in resp.text


@pytest.mark.asyncio
async def test_agent_contact_accepts_null_metadata(async_client: AsyncClient, db_session):
    _, token = await _session_token(async_client)
    resp = await async_client.post(
        "/agent-contact",
        json={"message": "hi", "metadata": None},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 202

    row = (await db_session.execute(select(AgentContact))).scalar_one()
    assert row.extra_metadata == {}
    assert row.request_body == {"message": "hi", "metadata": None}
