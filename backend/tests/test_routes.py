"""
NotePolish Backend - HTTP Route Tests
=======================================

Requests go through the real app (middleware, auth dependency, exception
handlers). The completion provider is scripted, the database session mocked.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import httpx
import pytest

from notepolish.services.auth_service import hash_password
from notepolish.services.pipeline import (
    BEAUTIFY_FAILED,
    SUMMARIZE_FAILED,
    NotesPipeline,
)


@pytest.fixture
def use_provider(monkeypatch):
    """Point the AI routes at a pipeline over the given scripted provider."""

    def _use(provider):
        pipeline = NotesPipeline(provider, model_id="test/model", timeout_ms=50, retry_delay_ms=0)
        monkeypatch.setattr("notepolish.routes.ai.notes_pipeline", pipeline)
        return provider

    return _use


class TestService:

    @pytest.mark.asyncio
    async def test_root_banner(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "AI Notes Beautifier & Summarizer Backend is running.",
        }

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health_reports_provider_down(self, test_client, monkeypatch):
        monkeypatch.setattr(
            "notepolish.routes.health.openrouter_provider.health_check",
            AsyncMock(return_value=False),
        )

        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["completion_provider"] == "unavailable"
        assert body["status"] in ("degraded", "unhealthy")


class TestAuthGuard:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("POST", "/api/beautify"),
            ("POST", "/api/summarize"),
            ("POST", "/api/save"),
            ("GET", "/api/notes"),
            ("GET", "/api/auth/me"),
        ],
    )
    async def test_missing_token(self, test_client, method, path):
        response = await test_client.request(method, path, json={})

        assert response.status_code == 401
        assert response.json()["error"] == "No token provided."

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client):
        response = await test_client.post(
            "/api/beautify",
            json={"content": "notes"},
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token."


class TestBeautifyRoute:

    @pytest.mark.asyncio
    async def test_success(self, test_client, auth_headers, use_provider, scripted_provider, completion_payload):
        use_provider(scripted_provider([completion_payload("## Tidy\n- point")]))

        response = await test_client.post(
            "/api/beautify", json={"content": "messy"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"result": "## Tidy\n- point"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"content": ""}, {"content": "   "}, {"content": 7}])
    async def test_blank_content(self, test_client, auth_headers, use_provider, scripted_provider, body):
        provider = use_provider(scripted_provider([]))

        response = await test_client.post("/api/beautify", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "No content provided"
        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_provider_failure(self, test_client, auth_headers, use_provider, scripted_provider):
        provider = use_provider(scripted_provider([{"error": {"message": "overloaded"}}]))

        response = await test_client.post(
            "/api/beautify", json={"content": "notes"}, headers=auth_headers
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == BEAUTIFY_FAILED
        assert body["details"]["reason"] == "malformed_response"
        assert "request_id" in body
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_malformed_json_body(self, test_client, auth_headers):
        response = await test_client.post(
            "/api/beautify",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Malformed request body."


class TestSummarizeRoute:

    @pytest.mark.asyncio
    async def test_success(self, test_client, auth_headers, use_provider, scripted_provider, completion_payload):
        use_provider(scripted_provider([
            completion_payload("Plants make food.\nKey Takeaways:\n- Light\n- Water\n- CO2"),
        ]))

        response = await test_client.post(
            "/api/summarize", json={"text": "photosynthesis notes"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {"summaryText": "Plants make food.", "takeaways": ["Light", "Water", "CO2"]},
        }

    @pytest.mark.asyncio
    async def test_retry_recovers(self, test_client, auth_headers, use_provider, scripted_provider, completion_payload):
        provider = use_provider(scripted_provider([
            httpx.ConnectError("reset"),
            completion_payload("OK.\nTakeaways:\n- fine"),
        ]))

        response = await test_client.post(
            "/api/summarize", json={"text": "notes"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["takeaways"] == ["fine"]
        assert provider.calls == 2

    @pytest.mark.asyncio
    async def test_retry_exhausted(self, test_client, auth_headers, use_provider, scripted_provider):
        provider = use_provider(scripted_provider([
            httpx.ConnectError("reset"),
            httpx.ConnectError("reset again"),
        ]))

        response = await test_client.post(
            "/api/summarize", json={"text": "notes"}, headers=auth_headers
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == SUMMARIZE_FAILED
        assert body["details"]["attempts"] == 2
        assert provider.calls == 2

    @pytest.mark.asyncio
    async def test_blank_text(self, test_client, auth_headers, use_provider, scripted_provider):
        provider = use_provider(scripted_provider([]))

        response = await test_client.post("/api/summarize", json={"text": ""}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "No text provided"
        assert provider.calls == 0


class TestNotesRoutes:

    @pytest.mark.asyncio
    async def test_save(self, test_client, auth_headers, user_id, mock_db_session):
        response = await test_client.post(
            "/api/save",
            json={
                "rawText": "raw",
                "beautifiedText": "pretty",
                "summaryText": "short",
                "takeaways": ["a", "b"],
            },
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["userId"] == str(user_id)
        assert body["data"]["summaryText"] == "short"
        assert body["data"]["takeaways"] == ["a", "b"]
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_save_missing_fields(self, test_client, auth_headers, mock_db_session):
        response = await test_client.post(
            "/api/save", json={"rawText": "raw"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required note fields."
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_list(self, test_client, auth_headers, user_id, mock_db_session):
        note = MagicMock()
        note.id = uuid4()
        note.user_id = user_id
        note.raw_text = "raw"
        note.beautified_text = "pretty"
        note.summary_text = "short"
        note.takeaways = ["a"]
        note.created_at = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
        result = MagicMock()
        result.scalars.return_value.all.return_value = [note]
        mock_db_session.execute.return_value = result

        response = await test_client.get("/api/notes", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["id"] == str(note.id)
        assert data[0]["beautifiedText"] == "pretty"
        assert data[0]["createdAt"].startswith("2025-01-15T12:00:00")


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_register(self, test_client, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        response = await test_client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "pw123456"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "ada@example.com"
        assert "password_hash" not in body["user"]

    @pytest.mark.asyncio
    async def test_register_missing_fields(self, test_client):
        response = await test_client.post("/api/auth/register", json={"email": "a@b.c"})

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required."

    @pytest.mark.asyncio
    async def test_register_overlong_password(self, test_client, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        response = await test_client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "x" * 100},
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "password"}

    @pytest.mark.asyncio
    async def test_login_then_me(self, test_client, mock_db_session):
        user = MagicMock()
        user.id = uuid4()
        user.name = "Ada"
        user.email = "ada@example.com"
        user.password_hash = hash_password("pw123456")
        result = MagicMock()
        result.scalar_one_or_none.return_value = user
        mock_db_session.execute.return_value = result

        login = await test_client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "pw123456"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        me = await test_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert me.status_code == 200
        assert me.json() == {"user": {"id": str(user.id), "name": "Ada", "email": "ada@example.com"}}

    @pytest.mark.asyncio
    async def test_login_bad_credentials(self, test_client, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        response = await test_client.post(
            "/api/auth/login", json={"email": "ghost@example.com", "password": "x"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email or password."
