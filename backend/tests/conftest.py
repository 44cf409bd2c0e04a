"""
NotePolish Backend - Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment overrides are applied before any `notepolish` import so the
       settings singleton never sees production values.

Function-scoped fixtures:
    ├── mock_db_session:     AsyncMock standing in for AsyncSession
    ├── scripted_provider:   factory for CompletionProviders replaying a script
    ├── completion_payload:  factory for provider-shaped success bodies
    ├── auth_headers:        bearer header for a fresh user id
    └── test_client:         httpx.AsyncClient bound to the ASGI app
"""

import asyncio
import os
import uuid
from typing import Any, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["OPENROUTER_API_KEY"] = "test-key-not-real"
os.environ["OPENROUTER_BASE_URL"] = "https://openrouter.test/api/v1"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["LOG_LEVEL"] = "WARNING"

from notepolish.schemas.completion import CompletionRequest, RawCompletion  # noqa: E402
from notepolish.services.auth_service import create_access_token  # noqa: E402
from notepolish.services.llm_base import CompletionProvider  # noqa: E402


class Slow:
    """Script step: wait `seconds`, then produce `then` (payload or exception)."""

    def __init__(self, seconds: float, then: Any):
        self.seconds = seconds
        self.then = then


class ScriptedProvider(CompletionProvider):
    """
    Replays one scripted step per complete() call.

    Steps:
        dict / str      → returned as the RawCompletion payload
        RawCompletion   → returned as-is
        Exception       → raised (transport failure)
        Slow(s, step)   → sleeps s seconds, then behaves like `step`
    """

    def __init__(self, steps: List[Any]):
        self.steps = list(steps)
        self.requests: List[CompletionRequest] = []
        self.finished = 0

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def complete(self, request: CompletionRequest) -> RawCompletion:
        self.requests.append(request)
        step = self.steps.pop(0)
        if isinstance(step, Slow):
            await asyncio.sleep(step.seconds)
            step = step.then
        self.finished += 1
        if isinstance(step, Exception):
            raise step
        if isinstance(step, RawCompletion):
            return step
        return RawCompletion(payload=step, status_code=200)

    async def health_check(self) -> bool:
        return True


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def completion_payload():
    """Build an OpenAI-style chat-completion body carrying `text`."""

    def _build(text: Any) -> dict:
        return {
            "id": "gen-test",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}],
        }

    return _build


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


@pytest.fixture
def slow():
    return Slow


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    httpx.AsyncClient talking to the app in-process.

    The database dependency is overridden with `mock_db_session`; no real
    database is touched by route tests.
    """
    from notepolish.database import get_db_session
    from notepolish.main import app

    async def _override_db():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = _override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
