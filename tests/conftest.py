"""
SoulyCore Test Fixtures
Shared fixtures for all test modules.

Each test gets a fresh SQLite file built from the models, an httpx client
bound to the app in-process, a scripted LLM client and an instant
connection tester.
"""
import os
import random
import tempfile
from typing import AsyncGenerator, List, Optional

# Must be set before config is imported
os.environ.setdefault("AUTO_MIGRATE", "false")
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("LLM_RETRY_DELAY", "0")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="soulycore-logs-"))

import httpx
import pytest

from database import init_engine, close_engine, create_tables, get_session
from datasources import ConnectionTester
from llm import LLMClient, LLMResponse, LLMRateLimitError, Message


# ============================================================
# Fakes
# ============================================================

class FakeLLMClient(LLMClient):
    """
    LLM client returning scripted replies.
    
    replies are consumed in order; the last one repeats. A reply that is an
    exception instance is raised instead of returned.
    """
    
    def __init__(self, replies: Optional[List] = None):
        super().__init__(api_key="test-key", model="fake-model")
        self.replies = list(replies or ["Fake reply"])
        self.calls: List[dict] = []
    
    def _next_reply(self):
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]
    
    def generate(self, prompt, system=None, max_tokens=1024, temperature=0.7) -> LLMResponse:
        return self.chat([Message(role="user", content=prompt)], system, max_tokens, temperature)
    
    def chat(self, messages, system=None, max_tokens=1024, temperature=0.7) -> LLMResponse:
        self.calls.append({"messages": messages, "system": system})
        reply = self._next_reply()
        if isinstance(reply, Exception):
            raise reply
        response = LLMResponse(
            content=reply,
            model=self.model,
            usage={"input_tokens": 10, "output_tokens": 5},
            stop_reason="stop",
            latency_ms=1,
        )
        self.log_call(messages, system, response, max_tokens, temperature)
        return response


def rate_limited() -> LLMRateLimitError:
    return LLMRateLimitError("429 Too Many Requests")


# ============================================================
# Database
# ============================================================

@pytest.fixture
async def db(tmp_path) -> AsyncGenerator[None, None]:
    """Fresh SQLite database with every table created."""
    await close_engine()
    await init_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables()
    yield
    await close_engine()


@pytest.fixture
async def session(db):
    """Session committed when the test body finishes."""
    async with get_session() as session:
        yield session


# ============================================================
# API
# ============================================================

@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def tester() -> ConnectionTester:
    return ConnectionTester(delay=0, success_rate=1.0, rng=random.Random(7))


@pytest.fixture
def app(fake_llm, tester):
    from api.main import app
    from api.dependencies import get_llm_client, get_connection_tester
    
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_connection_tester] = lambda: tester
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(db, app) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
