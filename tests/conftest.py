"""Pytest configuration and fixtures"""

import pytest
import pytest_asyncio

from trade_legal_chat.db.sqlite_client import SQLiteStore
from trade_legal_chat.services import legal_ai
from trade_legal_chat.services.legal_ai import LegalAIService
from trade_legal_chat.utils.config import get_settings
from trade_legal_chat.utils.llm import CompletionError


LIVE_REPLY = """Direct answer: exporting requires a commercial invoice.

- Prepare the commercial invoice
- Check export procedures with a customs broker
* Confirm the HS code classification
• Keep copies of all documentation
Regular closing line about compliance and regulations."""


class FakeCompletionClient:
    """Completion client that always answers with a fixed reply"""

    def __init__(self, reply: str = LIVE_REPLY):
        self.reply = reply
        self.calls = []

    async def complete(self, system_prompt, user_prompt, max_tokens, temperature):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        return self.reply


class FailingCompletionClient:
    """Completion client whose endpoint is unreachable"""

    def __init__(self):
        self.calls = 0

    async def complete(self, system_prompt, user_prompt, max_tokens, temperature):
        self.calls += 1
        raise CompletionError("endpoint unavailable")


@pytest.fixture(autouse=True)
def test_env(tmp_path, monkeypatch):
    """Set up test environment with temporary database"""
    db_path = tmp_path / "test.db"

    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    monkeypatch.setenv("DB_MODE", "sqlite")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "test_key")
    monkeypatch.setattr(legal_ai, "_legal_ai_service", None)

    yield

    # Cleanup handled by tmp_path fixture


@pytest_asyncio.fixture
async def store():
    """Initialized SQLite chat store in the temporary directory"""
    db = SQLiteStore()
    await db.init_db()
    return db


@pytest.fixture
def fake_llm():
    return FakeCompletionClient()


@pytest.fixture
def failing_llm():
    return FailingCompletionClient()


@pytest.fixture
def make_service():
    """Build a LegalAIService over the given store and completion client"""

    def _make(db, client, **kwargs):
        return LegalAIService(db=db, completion_client=client, settings=get_settings(), **kwargs)

    return _make
