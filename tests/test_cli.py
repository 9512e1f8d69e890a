"""Tests for the command line interface"""

import asyncio

import pytest
from typer.testing import CliRunner

from trade_legal_chat.cli.main import app
from trade_legal_chat.db.sqlite_client import SQLiteStore
from trade_legal_chat.services import legal_ai
from trade_legal_chat.services.legal_ai import LegalAIService
from trade_legal_chat.utils.config import get_settings

from conftest import FailingCompletionClient

runner = CliRunner()


@pytest.fixture
def service(monkeypatch):
    db = SQLiteStore()
    asyncio.run(db.init_db())
    service = LegalAIService(
        db=db, completion_client=FailingCompletionClient(), settings=get_settings()
    )
    monkeypatch.setattr(legal_ai, "_legal_ai_service", service)
    return service


def test_init_creates_database(tmp_path):
    result = runner.invoke(app, ["init"])

    assert result.exit_code == 0
    assert (tmp_path / "test.db").exists()


def test_chat_json(service):
    result = runner.invoke(app, ["chat", "How long does customs clearance take in Canada?", "--user", "u1", "--json"])

    assert result.exit_code == 0
    assert "Canada imports require a Bill of Lading" in result.output
    assert '"confidence": 0.7' in result.output


def test_chat_then_sessions_and_history(service):
    runner.invoke(app, ["chat", "What duty applies to steel?", "-u", "u1"])
    session_id = asyncio.run(service.db.list_sessions("u1"))[0].id

    listed = runner.invoke(app, ["sessions", "--user", "u1", "--json"])
    assert listed.exit_code == 0
    assert session_id in listed.output

    history = runner.invoke(app, ["history", session_id, "--user", "u1"])
    assert history.exit_code == 0
    assert "What duty applies to steel?" in history.output
    assert "Tariffs and duties vary" in history.output


def test_ai_config_activate_missing(service):
    result = runner.invoke(app, ["ai-config", "--activate", "missing"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_ai_config_empty(service):
    result = runner.invoke(app, ["ai-config"])

    assert result.exit_code == 0
    assert "No AI configurations" in result.output


def test_status(service):
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "connected" in result.output


def test_ai_config_create_update_delete(service):
    created = runner.invoke(app, [
        "ai-config", "--create", "strict",
        "--system-role", "You are ACME's trade counsel.",
        "--temperature", "0.2", "--active",
    ])
    assert created.exit_code == 0
    config = asyncio.run(service.db.get_active_ai_config())
    assert config.name == "strict"
    assert config.system_role == "You are ACME's trade counsel."
    assert config.temperature == 0.2

    updated = runner.invoke(app, ["ai-config", "--update", config.id, "--max-tokens", "900", "--inactive"])
    assert updated.exit_code == 0
    stored = asyncio.run(service.db.list_ai_configs())[0]
    assert stored.max_tokens == 900
    assert not stored.is_active

    deleted = runner.invoke(app, ["ai-config", "--delete", config.id])
    assert deleted.exit_code == 0
    assert asyncio.run(service.db.list_ai_configs()) == []


def test_ai_config_update_unknown(service):
    result = runner.invoke(app, ["ai-config", "--update", "missing", "--name", "x"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_ai_config_rejects_two_actions(service):
    result = runner.invoke(app, ["ai-config", "--delete", "a", "--activate", "b"])

    assert result.exit_code == 2
