"""Tests for the SQLite chat store"""

from datetime import datetime, timedelta, timezone

import pytest

from trade_legal_chat.models import (
    AIConfiguration,
    AIConfigurationUpdate,
    ChatMessage,
    ContextFact,
    MessageType,
)


def _message(session_id, kind, text, at, user_id="u1"):
    return ChatMessage(
        session_id=session_id,
        user_id=user_id,
        message=text if kind == MessageType.USER else "",
        response=text if kind == MessageType.ASSISTANT else "",
        message_type=kind,
        suggestions=["one"] if kind == MessageType.ASSISTANT else [],
        timestamp=at,
    )


@pytest.mark.asyncio
async def test_create_and_get_session(store):
    session = await store.create_session("u1", "Legal Chat - test")

    fetched = await store.get_session(session.id)

    assert fetched.user_id == "u1"
    assert fetched.title == "Legal Chat - test"
    assert fetched.message_count == 0
    assert fetched.last_message_at is None
    assert await store.get_session("missing") is None


@pytest.mark.asyncio
async def test_sessions_listed_most_recent_first(store):
    older = await store.create_session("u1", "older")
    newer = await store.create_session("u1", "newer")
    await store.create_session("u2", "someone else")

    await store.touch_session(older.id, 2, datetime.now(timezone.utc) + timedelta(minutes=1))
    sessions = await store.list_sessions("u1")

    assert [s.id for s in sessions] == [older.id, newer.id]
    assert sessions[0].message_count == 2


@pytest.mark.asyncio
async def test_messages_round_trip_and_order(store):
    session = await store.create_session("u1", "t")
    now = datetime.now(timezone.utc)
    await store.insert_message(_message(session.id, MessageType.USER, "q1", now))
    stored = await store.insert_message(_message(session.id, MessageType.ASSISTANT, "a1", now))
    await store.insert_message(_message(session.id, MessageType.USER, "q2", now + timedelta(seconds=1)))

    rows = await store.get_messages("u1", session.id)

    assert stored.id
    assert [r.message or r.response for r in rows] == ["q1", "a1", "q2"]
    assert rows[1].suggestions == ["one"]
    assert rows[1].timestamp == rows[0].timestamp
    assert await store.get_messages("u2", session.id) == []

    recent = await store.get_recent_messages(session.id, 2)
    assert [r.message or r.response for r in recent] == ["q2", "a1"]


@pytest.mark.asyncio
async def test_context_upsert_is_unique_per_key(store):
    session = await store.create_session("u1", "t")
    await store.upsert_context(ContextFact(
        session_id=session.id, user_id="u1", context_key="legal_topics",
        context_value="tariff", context_type="legal_topic", importance=3,
    ))
    await store.upsert_context(ContextFact(
        session_id=session.id, user_id="u1", context_key="legal_topics",
        context_value="export", context_type="legal_topic", importance=3,
    ))
    await store.upsert_context(ContextFact(
        session_id=session.id, user_id="u1", context_key="case_information",
        context_value="held at border", context_type="case_info", importance=4,
    ))

    facts = await store.get_context(session.id)

    assert [(f.context_key, f.context_value) for f in facts] == [
        ("case_information", "held at border"),
        ("legal_topics", "export"),
    ]


@pytest.mark.asyncio
async def test_single_active_ai_config(store):
    assert await store.get_active_ai_config() is None

    first = await store.create_ai_config(AIConfiguration(name="first", is_active=True, temperature=0.1))
    second = await store.create_ai_config(AIConfiguration(name="second", is_active=True, max_tokens=900))

    active = await store.get_active_ai_config()
    assert active.id == second.id
    assert active.max_tokens == 900

    assert await store.set_active_ai_config(first.id) is True
    configs = {c.name: c for c in await store.list_ai_configs()}
    assert configs["first"].is_active
    assert not configs["second"].is_active
    assert configs["first"].temperature == 0.1

    assert await store.set_active_ai_config("missing") is False
    assert (await store.get_active_ai_config()).id == first.id


@pytest.mark.asyncio
async def test_status_counts_rows(store):
    session = await store.create_session("u1", "t")
    await store.insert_message(_message(session.id, MessageType.USER, "q", datetime.now(timezone.utc)))

    status = await store.get_status()

    assert status["mode"] == "sqlite"
    assert status["status"] == "connected"
    assert status["sessions"] == 1
    assert status["messages"] == 1


@pytest.mark.asyncio
async def test_update_ai_config_partial(store):
    config = await store.create_ai_config(AIConfiguration(
        name="draft", system_role="role", temperature=0.4,
    ))

    updated = await store.update_ai_config(
        config.id, AIConfigurationUpdate(custom_instructions="Cite sources.", temperature=None)
    )

    assert updated.name == "draft"
    assert updated.system_role == "role"
    assert updated.custom_instructions == "Cite sources."
    # explicitly set to None clears the override
    assert updated.temperature is None
    assert await store.update_ai_config("missing", AIConfigurationUpdate(name="x")) is None


@pytest.mark.asyncio
async def test_update_ai_config_activation_is_exclusive(store):
    first = await store.create_ai_config(AIConfiguration(name="first", is_active=True))
    second = await store.create_ai_config(AIConfiguration(name="second"))

    await store.update_ai_config(second.id, AIConfigurationUpdate(is_active=True))

    assert (await store.get_active_ai_config()).id == second.id
    configs = {c.id: c for c in await store.list_ai_configs()}
    assert not configs[first.id].is_active


@pytest.mark.asyncio
async def test_delete_ai_config(store):
    config = await store.create_ai_config(AIConfiguration(name="gone", is_active=True))

    assert await store.delete_ai_config(config.id) is True
    assert await store.delete_ai_config(config.id) is False
    assert await store.get_active_ai_config() is None
    assert await store.list_ai_configs() == []
