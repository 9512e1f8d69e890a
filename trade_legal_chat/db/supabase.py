"""Supabase chat store implementing ChatStoreInterface"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from trade_legal_chat.db.base import ChatStoreInterface
from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
from trade_legal_chat.models.chat import ChatMessage, ChatSession, ContextFact
from trade_legal_chat.utils.config import get_settings

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "legal_chat_sessions"
MESSAGES_TABLE = "legal_chat_messages"
CONTEXT_TABLE = "legal_chat_context"
AI_CONFIG_TABLE = "ai_configurations"

# Lazy imports to avoid requiring supabase when using sqlite mode
_supabase_client = None
_service_client = None


async def _get_supabase_client():
    """Get or create the singleton async Supabase client (anon key)."""
    global _supabase_client
    if _supabase_client is None:
        from supabase import AsyncClientOptions, acreate_client

        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY must be set when DB_MODE=supabase"
            )
        _supabase_client = await acreate_client(
            settings.supabase_url,
            settings.supabase_key,
            options=AsyncClientOptions(postgrest_client_timeout=10),
        )
    return _supabase_client


async def _get_service_client():
    """Get or create the singleton async service-role client (bypasses RLS)."""
    global _service_client
    if _service_client is None:
        from supabase import AsyncClientOptions, acreate_client

        settings = get_settings()
        key = settings.supabase_service_key or settings.supabase_key
        if not settings.supabase_url or not key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for write operations"
            )
        _service_client = await acreate_client(
            settings.supabase_url,
            key,
            options=AsyncClientOptions(postgrest_client_timeout=10),
        )
    return _service_client


class SupabaseStore(ChatStoreInterface):
    """Supabase implementation of ChatStoreInterface."""

    def __init__(self):
        self._read = _get_supabase_client
        self._write = _get_service_client

    async def init_db(self) -> None:
        """Verify the schema exists.
        Tables are created by running the migration SQL in the Supabase SQL Editor."""
        client = await self._read()
        try:
            await client.table(SESSIONS_TABLE).select("id").limit(1).execute()
            logger.info("Supabase schema verified: tables accessible")
        except Exception as e:
            migration_path = Path(__file__).parent / "migrations" / "001_legal_chat.sql"
            logger.error(
                f"Schema not found. Run migration SQL in Supabase SQL Editor: {migration_path}"
            )
            raise RuntimeError(
                f"Supabase schema not initialized. Run 001_legal_chat.sql in SQL Editor. Error: {e}"
            ) from e

    async def get_status(self) -> dict:
        settings = get_settings()
        try:
            client = await self._read()
            sessions = await client.table(SESSIONS_TABLE).select("id", count="exact").execute()
            messages = await client.table(MESSAGES_TABLE).select("id", count="exact").execute()
            return {
                "mode": "supabase",
                "url": settings.supabase_url,
                "sessions": sessions.count or 0,
                "messages": messages.count or 0,
                "status": "connected",
            }
        except Exception as e:
            return {
                "mode": "supabase",
                "url": settings.supabase_url,
                "status": f"error: {e}",
            }

    # Sessions

    async def create_session(self, user_id: str, title: str) -> ChatSession:
        client = await self._write()
        result = await (
            client.table(SESSIONS_TABLE)
            .insert({
                "user_id": user_id,
                "title": title,
                "summary": None,
                "message_count": 0,
                "last_message_at": None,
            })
            .execute()
        )
        return ChatSession(**result.data[0])

    async def get_session(self, session_id: str) -> Optional[ChatSession]:
        client = await self._read()
        result = (
            await client.table(SESSIONS_TABLE)
            .select("*")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        return ChatSession(**result.data[0]) if result.data else None

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        client = await self._read()
        result = (
            await client.table(SESSIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
            .execute()
        )
        return [ChatSession(**row) for row in result.data]

    async def touch_session(
        self, session_id: str, added_messages: int, at: datetime
    ) -> None:
        # Read-modify-write: concurrent turns on one session can lose an increment
        client = await self._write()
        current = (
            await client.table(SESSIONS_TABLE)
            .select("message_count")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not current.data:
            return
        count = (current.data[0].get("message_count") or 0) + added_messages
        await (
            client.table(SESSIONS_TABLE)
            .update({
                "message_count": count,
                "last_message_at": at.isoformat(),
                "updated_at": at.isoformat(),
            })
            .eq("id", session_id)
            .execute()
        )

    # Messages

    async def insert_message(self, message: ChatMessage) -> ChatMessage:
        client = await self._write()
        result = await client.table(MESSAGES_TABLE).insert(message.to_row()).execute()
        return message.model_copy(update={"id": result.data[0]["id"]})

    async def get_messages(self, user_id: str, session_id: str) -> List[ChatMessage]:
        client = await self._read()
        result = (
            await client.table(MESSAGES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("session_id", session_id)
            .order("timestamp")
            .order("created_at")
            .execute()
        )
        return [ChatMessage(**row) for row in result.data]

    async def get_recent_messages(self, session_id: str, limit: int) -> List[ChatMessage]:
        client = await self._read()
        result = (
            await client.table(MESSAGES_TABLE)
            .select("*")
            .eq("session_id", session_id)
            .order("timestamp", desc=True)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [ChatMessage(**row) for row in result.data]

    # Context facts

    async def get_context(self, session_id: str) -> List[ContextFact]:
        client = await self._read()
        result = (
            await client.table(CONTEXT_TABLE)
            .select("session_id, user_id, context_key, context_value, context_type, importance")
            .eq("session_id", session_id)
            .order("importance", desc=True)
            .execute()
        )
        return [ContextFact(**row) for row in result.data]

    async def upsert_context(self, fact: ContextFact) -> None:
        client = await self._write()
        await (
            client.table(CONTEXT_TABLE)
            .upsert(fact.model_dump(), on_conflict="session_id,context_key")
            .execute()
        )

    # AI configurations

    async def get_active_ai_config(self) -> Optional[AIConfiguration]:
        client = await self._read()
        result = (
            await client.table(AI_CONFIG_TABLE)
            .select("*")
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        return AIConfiguration(**result.data[0]) if result.data else None

    async def list_ai_configs(self) -> List[AIConfiguration]:
        client = await self._read()
        result = (
            await client.table(AI_CONFIG_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [AIConfiguration(**row) for row in result.data]

    async def create_ai_config(self, config: AIConfiguration) -> AIConfiguration:
        client = await self._write()
        data = config.model_dump(exclude={"id", "created_at", "updated_at"})
        if config.is_active:
            await (
                client.table(AI_CONFIG_TABLE)
                .update({"is_active": False})
                .eq("is_active", True)
                .execute()
            )
        result = await client.table(AI_CONFIG_TABLE).insert(data).execute()
        return AIConfiguration(**result.data[0])

    async def update_ai_config(
        self, config_id: str, update: AIConfigurationUpdate
    ) -> Optional[AIConfiguration]:
        client = await self._write()
        existing = (
            await client.table(AI_CONFIG_TABLE)
            .select("id")
            .eq("id", config_id)
            .limit(1)
            .execute()
        )
        if not existing.data:
            return None
        fields = update.model_dump(exclude_unset=True)
        if fields.get("is_active"):
            # Deactivate first: the partial unique index allows one active row
            await (
                client.table(AI_CONFIG_TABLE)
                .update({"is_active": False})
                .neq("id", config_id)
                .execute()
            )
        fields["updated_at"] = datetime.now(timezone.utc).isoformat()
        result = (
            await client.table(AI_CONFIG_TABLE)
            .update(fields)
            .eq("id", config_id)
            .execute()
        )
        return AIConfiguration(**result.data[0]) if result.data else None

    async def delete_ai_config(self, config_id: str) -> bool:
        client = await self._write()
        result = (
            await client.table(AI_CONFIG_TABLE)
            .delete()
            .eq("id", config_id)
            .execute()
        )
        return bool(result.data)

    async def set_active_ai_config(self, config_id: str) -> bool:
        client = await self._write()
        existing = (
            await client.table(AI_CONFIG_TABLE)
            .select("id")
            .eq("id", config_id)
            .limit(1)
            .execute()
        )
        if not existing.data:
            return False
        # Deactivate first: the partial unique index allows one active row
        await (
            client.table(AI_CONFIG_TABLE)
            .update({"is_active": False})
            .neq("id", config_id)
            .execute()
        )
        await (
            client.table(AI_CONFIG_TABLE)
            .update({"is_active": True})
            .eq("id", config_id)
            .execute()
        )
        return True


def get_database(mode: str = None) -> ChatStoreInterface:
    """Factory: returns appropriate chat store implementation.

    mode: 'supabase' or 'sqlite'. Defaults to DB_MODE env var.
    """
    if mode is None:
        mode = get_settings().db_mode

    if mode == "supabase":
        return SupabaseStore()
    else:
        # Import here to avoid circular imports
        from trade_legal_chat.db.sqlite_client import SQLiteStore

        return SQLiteStore()
