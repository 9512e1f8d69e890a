"""SQLite wrapper implementing ChatStoreInterface"""

import asyncio
from datetime import datetime
from typing import List, Optional

from trade_legal_chat.db.base import ChatStoreInterface
from trade_legal_chat.db import sqlite as sqlite_ops
from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
from trade_legal_chat.models.chat import ChatMessage, ChatSession, ContextFact
from trade_legal_chat.utils.config import get_settings


class SQLiteStore(ChatStoreInterface):
    """SQLite implementation of ChatStoreInterface.
    Wraps sqlite.py functions and runs them in a worker thread."""

    async def init_db(self) -> None:
        await asyncio.to_thread(sqlite_ops.init_db)

    async def get_status(self) -> dict:
        settings = get_settings()
        try:
            sessions = await asyncio.to_thread(sqlite_ops.count_rows, "legal_chat_sessions")
            messages = await asyncio.to_thread(sqlite_ops.count_rows, "legal_chat_messages")
            return {
                "mode": "sqlite",
                "path": settings.database_path,
                "sessions": sessions,
                "messages": messages,
                "status": "connected",
            }
        except Exception as e:
            return {
                "mode": "sqlite",
                "path": settings.database_path,
                "status": f"error: {e}",
            }

    async def create_session(self, user_id: str, title: str) -> ChatSession:
        row = await asyncio.to_thread(sqlite_ops.create_session, user_id, title)
        return ChatSession(**row)

    async def get_session(self, session_id: str) -> Optional[ChatSession]:
        row = await asyncio.to_thread(sqlite_ops.get_session, session_id)
        return ChatSession(**row) if row else None

    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        rows = await asyncio.to_thread(sqlite_ops.list_sessions, user_id)
        return [ChatSession(**r) for r in rows]

    async def touch_session(
        self, session_id: str, added_messages: int, at: datetime
    ) -> None:
        await asyncio.to_thread(
            sqlite_ops.touch_session, session_id, added_messages, sqlite_ops.to_iso(at)
        )

    async def insert_message(self, message: ChatMessage) -> ChatMessage:
        row = message.to_row()
        row["timestamp"] = sqlite_ops.to_iso(message.timestamp)
        stored = await asyncio.to_thread(sqlite_ops.insert_message, row)
        return message.model_copy(update={"id": stored["id"]})

    async def get_messages(self, user_id: str, session_id: str) -> List[ChatMessage]:
        rows = await asyncio.to_thread(sqlite_ops.get_messages, user_id, session_id)
        return [ChatMessage(**r) for r in rows]

    async def get_recent_messages(self, session_id: str, limit: int) -> List[ChatMessage]:
        rows = await asyncio.to_thread(sqlite_ops.get_recent_messages, session_id, limit)
        return [ChatMessage(**r) for r in rows]

    async def get_context(self, session_id: str) -> List[ContextFact]:
        rows = await asyncio.to_thread(sqlite_ops.get_context, session_id)
        return [ContextFact(**r) for r in rows]

    async def upsert_context(self, fact: ContextFact) -> None:
        await asyncio.to_thread(sqlite_ops.upsert_context, fact.model_dump())

    async def get_active_ai_config(self) -> Optional[AIConfiguration]:
        row = await asyncio.to_thread(sqlite_ops.get_active_ai_config)
        return AIConfiguration(**row) if row else None

    async def list_ai_configs(self) -> List[AIConfiguration]:
        rows = await asyncio.to_thread(sqlite_ops.list_ai_configs)
        return [AIConfiguration(**r) for r in rows]

    async def create_ai_config(self, config: AIConfiguration) -> AIConfiguration:
        row = await asyncio.to_thread(
            sqlite_ops.insert_ai_config, config.model_dump(exclude={"created_at", "updated_at"})
        )
        return AIConfiguration(**row)

    async def update_ai_config(
        self, config_id: str, update: AIConfigurationUpdate
    ) -> Optional[AIConfiguration]:
        row = await asyncio.to_thread(
            sqlite_ops.update_ai_config, config_id, update.model_dump(exclude_unset=True)
        )
        return AIConfiguration(**row) if row else None

    async def delete_ai_config(self, config_id: str) -> bool:
        return await asyncio.to_thread(sqlite_ops.delete_ai_config, config_id)

    async def set_active_ai_config(self, config_id: str) -> bool:
        return await asyncio.to_thread(sqlite_ops.set_active_ai_config, config_id)
