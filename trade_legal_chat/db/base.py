"""Abstract chat store interface: strategy pattern for SQLite/Supabase switching"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
from trade_legal_chat.models.chat import ChatMessage, ChatSession, ContextFact


class ChatStoreInterface(ABC):
    """Abstract interface for legal chat persistence.
    Implemented by both SQLite and Supabase backends.

    Methods raise on failure; callers decide whether a failure is fatal."""

    @abstractmethod
    async def init_db(self) -> None:
        """Create (SQLite) or verify (Supabase) the schema."""

    @abstractmethod
    async def get_status(self) -> dict:
        """Get store status info (table counts, connection status)."""

    # Sessions

    @abstractmethod
    async def create_session(self, user_id: str, title: str) -> ChatSession:
        """Insert a session with zero messages. Returns the stored row."""

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[ChatSession]:
        """Get session by ID."""

    @abstractmethod
    async def list_sessions(self, user_id: str) -> List[ChatSession]:
        """Sessions of a user, most recently updated first."""

    @abstractmethod
    async def touch_session(
        self, session_id: str, added_messages: int, at: datetime
    ) -> None:
        """Bump message_count and set last_message_at/updated_at."""

    # Messages

    @abstractmethod
    async def insert_message(self, message: ChatMessage) -> ChatMessage:
        """Insert one message row. Returns it with its generated id."""

    @abstractmethod
    async def get_messages(self, user_id: str, session_id: str) -> List[ChatMessage]:
        """All rows of a (user, session) pair, oldest first."""

    @abstractmethod
    async def get_recent_messages(self, session_id: str, limit: int) -> List[ChatMessage]:
        """The newest ``limit`` rows of a session, newest first."""

    # Context facts

    @abstractmethod
    async def get_context(self, session_id: str) -> List[ContextFact]:
        """Context facts of a session, most important first."""

    @abstractmethod
    async def upsert_context(self, fact: ContextFact) -> None:
        """Insert or overwrite the fact keyed on (session_id, context_key)."""

    # AI configurations

    @abstractmethod
    async def get_active_ai_config(self) -> Optional[AIConfiguration]:
        """The active configuration, or None when none is active."""

    @abstractmethod
    async def list_ai_configs(self) -> List[AIConfiguration]:
        """All configurations, newest first."""

    @abstractmethod
    async def create_ai_config(self, config: AIConfiguration) -> AIConfiguration:
        """Insert a configuration. Returns the stored row."""

    @abstractmethod
    async def update_ai_config(
        self, config_id: str, update: AIConfigurationUpdate
    ) -> Optional[AIConfiguration]:
        """Apply the set fields of ``update``. Activating deactivates the rest.
        Returns None when the id does not exist."""

    @abstractmethod
    async def delete_ai_config(self, config_id: str) -> bool:
        """Delete a configuration. Returns False when the id does not exist."""

    @abstractmethod
    async def set_active_ai_config(self, config_id: str) -> bool:
        """Activate one configuration and deactivate the rest.
        Returns False when the id does not exist."""
