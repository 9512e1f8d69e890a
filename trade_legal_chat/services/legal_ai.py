"""Legal chat orchestrator: sessions, memory and completion calls"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from trade_legal_chat.db.base import ChatStoreInterface
from trade_legal_chat.db.supabase import get_database
from trade_legal_chat.models.ai_config import AIConfiguration
from trade_legal_chat.models.chat import (
    AIResponse,
    AssistantTurn,
    ChatMessage,
    ChatSession,
    ContextFact,
    SendMessageResult,
    StoreResult,
    UserTurn,
)
from trade_legal_chat.services.ai_config import AIConfigService
from trade_legal_chat.services.extraction import (
    DEFAULT_CONTEXT_EXTRACTORS,
    ContextExtractor,
    extract_related_topics,
    extract_suggestions,
)
from trade_legal_chat.services.fallback import (
    get_default_legal_response,
    technical_difficulties_response,
)
from trade_legal_chat.services.prompts import (
    build_context_prompt,
    build_system_prompt,
    build_user_prompt,
)
from trade_legal_chat.utils.config import Settings, get_settings
from trade_legal_chat.utils.language import Language, detect_language
from trade_legal_chat.utils.llm import CompletionClient

logger = logging.getLogger(__name__)

LIVE_CONFIDENCE = 0.85


def default_session_title(now: Optional[datetime] = None) -> str:
    """Title for sessions opened implicitly by the first message"""
    now = now or datetime.now()
    return f"Legal Chat - {now.strftime('%x')}"


class LegalAIService:
    """
    Legal assistance chat with per-session memory.

    Every public method returns a result object instead of raising. Store
    failures are classified in one place: session creation and session
    ownership are fatal for a turn, everything else is logged and the turn
    continues.
    """

    def __init__(
        self,
        db: Optional[ChatStoreInterface] = None,
        completion_client: Optional[CompletionClient] = None,
        settings: Optional[Settings] = None,
        extractors: Optional[Sequence[ContextExtractor]] = None,
    ):
        self.settings = settings or get_settings()
        self.db = db or get_database(self.settings.db_mode)
        self.completion = completion_client or CompletionClient(self.settings)
        self.ai_config = AIConfigService(self.db)
        self.extractors = list(extractors) if extractors is not None else list(DEFAULT_CONTEXT_EXTRACTORS)
        self.history_limit = self.settings.history_limit

    async def _attempt(self, description: str, default, operation, *args) -> StoreResult:
        """Run a store operation, converting failures to a logged error result."""
        try:
            return StoreResult(data=await operation(*args))
        except Exception as e:
            logger.warning(f"Failed to {description}: {e}")
            return StoreResult(data=default, error=f"Failed to {description}: {e}")

    # Session / message / context primitives

    async def create_chat_session(self, user_id: str, title: str) -> StoreResult[Optional[ChatSession]]:
        result = await self._attempt(
            "create chat session", None, self.db.create_session, user_id, title
        )
        if result.ok:
            logger.info(f"Chat session created: {result.data.id}")
        return result

    async def get_chat_sessions(self, user_id: str) -> StoreResult[List[ChatSession]]:
        return await self._attempt("fetch chat sessions", [], self.db.list_sessions, user_id)

    async def get_owned_session(
        self, user_id: str, session_id: str
    ) -> StoreResult[Optional[ChatSession]]:
        """The session if it exists and belongs to ``user_id``; ``data`` is None otherwise."""
        result = await self._attempt("fetch chat session", None, self.db.get_session, session_id)
        if result.ok and result.data is not None and result.data.user_id != user_id:
            return StoreResult(data=None)
        return result

    async def get_chat_history(self, user_id: str, session_id: str) -> StoreResult[List[ChatMessage]]:
        return await self._attempt(
            "fetch chat history", [], self.db.get_messages, user_id, session_id
        )

    async def get_conversation_history(
        self, session_id: str, limit: int = 10
    ) -> StoreResult[List[ChatMessage]]:
        """Newest ``limit`` rows, newest first; reverse for display order."""
        return await self._attempt(
            "fetch conversation history", [], self.db.get_recent_messages, session_id, limit
        )

    async def get_chat_context(self, session_id: str) -> StoreResult[List[ContextFact]]:
        return await self._attempt("fetch chat context", [], self.db.get_context, session_id)

    async def save_chat_context(
        self,
        session_id: str,
        user_id: str,
        context_key: str,
        context_value: str,
        context_type: str = "general",
        importance: int = 1,
    ) -> StoreResult[bool]:
        fact = ContextFact(
            session_id=session_id,
            user_id=user_id,
            context_key=context_key,
            context_value=context_value,
            context_type=context_type,
            importance=importance,
        )
        result = await self._attempt("save chat context", False, self.db.upsert_context, fact)
        return result if not result.ok else StoreResult(data=True)

    # Completion

    async def get_ai_response(
        self,
        message: str,
        context_info: str,
        language: Language,
        config: Optional[AIConfiguration] = None,
    ) -> AIResponse:
        """Ask the completion endpoint; fall back to canned guidance on any failure."""
        max_tokens = self.settings.llm_max_tokens
        temperature = self.settings.llm_temperature
        if config:
            if config.max_tokens:
                max_tokens = config.max_tokens
            if config.temperature is not None:
                temperature = config.temperature

        try:
            text = await self.completion.complete(
                build_system_prompt(context_info, config),
                build_user_prompt(message, language),
                max_tokens,
                temperature,
            )
        except Exception as e:
            logger.warning(f"Completion failed, using fallback response: {e}")
            return get_default_legal_response(message, language)

        return AIResponse(
            response=text,
            suggestions=extract_suggestions(text),
            related_topics=extract_related_topics(text),
            confidence=LIVE_CONFIDENCE,
        )

    async def _get_active_config(self) -> Optional[AIConfiguration]:
        result = await self.ai_config.get_active_config()
        if not result.ok:
            logger.warning(f"No AI configuration available, using defaults: {result.error}")
        return result.data

    # Orchestration

    async def send_message_with_memory(
        self, user_id: str, message: str, session_id: Optional[str] = None
    ) -> SendMessageResult:
        """
        Answer one message inside a session, creating the session if needed.

        Args:
            user_id: Caller identity
            message: Free-text legal question
            session_id: Existing session of this user, or None to open one

        Returns:
            SendMessageResult with the answer, ``new_session_id`` when a
            session was opened, and ``error`` describing any failure that
            did not prevent the answer.
        """
        try:
            return await self._send_message_with_memory(user_id, message, session_id)
        except Exception as e:
            logger.exception("Legal chat turn failed")
            return self._fatal(f"Failed to process message: {e}")

    async def _send_message_with_memory(
        self, user_id: str, message: str, session_id: Optional[str]
    ) -> SendMessageResult:
        if not user_id:
            return self._fatal("user_id is required")
        if not message or not message.strip():
            return self._fatal("message must not be empty")

        # 1. Session
        if not session_id:
            created = await self.create_chat_session(user_id, default_session_title())
            if not created.ok or created.data is None:
                return self._fatal(created.error or "Failed to create chat session")
            current_session_id = created.data.id
        else:
            owner_error = await self._check_session_owner(user_id, session_id)
            if owner_error:
                return self._fatal(owner_error)
            current_session_id = session_id

        # 2. Memory, best-effort
        context_result, history_result = await asyncio.gather(
            self.get_chat_context(current_session_id),
            self.get_conversation_history(current_session_id, self.history_limit),
        )

        # 3. Prompt context
        language = detect_language(message)
        context_info = build_context_prompt(context_result.data, history_result.data, language)

        # 4-6. Completion with fallback
        config = await self._get_active_config()
        ai_response = await self.get_ai_response(message, context_info, language, config)

        # 7. Persist the turn, best-effort
        errors = await self._persist_turn(
            current_session_id, user_id, message, ai_response, context_info
        )

        # 8. Derive context facts, best-effort
        await self._derive_context(current_session_id, user_id, message, ai_response.response)

        return SendMessageResult(
            response=ai_response,
            new_session_id=None if session_id else current_session_id,
            error="; ".join(errors) if errors else None,
        )

    def _fatal(self, error: str) -> SendMessageResult:
        logger.error(f"Legal chat turn aborted: {error}")
        return SendMessageResult(response=technical_difficulties_response(), error=error)

    async def _check_session_owner(self, user_id: str, session_id: str) -> Optional[str]:
        """Error message when the session is known to belong to someone else."""
        if not self.settings.verify_session_owner:
            return None
        try:
            session = await self.db.get_session(session_id)
        except Exception as e:
            logger.warning(f"Could not verify owner of session {session_id}, continuing: {e}")
            return None
        if session is None or session.user_id != user_id:
            return f"Chat session {session_id} not found for user {user_id}"
        return None

    async def _persist_turn(
        self,
        session_id: str,
        user_id: str,
        message: str,
        ai_response: AIResponse,
        context_info: str,
    ) -> List[str]:
        """Write the user row then the assistant row. Returns error strings."""
        timestamp = datetime.now(timezone.utc)
        rows = [
            ("user message", ChatMessage.from_turn(
                UserTurn(text=message), session_id, user_id, timestamp
            )),
            ("AI message", ChatMessage.from_turn(
                AssistantTurn.from_response(ai_response),
                session_id,
                user_id,
                timestamp,
                context_data=context_info,
            )),
        ]

        errors = []
        saved = 0
        for label, row in rows:
            try:
                await self.db.insert_message(row)
                saved += 1
            except Exception as e:
                logger.warning(f"Failed to save {label}, continuing: {e}")
                errors.append(f"Failed to save {label}: {e}")

        if saved:
            try:
                await self.db.touch_session(session_id, saved, timestamp)
            except Exception as e:
                logger.warning(f"Failed to update session {session_id} counters: {e}")
        return errors

    async def _derive_context(
        self, session_id: str, user_id: str, user_message: str, ai_response: str
    ) -> None:
        for extractor in self.extractors:
            try:
                fact = extractor(user_message, ai_response)
            except Exception as e:
                logger.warning(f"Context extractor {getattr(extractor, '__name__', extractor)} failed: {e}")
                continue
            if fact is None:
                continue
            await self.save_chat_context(
                session_id, user_id, fact.key, fact.value, fact.type, fact.importance
            )


# Singleton instance
_legal_ai_service: Optional[LegalAIService] = None


def get_legal_ai_service() -> LegalAIService:
    """Get or create legal AI service singleton"""
    global _legal_ai_service
    if _legal_ai_service is None:
        _legal_ai_service = LegalAIService()
    return _legal_ai_service
