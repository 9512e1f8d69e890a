"""Legal chat models: sessions, message rows, context facts and AI responses"""

from datetime import datetime
from enum import Enum
from typing import Any, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class MessageType(str, Enum):
    """Author of a stored message row"""
    USER = "user"
    ASSISTANT = "assistant"


class ChatSession(BaseModel):
    """A named conversation owned by one user"""
    id: str
    user_id: str
    title: str
    summary: Optional[str] = None
    message_count: int = 0
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AIResponse(BaseModel):
    """Reply produced for one user message (not persisted as its own row)"""
    response: str
    suggestions: list[str] = []
    related_topics: list[str] = []
    confidence: float = 0.0


class UserTurn(BaseModel):
    """What the user said"""
    kind: Literal["user"] = "user"
    text: str


class AssistantTurn(BaseModel):
    """What the assistant answered"""
    kind: Literal["assistant"] = "assistant"
    text: str
    confidence: float = 0.0
    suggestions: list[str] = []
    related_topics: list[str] = []

    @classmethod
    def from_response(cls, response: AIResponse) -> "AssistantTurn":
        return cls(
            text=response.response,
            confidence=response.confidence,
            suggestions=response.suggestions,
            related_topics=response.related_topics,
        )


Turn = Union[UserTurn, AssistantTurn]


class ChatMessage(BaseModel):
    """
    One stored message row.

    A turn is stored as two rows: the user row carries ``message`` and an
    empty ``response``, the assistant row carries ``response`` and an empty
    ``message``. Use ``from_turn`` / ``to_turn`` to move between the
    storage shape and the turn variants.
    """
    id: Optional[str] = None
    session_id: str
    user_id: str
    message: str = ""
    response: str = ""
    message_type: MessageType
    ai_confidence: float = 0.0
    suggestions: list[str] = []
    related_topics: list[str] = []
    context_data: Any = Field(default_factory=dict)
    timestamp: datetime

    @classmethod
    def from_turn(
        cls,
        turn: Turn,
        session_id: str,
        user_id: str,
        timestamp: datetime,
        context_data: Any = None,
    ) -> "ChatMessage":
        if isinstance(turn, UserTurn):
            return cls(
                session_id=session_id,
                user_id=user_id,
                message=turn.text,
                response="",
                message_type=MessageType.USER,
                ai_confidence=0.0,
                suggestions=[],
                related_topics=[],
                context_data={},
                timestamp=timestamp,
            )
        return cls(
            session_id=session_id,
            user_id=user_id,
            message="",
            response=turn.text,
            message_type=MessageType.ASSISTANT,
            ai_confidence=turn.confidence,
            suggestions=turn.suggestions,
            related_topics=turn.related_topics,
            context_data=context_data if context_data is not None else {},
            timestamp=timestamp,
        )

    def to_turn(self) -> Turn:
        if self.message_type == MessageType.USER:
            return UserTurn(text=self.message)
        return AssistantTurn(
            text=self.response,
            confidence=self.ai_confidence,
            suggestions=self.suggestions,
            related_topics=self.related_topics,
        )

    def to_row(self) -> dict:
        """Column dict for an insert (id and server defaults left to the store)"""
        row = self.model_dump(mode="json", exclude={"id"})
        row["message_type"] = self.message_type.value
        return row


class ContextFact(BaseModel):
    """Derived key/value note about a session, overwritten per key"""
    session_id: str
    user_id: str
    context_key: str
    context_value: str
    context_type: str = "general"
    importance: int = 1


class StoreResult(BaseModel, Generic[T]):
    """Payload of a store operation plus an error string when it failed"""
    data: T
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SendMessageResult(BaseModel):
    """Outcome of one orchestrated chat turn"""
    response: AIResponse
    new_session_id: Optional[str] = None
    error: Optional[str] = None
