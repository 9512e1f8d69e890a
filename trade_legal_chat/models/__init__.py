"""Data models"""

from trade_legal_chat.models.chat import (
    MessageType,
    ChatSession,
    ChatMessage,
    ContextFact,
    AIResponse,
    UserTurn,
    AssistantTurn,
    Turn,
    StoreResult,
    SendMessageResult,
)
from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate

__all__ = [
    "MessageType",
    "ChatSession",
    "ChatMessage",
    "ContextFact",
    "AIResponse",
    "UserTurn",
    "AssistantTurn",
    "Turn",
    "StoreResult",
    "SendMessageResult",
    "AIConfiguration",
    "AIConfigurationUpdate",
]
