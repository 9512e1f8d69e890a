"""Request/response schemas for the Legal Chat API"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Chat request from client"""
    user_id: str = Field(..., min_length=1, description="Caller identity")
    message: str = Field(..., min_length=1, max_length=4000, description="Natural language legal question")
    session_id: Optional[str] = Field(None, description="Session ID. None = create new session")


class AIResponseItem(BaseModel):
    """The assistant's answer"""
    response: str
    suggestions: list[str] = []
    related_topics: list[str] = []
    confidence: float = 0.0


class ChatAPIResponse(BaseModel):
    """Result of one chat turn"""
    response: AIResponseItem
    new_session_id: Optional[str] = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)


class SessionCreateRequest(BaseModel):
    """Request to open a session explicitly"""
    user_id: str = Field(..., min_length=1)
    title: Optional[str] = Field(None, min_length=1, max_length=200)


class SessionItem(BaseModel):
    """A session in the session list"""
    id: str
    title: str
    summary: Optional[str] = None
    message_count: int = 0
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SessionListResponse(BaseModel):
    """Response for listing sessions"""
    sessions: list[SessionItem] = []


class MessageItem(BaseModel):
    """A single stored message row"""
    id: Optional[str] = None
    message_type: str
    message: str = ""
    response: str = ""
    ai_confidence: float = 0.0
    suggestions: list[str] = []
    related_topics: list[str] = []
    timestamp: datetime


class SessionMessagesResponse(BaseModel):
    """Response for getting session messages"""
    session_id: str
    messages: list[MessageItem] = []


class ContextItem(BaseModel):
    """A saved context fact"""
    context_key: str
    context_value: str
    context_type: str
    importance: int


class SessionContextResponse(BaseModel):
    """Response for getting session context"""
    session_id: str
    context: list[ContextItem] = []


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    db_mode: str
    store: dict[str, Any] = {}


class AIConfigCreateRequest(BaseModel):
    """New admin AI configuration"""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    is_active: bool = False
    system_role: str = ""
    custom_instructions: str = ""
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)


class AIConfigUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    system_role: Optional[str] = None
    custom_instructions: Optional[str] = None
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(None, gt=0)


class AIConfigItem(BaseModel):
    """Stored admin AI configuration"""
    id: str
    name: str
    description: str = ""
    is_active: bool = False
    system_role: str = ""
    custom_instructions: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AIConfigListResponse(BaseModel):
    """All admin AI configurations, newest first"""
    configs: list[AIConfigItem] = []
