"""Legal chat API routes"""

from fastapi import APIRouter, Depends, HTTPException, Query

from trade_legal_chat.api.schemas import (
    AIResponseItem,
    ChatAPIResponse,
    ChatRequest,
    ContextItem,
    HealthResponse,
    MessageItem,
    SessionContextResponse,
    SessionCreateRequest,
    SessionItem,
    SessionListResponse,
    SessionMessagesResponse,
)
from trade_legal_chat.services.legal_ai import (
    LegalAIService,
    default_session_title,
    get_legal_ai_service,
)

router = APIRouter()


@router.post("/api/legal-chat", response_model=ChatAPIResponse)
async def legal_chat(
    request: ChatRequest, service: LegalAIService = Depends(get_legal_ai_service)
):
    """Answer a legal question, opening a session when none is given.

    Always 200: failures are reported in ``error`` next to a displayable answer.
    """
    result = await service.send_message_with_memory(
        request.user_id, request.message, request.session_id
    )
    return ChatAPIResponse(
        response=AIResponseItem(**result.response.model_dump()),
        new_session_id=result.new_session_id,
        error=result.error,
    )


# =========================================================
# Session management endpoints
# =========================================================

async def _require_owned_session(service: LegalAIService, user_id: str, session_id: str):
    """404 unless the session exists and belongs to the caller"""
    result = await service.get_owned_session(user_id, session_id)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    if result.data is None:
        raise HTTPException(status_code=404, detail=f"Chat session not found: {session_id}")


@router.get("/api/sessions", response_model=SessionListResponse)
async def list_sessions(
    user_id: str = Query(..., min_length=1),
    service: LegalAIService = Depends(get_legal_ai_service),
):
    """List a user's chat sessions, most recently updated first"""
    result = await service.get_chat_sessions(user_id)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    return SessionListResponse(
        sessions=[SessionItem(**s.model_dump()) for s in result.data]
    )


@router.post("/api/sessions", response_model=SessionItem, status_code=201)
async def create_session(
    request: SessionCreateRequest,
    service: LegalAIService = Depends(get_legal_ai_service),
):
    """Open a chat session explicitly"""
    result = await service.create_chat_session(
        request.user_id, request.title or default_session_title()
    )
    if not result.ok or result.data is None:
        raise HTTPException(status_code=500, detail=result.error)
    return SessionItem(**result.data.model_dump())


@router.get("/api/sessions/{session_id}/messages", response_model=SessionMessagesResponse)
async def get_session_messages(
    session_id: str,
    user_id: str = Query(..., min_length=1),
    service: LegalAIService = Depends(get_legal_ai_service),
):
    """Get all message rows of a session, oldest first"""
    await _require_owned_session(service, user_id, session_id)
    result = await service.get_chat_history(user_id, session_id)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    return SessionMessagesResponse(
        session_id=session_id,
        messages=[
            MessageItem(
                id=m.id,
                message_type=m.message_type.value,
                message=m.message,
                response=m.response,
                ai_confidence=m.ai_confidence,
                suggestions=m.suggestions,
                related_topics=m.related_topics,
                timestamp=m.timestamp,
            )
            for m in result.data
        ],
    )


@router.get("/api/sessions/{session_id}/context", response_model=SessionContextResponse)
async def get_session_context(
    session_id: str,
    user_id: str = Query(..., min_length=1),
    service: LegalAIService = Depends(get_legal_ai_service),
):
    """Get the saved context facts of a session, most important first"""
    await _require_owned_session(service, user_id, session_id)
    result = await service.get_chat_context(session_id)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error)
    return SessionContextResponse(
        session_id=session_id,
        context=[
            ContextItem(
                context_key=f.context_key,
                context_value=f.context_value,
                context_type=f.context_type,
                importance=f.importance,
            )
            for f in result.data
        ],
    )


@router.get("/api/health", response_model=HealthResponse)
async def health(service: LegalAIService = Depends(get_legal_ai_service)):
    """Health check endpoint"""
    store_status = await service.db.get_status()
    status = "ok" if store_status.get("status") == "connected" else "degraded"
    return HealthResponse(
        status=status,
        db_mode=service.settings.db_mode,
        store=store_status,
    )
