"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trade_legal_chat.api.routes.ai_config import router as ai_config_router
from trade_legal_chat.api.routes.chat import router as chat_router
from trade_legal_chat.services.legal_ai import get_legal_ai_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    # Startup: make sure the store schema exists (SQLite) or is reachable (Supabase)
    service = app.dependency_overrides.get(get_legal_ai_service, get_legal_ai_service)()
    try:
        await service.db.init_db()
    except Exception as e:
        logger.warning(f"Store initialization failed: {e}")
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Trade Legal Chat API",
        description="Legal assistance chat for international trade and customs compliance",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat_router)
    app.include_router(ai_config_router)

    return app
