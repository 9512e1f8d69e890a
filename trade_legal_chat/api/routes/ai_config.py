"""Admin AI configuration API routes"""

from fastapi import APIRouter, Depends, HTTPException, Response

from trade_legal_chat.api.schemas import (
    AIConfigCreateRequest,
    AIConfigItem,
    AIConfigListResponse,
    AIConfigUpdateRequest,
)
from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
from trade_legal_chat.services.ai_config import CONFIG_NOT_FOUND, AIConfigService
from trade_legal_chat.services.legal_ai import LegalAIService, get_legal_ai_service

router = APIRouter(prefix="/api/ai-configs")


def get_ai_config_service(
    legal_ai: LegalAIService = Depends(get_legal_ai_service),
) -> AIConfigService:
    return legal_ai.ai_config


def _raise_for(error: str):
    status = 404 if error.startswith(CONFIG_NOT_FOUND) else 500
    raise HTTPException(status_code=status, detail=error)


@router.get("", response_model=AIConfigListResponse)
async def list_configs(service: AIConfigService = Depends(get_ai_config_service)):
    result = await service.list_configs()
    if not result.ok:
        _raise_for(result.error)
    return AIConfigListResponse(configs=[AIConfigItem(**c.model_dump()) for c in result.data])


@router.post("", response_model=AIConfigItem, status_code=201)
async def create_config(
    request: AIConfigCreateRequest,
    service: AIConfigService = Depends(get_ai_config_service),
):
    """Create a configuration; ``is_active`` deactivates the current one"""
    result = await service.create_config(AIConfiguration(**request.model_dump()))
    if not result.ok or result.data is None:
        _raise_for(result.error or "Failed to create AI configuration")
    return AIConfigItem(**result.data.model_dump())


@router.patch("/{config_id}", response_model=AIConfigItem)
async def update_config(
    config_id: str,
    request: AIConfigUpdateRequest,
    service: AIConfigService = Depends(get_ai_config_service),
):
    update = AIConfigurationUpdate(**request.model_dump(exclude_unset=True))
    result = await service.update_config(config_id, update)
    if not result.ok:
        _raise_for(result.error)
    return AIConfigItem(**result.data.model_dump())


@router.delete("/{config_id}", status_code=204)
async def delete_config(
    config_id: str,
    service: AIConfigService = Depends(get_ai_config_service),
):
    result = await service.delete_config(config_id)
    if not result.ok:
        _raise_for(result.error)
    return Response(status_code=204)


@router.post("/{config_id}/activate", response_model=AIConfigItem)
async def activate_config(
    config_id: str,
    service: AIConfigService = Depends(get_ai_config_service),
):
    """Make this the configuration merged into completion requests"""
    result = await service.set_active_config(config_id)
    if not result.ok:
        _raise_for(result.error)
    active = await service.get_active_config()
    if not active.ok or active.data is None:
        _raise_for(active.error or f"{CONFIG_NOT_FOUND}: {config_id}")
    return AIConfigItem(**active.data.model_dump())
