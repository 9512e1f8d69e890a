"""Administrator AI configuration service"""

import logging
from typing import List, Optional

from trade_legal_chat.db.base import ChatStoreInterface
from trade_legal_chat.models.ai_config import AIConfiguration, AIConfigurationUpdate
from trade_legal_chat.models.chat import StoreResult

logger = logging.getLogger(__name__)

CONFIG_NOT_FOUND = "AI configuration not found"


class AIConfigService:
    """Reads and manages the admin-level overrides for completion requests."""

    def __init__(self, db: ChatStoreInterface):
        self.db = db

    async def get_active_config(self) -> StoreResult[Optional[AIConfiguration]]:
        """Active configuration; ``data`` is None when none is active."""
        try:
            return StoreResult(data=await self.db.get_active_ai_config())
        except Exception as e:
            logger.warning(f"Failed to fetch AI configuration: {e}")
            return StoreResult(data=None, error=f"Failed to fetch AI configuration: {e}")

    async def list_configs(self) -> StoreResult[List[AIConfiguration]]:
        try:
            return StoreResult(data=await self.db.list_ai_configs())
        except Exception as e:
            logger.warning(f"Failed to fetch AI configurations: {e}")
            return StoreResult(data=[], error=f"Failed to fetch AI configurations: {e}")

    async def create_config(self, config: AIConfiguration) -> StoreResult[Optional[AIConfiguration]]:
        try:
            created = await self.db.create_ai_config(config)
            logger.info(f"Created AI configuration: {created.id} ({created.name})")
            return StoreResult(data=created)
        except Exception as e:
            logger.warning(f"Failed to create AI configuration: {e}")
            return StoreResult(data=None, error=f"Failed to create AI configuration: {e}")

    async def set_active_config(self, config_id: str) -> StoreResult[bool]:
        try:
            if not await self.db.set_active_ai_config(config_id):
                return StoreResult(data=False, error=f"{CONFIG_NOT_FOUND}: {config_id}")
            logger.info(f"Activated AI configuration: {config_id}")
            return StoreResult(data=True)
        except Exception as e:
            logger.warning(f"Failed to set active configuration: {e}")
            return StoreResult(data=False, error=f"Failed to set active configuration: {e}")

    async def update_config(
        self, config_id: str, update: AIConfigurationUpdate
    ) -> StoreResult[Optional[AIConfiguration]]:
        """Apply a partial update; activating it deactivates the others."""
        try:
            updated = await self.db.update_ai_config(config_id, update)
        except Exception as e:
            logger.warning(f"Failed to update AI configuration: {e}")
            return StoreResult(data=None, error=f"Failed to update AI configuration: {e}")
        if updated is None:
            return StoreResult(data=None, error=f"{CONFIG_NOT_FOUND}: {config_id}")
        logger.info(f"Updated AI configuration: {config_id}")
        return StoreResult(data=updated)

    async def delete_config(self, config_id: str) -> StoreResult[bool]:
        try:
            if not await self.db.delete_ai_config(config_id):
                return StoreResult(data=False, error=f"{CONFIG_NOT_FOUND}: {config_id}")
        except Exception as e:
            logger.warning(f"Failed to delete AI configuration: {e}")
            return StoreResult(data=False, error=f"Failed to delete AI configuration: {e}")
        logger.info(f"Deleted AI configuration: {config_id}")
        return StoreResult(data=True)
