"""Administrator-managed AI configuration"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AIConfiguration(BaseModel):
    """Overrides merged into every completion request while active"""
    id: Optional[str] = None
    name: str
    description: str = ""
    is_active: bool = False
    system_role: str = ""
    custom_instructions: str = ""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AIConfigurationUpdate(BaseModel):
    """Partial update; only fields that were set are written"""
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    system_role: Optional[str] = None
    custom_instructions: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
