from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import CamelModel


class MenuItemRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    organization_id: UUID
    created_at: Optional[datetime] = None


class MenuItemCreate(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class MenuItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
