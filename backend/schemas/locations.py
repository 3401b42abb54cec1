from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import CamelModel


class LocationRead(CamelModel):
    id: UUID
    name: str
    organization_id: UUID
    created_at: Optional[datetime] = None


class LocationCreate(CamelModel):
    name: str = Field(min_length=1)


class LocationUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
