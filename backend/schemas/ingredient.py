from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from .base import CamelModel


class IngredientRead(CamelModel):
    id: UUID
    name: str
    price: float
    unit: str
    organization_id: UUID
    created_at: Optional[datetime] = None


class IngredientCreate(CamelModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    unit: str = Field(min_length=1)


class IngredientUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    unit: Optional[str] = Field(None, min_length=1)
