from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from .base import CamelModel
from .ingredient import IngredientRead


class MixMappingRead(CamelModel):
    id: UUID
    menu_item_id: UUID
    location_id: UUID
    ingredient_id: UUID
    quantity: float
    ingredient: Optional[IngredientRead] = None


class MixMappingCreate(CamelModel):
    menu_item_id: UUID
    location_id: UUID
    ingredient_id: UUID
    quantity: Decimal = Field(gt=0, max_digits=10, decimal_places=3)


class MixMappingUpdate(CamelModel):
    quantity: Decimal = Field(gt=0, max_digits=10, decimal_places=3)


class CopyRecipesRequest(CamelModel):
    from_location_id: UUID
    to_location_id: UUID


class CopyRecipesResponse(CamelModel):
    message: str
    copied_count: int


class RecipeCostLine(CamelModel):
    mapping_id: UUID
    ingredient_id: UUID
    ingredient_name: str
    unit: str
    unit_price: float
    quantity: float
    cost: float


class RecipeCost(CamelModel):
    menu_item_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    total_cost: float
    lines: List[RecipeCostLine]
