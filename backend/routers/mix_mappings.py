from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import Identity, current_identity
from db.database import get_async_session
from schemas.mix_mappings import (
    CopyRecipesRequest,
    CopyRecipesResponse,
    MixMappingCreate,
    MixMappingRead,
    MixMappingUpdate,
    RecipeCost,
    RecipeCostLine,
)
from services import recipes

router = APIRouter()


@router.get("", response_model=List[MixMappingRead])
async def list_mix_mappings(
    menu_item_id: UUID | None = Query(None, alias="menuItemId", description="Filter by menu item ID"),
    location_id: UUID | None = Query(None, alias="locationId", description="Filter by location ID"),
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    """Recipe lines of the caller's organization, each with its ingredient embedded"""
    mappings = await recipes.list_mappings(db, identity, menu_item_id, location_id)
    return [MixMappingRead(**m.to_schema) for m in mappings]


@router.get("/cost", response_model=RecipeCost)
async def get_recipe_cost(
    menu_item_id: UUID | None = Query(None, alias="menuItemId"),
    location_id: UUID | None = Query(None, alias="locationId"),
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    """Total cost of a recipe: sum of ingredient price times quantity"""
    lines, total = await recipes.recipe_cost(db, identity, menu_item_id, location_id)
    return RecipeCost(
        menu_item_id=menu_item_id,
        location_id=location_id,
        total_cost=float(total),
        lines=[
            RecipeCostLine(
                mapping_id=line.mapping_id,
                ingredient_id=line.ingredient_id,
                ingredient_name=line.ingredient_name,
                unit=line.unit,
                unit_price=float(line.unit_price),
                quantity=float(line.quantity),
                cost=float(line.cost),
            )
            for line in lines
        ],
    )


@router.post("", response_model=MixMappingRead, status_code=status.HTTP_201_CREATED)
async def create_mix_mapping(
    payload: MixMappingCreate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    mapping = await recipes.create_mapping(
        db,
        identity,
        menu_item_id=payload.menu_item_id,
        location_id=payload.location_id,
        ingredient_id=payload.ingredient_id,
        quantity=payload.quantity,
    )
    return MixMappingRead(**mapping.to_schema)


@router.post("/copy", response_model=CopyRecipesResponse)
async def copy_recipes(
    payload: CopyRecipesRequest,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    """Replace all recipes at the destination location with the source location's recipes"""
    copied = await recipes.copy_all(db, identity, payload.from_location_id, payload.to_location_id)
    return CopyRecipesResponse(message="Menu copied successfully", copied_count=copied)


@router.patch("/{mapping_id}", response_model=MixMappingRead)
async def update_mix_mapping(
    mapping_id: UUID,
    payload: MixMappingUpdate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    mapping = await recipes.update_mapping(db, identity, mapping_id, payload.quantity)
    return MixMappingRead(**mapping.to_schema)


@router.delete("/{mapping_id}")
async def delete_mix_mapping(
    mapping_id: UUID,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    await recipes.delete_mapping(db, identity, mapping_id)
    return {"message": "Mix mapping deleted successfully"}
