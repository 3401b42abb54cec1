from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import Identity, current_admin, current_identity
from db.database import get_async_session
from schemas.ingredient import IngredientCreate, IngredientRead, IngredientUpdate
from services.catalog import ingredients

router = APIRouter()


@router.get("", response_model=List[IngredientRead])
async def list_ingredients(identity: Identity = Depends(current_identity), db: AsyncSession = Depends(get_async_session)):
    """Ingredients of the caller's organization with their unit prices"""
    rows = await ingredients.list(db, identity)
    return [IngredientRead(**row.to_schema) for row in rows]


@router.get("/{ingredient_id}", response_model=IngredientRead)
async def get_ingredient(
    ingredient_id: UUID,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await ingredients.get(db, identity, ingredient_id)
    return IngredientRead(**row.to_schema)


@router.post("", response_model=IngredientRead, status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    payload: IngredientCreate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await ingredients.create(db, identity, payload.model_dump())
    return IngredientRead(**row.to_schema)


@router.patch("/{ingredient_id}", response_model=IngredientRead)
async def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await ingredients.update(db, identity, ingredient_id, payload.model_dump(exclude_unset=True))
    return IngredientRead(**row.to_schema)


@router.delete("/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: UUID,
    admin: Identity = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete an ingredient and the recipe lines using it (admin only)"""
    await ingredients.delete(db, admin, ingredient_id)
    return {"message": "Ingredient deleted successfully"}
