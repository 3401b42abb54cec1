from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import Identity, current_admin, current_identity
from db.database import get_async_session
from schemas.menu_items import MenuItemCreate, MenuItemRead, MenuItemUpdate
from services.catalog import menu_items

router = APIRouter()


@router.get("", response_model=List[MenuItemRead])
async def list_menu_items(identity: Identity = Depends(current_identity), db: AsyncSession = Depends(get_async_session)):
    rows = await menu_items.list(db, identity)
    return [MenuItemRead(**row.to_schema) for row in rows]


@router.get("/{menu_item_id}", response_model=MenuItemRead)
async def get_menu_item(
    menu_item_id: UUID,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await menu_items.get(db, identity, menu_item_id)
    return MenuItemRead(**row.to_schema)


@router.post("", response_model=MenuItemRead, status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    payload: MenuItemCreate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await menu_items.create(db, identity, payload.model_dump())
    return MenuItemRead(**row.to_schema)


@router.patch("/{menu_item_id}", response_model=MenuItemRead)
async def update_menu_item(
    menu_item_id: UUID,
    payload: MenuItemUpdate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await menu_items.update(db, identity, menu_item_id, payload.model_dump(exclude_unset=True))
    return MenuItemRead(**row.to_schema)


@router.delete("/{menu_item_id}")
async def delete_menu_item(
    menu_item_id: UUID,
    admin: Identity = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a menu item and its recipes at every location (admin only)"""
    await menu_items.delete(db, admin, menu_item_id)
    return {"message": "Menu item deleted successfully"}
