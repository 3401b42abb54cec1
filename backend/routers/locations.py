from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from core.auth import Identity, current_admin, current_identity
from db.database import get_async_session
from schemas.locations import LocationCreate, LocationRead, LocationUpdate
from services.catalog import locations

router = APIRouter()


@router.get("", response_model=List[LocationRead])
async def list_locations(identity: Identity = Depends(current_identity), db: AsyncSession = Depends(get_async_session)):
    rows = await locations.list(db, identity)
    return [LocationRead(**row.to_schema) for row in rows]


@router.get("/{location_id}", response_model=LocationRead)
async def get_location(
    location_id: UUID,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await locations.get(db, identity, location_id)
    return LocationRead(**row.to_schema)


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await locations.create(db, identity, payload.model_dump())
    return LocationRead(**row.to_schema)


@router.patch("/{location_id}", response_model=LocationRead)
async def update_location(
    location_id: UUID,
    payload: LocationUpdate,
    identity: Identity = Depends(current_identity),
    db: AsyncSession = Depends(get_async_session),
):
    row = await locations.update(db, identity, location_id, payload.model_dump(exclude_unset=True))
    return LocationRead(**row.to_schema)


@router.delete("/{location_id}")
async def delete_location(
    location_id: UUID,
    admin: Identity = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a location and its recipes (admin only)"""
    await locations.delete(db, admin, location_id)
    return {"message": "Location deleted successfully"}
