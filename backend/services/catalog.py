"""
CRUD for the organization-owned catalog: locations, ingredients and menu items.

Every query is confined to the caller's organization and `organization_id` is always
stamped from the identity, never from client input.
"""
import logging
from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Identity
from db.database import Ingredient, Location, MenuItem, MixMapping
from services.scope import get_owned
from services.transaction import unit_of_work

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", Location, Ingredient, MenuItem)


class TenantResourceService(Generic[ModelT]):
    def __init__(self, model: type[ModelT], label: str, mapping_column, nullable_fields: tuple[str, ...] = ()):
        self.model = model
        self.label = label
        # MixMapping column referencing this model, cleared on delete
        self.mapping_column = mapping_column
        self.nullable_fields = nullable_fields

    async def list(self, db: AsyncSession, identity: Identity) -> Sequence[ModelT]:
        result = await db.execute(
            select(self.model)
            .where(self.model.organization_id == identity.organization_id)
            .order_by(func.lower(self.model.name).asc(), self.model.created_at.asc())
        )
        return result.scalars().all()

    async def get(self, db: AsyncSession, identity: Identity, row_id: UUID) -> ModelT:
        return await get_owned(db, identity, self.model, row_id, self.label)

    async def create(self, db: AsyncSession, identity: Identity, fields: dict[str, Any]) -> ModelT:
        fields = {k: v for k, v in fields.items() if k != "organization_id"}
        row = self.model(**fields, organization_id=identity.organization_id)
        async with unit_of_work(db, f"create {self.label.lower()}"):
            db.add(row)
        await db.refresh(row)
        return row

    async def update(self, db: AsyncSession, identity: Identity, row_id: UUID, fields: dict[str, Any]) -> ModelT:
        row = await get_owned(db, identity, self.model, row_id, self.label)
        for key, value in fields.items():
            if key == "organization_id":
                continue
            if value is None and key not in self.nullable_fields:
                continue
            setattr(row, key, value)
        async with unit_of_work(db, f"update {self.label.lower()}"):
            await db.flush()
        await db.refresh(row)
        return row

    async def delete(self, db: AsyncSession, identity: Identity, row_id: UUID) -> None:
        """Delete the row together with the recipe lines that reference it"""
        row = await get_owned(db, identity, self.model, row_id, self.label)
        async with unit_of_work(db, f"delete {self.label.lower()}"):
            result = await db.execute(delete(MixMapping).where(self.mapping_column == row.id))
            await db.delete(row)
        logger.info(
            "Deleted %s %s and %d recipe lines for organization %s",
            self.label.lower(), row_id, result.rowcount, identity.organization_id,
        )


locations = TenantResourceService(Location, "Location", MixMapping.location_id)
ingredients = TenantResourceService(Ingredient, "Ingredient", MixMapping.ingredient_id)
menu_items = TenantResourceService(MenuItem, "Menu item", MixMapping.menu_item_id, nullable_fields=("description",))
