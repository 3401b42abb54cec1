"""
Recipes ("mix mappings"): which ingredients, and how much of each, make up a menu item
at a location.

A mapping has no organization column of its own; ownership is decided through its
location, and every referenced row must belong to the caller's organization.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.auth import Identity
from core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from db.database import Ingredient, Location, MenuItem, MixMapping
from services.scope import get_owned
from services.transaction import unit_of_work

logger = logging.getLogger(__name__)

DUPLICATE_LINE = "Ingredient already in this recipe"
CENTS = Decimal("0.01")


def _scoped_query(identity: Identity, menu_item_id: UUID | None, location_id: UUID | None):
    query = (
        select(MixMapping)
        .join(Location, MixMapping.location_id == Location.id)
        .where(Location.organization_id == identity.organization_id)
        .options(selectinload(MixMapping.ingredient))
    )
    if menu_item_id is not None:
        query = query.where(MixMapping.menu_item_id == menu_item_id)
    if location_id is not None:
        query = query.where(MixMapping.location_id == location_id)
    return query


async def list_mappings(
    db: AsyncSession, identity: Identity, menu_item_id: UUID | None = None, location_id: UUID | None = None
) -> Sequence[MixMapping]:
    """Mappings of the caller's organization matching the given filters; foreign ids match nothing"""
    result = await db.execute(_scoped_query(identity, menu_item_id, location_id))
    return result.scalars().all()


async def _load(db: AsyncSession, mapping_id: UUID) -> MixMapping:
    result = await db.execute(
        select(MixMapping)
        .options(selectinload(MixMapping.ingredient), selectinload(MixMapping.location))
        .where(MixMapping.id == mapping_id)
        .execution_options(populate_existing=True)
    )
    mapping = result.scalar_one_or_none()
    if mapping is None:
        raise NotFoundError("Mix mapping not found")
    return mapping


async def _get_owned_mapping(db: AsyncSession, identity: Identity, mapping_id: UUID) -> MixMapping:
    mapping = await _load(db, mapping_id)
    if mapping.location is None:
        raise NotFoundError("Location not found")
    identity.ensure_owns(mapping.location, "Location")
    return mapping


async def create_mapping(
    db: AsyncSession,
    identity: Identity,
    menu_item_id: UUID,
    location_id: UUID,
    ingredient_id: UUID,
    quantity: Decimal,
) -> MixMapping:
    # Checked in this order; the first failure wins and nothing is written
    await get_owned(db, identity, Location, location_id, "Location")
    await get_owned(db, identity, MenuItem, menu_item_id, "Menu item")
    await get_owned(db, identity, Ingredient, ingredient_id, "Ingredient")

    existing = await db.execute(
        select(MixMapping.id).where(
            MixMapping.menu_item_id == menu_item_id,
            MixMapping.location_id == location_id,
            MixMapping.ingredient_id == ingredient_id,
        )
    )
    if existing.first() is not None:
        raise ConflictError(DUPLICATE_LINE)

    mapping = MixMapping(
        menu_item_id=menu_item_id,
        location_id=location_id,
        ingredient_id=ingredient_id,
        quantity=quantity,
    )
    async with unit_of_work(db, "create mix mapping", conflict_message=DUPLICATE_LINE):
        db.add(mapping)
    return await _load(db, mapping.id)


async def update_mapping(db: AsyncSession, identity: Identity, mapping_id: UUID, quantity: Decimal) -> MixMapping:
    mapping = await _get_owned_mapping(db, identity, mapping_id)
    async with unit_of_work(db, "update mix mapping"):
        mapping.quantity = quantity
    await db.refresh(mapping, attribute_names=["quantity"])
    return mapping


async def delete_mapping(db: AsyncSession, identity: Identity, mapping_id: UUID) -> None:
    mapping = await _get_owned_mapping(db, identity, mapping_id)
    async with unit_of_work(db, "delete mix mapping"):
        await db.delete(mapping)


def _copies_for(source: Iterable[MixMapping], to_location_id: UUID) -> List[MixMapping]:
    return [
        MixMapping(
            menu_item_id=m.menu_item_id,
            location_id=to_location_id,
            ingredient_id=m.ingredient_id,
            quantity=m.quantity,
        )
        for m in source
    ]


async def _copy_endpoint(db: AsyncSession, identity: Identity, location_id: UUID, side: str) -> Location:
    # Absent and foreign locations both report 403
    try:
        return await get_owned(db, identity, Location, location_id, "Location")
    except (NotFoundError, ForbiddenError) as e:
        raise ForbiddenError(f"{side} location not found or access denied") from e


async def copy_all(db: AsyncSession, identity: Identity, from_location_id: UUID, to_location_id: UUID) -> int:
    """Replace every recipe at the destination with copies of the source's recipes.

    Delete and insert share one transaction: on any failure the destination keeps
    its previous recipes.
    """
    if from_location_id == to_location_id:
        raise ValidationError("Source and destination locations must differ")

    await _copy_endpoint(db, identity, from_location_id, "Source")
    await _copy_endpoint(db, identity, to_location_id, "Destination")

    result = await db.execute(select(MixMapping).where(MixMapping.location_id == from_location_id))
    source = result.scalars().all()

    async with unit_of_work(db, "copy recipes"):
        await db.execute(
            delete(MixMapping)
            .where(MixMapping.location_id == to_location_id)
            .execution_options(synchronize_session=False)
        )
        db.add_all(_copies_for(source, to_location_id))
        await db.flush()

    logger.info(
        "Copied %d recipe lines from location %s to %s", len(source), from_location_id, to_location_id
    )
    return len(source)


@dataclass(frozen=True)
class CostLine:
    mapping_id: UUID
    ingredient_id: UUID
    ingredient_name: str
    unit: str
    unit_price: Decimal
    quantity: Decimal

    @property
    def cost(self) -> Decimal:
        return line_cost(self.unit_price, self.quantity)


def line_cost(price, quantity) -> Decimal:
    """Contribution of one recipe line: price per unit times quantity"""
    return Decimal(str(price)) * Decimal(str(quantity))


def total_cost(lines: Iterable[CostLine]) -> Decimal:
    return sum((line.cost for line in lines), Decimal("0")).quantize(CENTS)


async def recipe_cost(
    db: AsyncSession, identity: Identity, menu_item_id: Optional[UUID], location_id: Optional[UUID]
) -> tuple[List[CostLine], Decimal]:
    mappings = await list_mappings(db, identity, menu_item_id, location_id)
    lines = [
        CostLine(
            mapping_id=m.id,
            ingredient_id=m.ingredient_id,
            ingredient_name=m.ingredient.name,
            unit=m.ingredient.unit,
            unit_price=Decimal(str(m.ingredient.price)),
            quantity=Decimal(str(m.quantity)),
        )
        for m in mappings
    ]
    return lines, total_cost(lines)
