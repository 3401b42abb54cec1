"""Organization scoping shared by every tenant-owned resource."""
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Identity
from core.errors import NotFoundError

ModelT = TypeVar("ModelT")


async def get_owned(
    db: AsyncSession,
    identity: Identity,
    model: type[ModelT],
    row_id: UUID,
    label: str,
    options: list[Any] | None = None,
) -> ModelT:
    """Load `model` by id for the caller.

    404 when no such row exists at all, 403 when it belongs to another organization.
    """
    row = await db.get(model, row_id, options=options)
    if row is None:
        raise NotFoundError(f"{label} not found")
    identity.ensure_owns(row, label)
    return row
