import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession, action: str, conflict_message: str | None = None):
    """Commit everything done in the block, or roll all of it back.

    Store failures surface as InternalError("Failed to <action>"). With
    `conflict_message`, unique-constraint violations become a ConflictError instead.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if conflict_message is None:
            logger.exception("Failed to %s", action)
            raise InternalError(f"Failed to {action}") from e
        logger.info("Conflict while trying to %s", action)
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to %s", action)
        raise InternalError(f"Failed to {action}") from e
