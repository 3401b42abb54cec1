"""Registration, login and user administration."""
import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Identity, hash_password, issue_token, verify_password
from core.errors import AuthError, ConflictError
from db.database import Organization, Role, User
from services.transaction import unit_of_work

logger = logging.getLogger(__name__)

EMAIL_IN_USE = "Email already in use"


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _ensure_email_free(db: AsyncSession, email: str) -> None:
    if await get_user_by_email(db, email) is not None:
        raise ConflictError(EMAIL_IN_USE)


async def register(
    db: AsyncSession, email: str, password: str, name: str, organization_name: str
) -> tuple[str, User]:
    """Create an organization and its first (ADMIN) user, then sign them in"""
    await _ensure_email_free(db, email)

    async with unit_of_work(db, "register", conflict_message=EMAIL_IN_USE):
        organization = Organization(name=organization_name)
        db.add(organization)
        await db.flush()

        user = User(
            email=email,
            hashed_password=hash_password(password),
            name=name,
            organization_id=organization.id,
            role=Role.ADMIN,
            is_active=True,
        )
        db.add(user)

    logger.info("Registered organization %s with admin user %s", organization.id, user.id)
    return issue_token(user), user


async def login(db: AsyncSession, email: str, password: str) -> tuple[str, User]:
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Failed login attempt")
        raise AuthError("Invalid credentials")
    if not user.is_active:
        raise AuthError("Invalid credentials")
    return issue_token(user), user


async def create_user(
    db: AsyncSession, admin: Identity, email: str, password: str, name: str, role: Role = Role.MANAGER
) -> User:
    """Add a user to the admin's organization"""
    await _ensure_email_free(db, email)

    user = User(
        email=email,
        hashed_password=hash_password(password),
        name=name,
        organization_id=admin.organization_id,
        role=role,
        is_active=True,
    )
    async with unit_of_work(db, "create user", conflict_message=EMAIL_IN_USE):
        db.add(user)

    logger.info("Admin %s created %s user %s", admin.user_id, role.value, user.id)
    return user


async def list_users(db: AsyncSession, admin: Identity) -> Sequence[User]:
    result = await db.execute(
        select(User)
        .where(User.organization_id == admin.organization_id)
        .order_by(User.created_at.asc())
    )
    return result.scalars().all()


async def get_profile(db: AsyncSession, identity: Identity) -> User:
    user = await db.get(User, identity.user_id)
    if user is None:
        raise AuthError("User not found")
    return user
