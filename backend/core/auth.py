"""
Credentials, bearer tokens and per-request identity.

Passwords are hashed with fastapi-users' PasswordHelper and tokens are signed with
its JWT helpers. Endpoints depend on `current_identity` (authentication) and, for
role-gated operations, on `require_roles(...)` (authorization).
"""
import logging
from dataclasses import dataclass
from typing import Iterable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi_users.jwt import decode_jwt, generate_jwt
from fastapi_users.password import PasswordHelper
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import AuthError, ForbiddenError
from db.database import get_async_session
from db.users import Role, User

logger = logging.getLogger(__name__)

TOKEN_AUDIENCE = ["restaurant-inventory:auth"]

password_helper = PasswordHelper()
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return password_helper.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    verified, _ = password_helper.verify_and_update(password, hashed_password)
    return verified


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    email: str


def issue_token(user: User, lifetime_seconds: int | None = None) -> str:
    """Sign a bearer token carrying {userId, email}"""
    data = {
        "userId": str(user.id),
        "email": user.email,
        "aud": TOKEN_AUDIENCE,
    }
    if lifetime_seconds is None:
        lifetime_seconds = settings.jwt_lifetime_seconds
    return generate_jwt(data, settings.jwt_secret, lifetime_seconds)


def verify_token(token: str | None) -> TokenClaims:
    if not token:
        raise AuthError("No token provided")
    try:
        payload = decode_jwt(token, settings.jwt_secret, TOKEN_AUDIENCE)
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise AuthError("Token has expired")
    except jwt.PyJWTError as e:
        logger.warning("Rejected invalid token: %s", e)
        raise AuthError("Invalid token")

    try:
        return TokenClaims(user_id=UUID(payload["userId"]), email=payload["email"])
    except (KeyError, TypeError, ValueError):
        logger.warning("Rejected token with malformed claims")
        raise AuthError("Invalid token")


@dataclass(frozen=True)
class Identity:
    """The caller, resolved once per request; every tenant check goes through it"""
    user_id: UUID
    email: str
    organization_id: UUID
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(
            user_id=user.id,
            email=user.email,
            organization_id=user.organization_id,
            role=Role(user.role),
        )

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def owns(self, row) -> bool:
        return row.organization_id == self.organization_id

    def ensure_owns(self, row, label: str) -> None:
        if not self.owns(row):
            logger.warning(
                "User %s denied access to %s %s of another organization", self.user_id, label, row.id
            )
            raise ForbiddenError("Access denied")


def authorize(identity: Identity, allowed_roles: Iterable[Role]) -> None:
    allowed = set(allowed_roles)
    if identity.role not in allowed:
        logger.warning("User %s with role %s lacks one of %s", identity.user_id, identity.role.value,
                       sorted(r.value for r in allowed))
        raise ForbiddenError("Insufficient permissions")


async def current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
) -> Identity:
    if credentials is None:
        raise AuthError("No token provided")
    claims = verify_token(credentials.credentials)

    user = await db.get(User, claims.user_id)
    if user is None or not user.is_active:
        raise AuthError("User not found")
    return Identity.from_user(user)


def require_roles(*roles: Role):
    """Dependency factory: authenticate, then require one of `roles`"""

    async def dependency(identity: Identity = Depends(current_identity)) -> Identity:
        authorize(identity, roles)
        return identity

    return dependency


current_admin = require_roles(Role.ADMIN)
