from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from core.auth import Identity, current_admin, current_identity
from db.database import get_async_session
from schemas.users import (
    AuthResponse,
    CreateUserRequest,
    CreatedUserResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)
from services import accounts

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_async_session)):
    """Create an organization together with its first (admin) user"""
    token, user = await accounts.register(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        organization_name=payload.organization_name,
    )
    return AuthResponse(token=token, user=UserRead(**user.to_schema))


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_async_session)):
    token, user = await accounts.login(db, email=payload.email, password=payload.password)
    return AuthResponse(token=token, user=UserRead(**user.to_schema))


@router.get("/me", response_model=UserRead)
async def me(identity: Identity = Depends(current_identity), db: AsyncSession = Depends(get_async_session)):
    user = await accounts.get_profile(db, identity)
    return UserRead(**user.to_schema)


@router.post("/create-user", response_model=CreatedUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    admin: Identity = Depends(current_admin),
    db: AsyncSession = Depends(get_async_session),
):
    """Add a user to the admin's organization (defaults to MANAGER)"""
    user = await accounts.create_user(
        db, admin, email=payload.email, password=payload.password, name=payload.name, role=payload.role
    )
    return CreatedUserResponse(user=UserRead(**user.to_schema))


@router.get("/users", response_model=List[UserRead])
async def list_users(admin: Identity = Depends(current_admin), db: AsyncSession = Depends(get_async_session)):
    users = await accounts.list_users(db, admin)
    return [UserRead(**u.to_schema) for u in users]
