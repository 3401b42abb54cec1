from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from db.users import Role
from .base import CamelModel


class UserRead(CamelModel):
    id: UUID
    email: EmailStr
    name: str
    organization_id: UUID
    role: Role
    created_at: Optional[datetime] = None


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    organization_name: str = Field(min_length=1)


class LoginRequest(CamelModel):
    email: str
    password: str = Field(min_length=1)


class CreateUserRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    role: Role = Role.MANAGER


class AuthResponse(CamelModel):
    token: str
    user: UserRead


class CreatedUserResponse(CamelModel):
    user: UserRead
