import enum
from datetime import datetime, timezone
from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"


class User(SQLAlchemyBaseUserTableUUID, Base):
    """Staff account; email/hashed_password/is_active come from the fastapi-users base table"""
    __tablename__ = "users"

    name = Column(String, nullable=False)
    organization_id = Column(
        UUID(as_uuid=True), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role = Column(Enum(Role, name="user_role"), nullable=False, default=Role.MANAGER)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    organization = relationship("Organization", back_populates="users")

    @property
    def to_schema(self):
        """Public profile; never includes the password hash"""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "organization_id": self.organization_id,
            "role": self.role,
            "created_at": self.created_at,
        }
