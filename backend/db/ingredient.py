import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .database import Base


class Ingredient(Base):
    """Ingredient model - priced per unit, owned by one organization"""
    __tablename__ = "ingredients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # price per unit
    unit = Column(String, nullable=False)  # 'kg', 'l', 'each', etc.
    organization_id = Column(
        UUID(as_uuid=True), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)

    mix_mappings = relationship("MixMapping", back_populates="ingredient", passive_deletes=True)

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": float(self.price),
            "unit": self.unit,
            "organization_id": self.organization_id,
            "created_at": self.created_at,
        }
