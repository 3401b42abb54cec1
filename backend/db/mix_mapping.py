import uuid
from sqlalchemy import Column, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .database import Base


class MixMapping(Base):
    """Recipe line: how much of one ingredient goes into a menu item at a location"""
    __tablename__ = "mix_mappings"
    __table_args__ = (
        UniqueConstraint("menu_item_id", "location_id", "ingredient_id", name="uq_mix_mapping_recipe_line"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(UUID(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(UUID(as_uuid=True), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True)

    quantity = Column(Numeric(10, 3), nullable=False)

    menu_item = relationship("MenuItem", back_populates="mix_mappings")
    location = relationship("Location", back_populates="mix_mappings")
    ingredient = relationship("Ingredient", back_populates="mix_mappings")

    @property
    def to_schema(self):
        """Requires `ingredient` to be loaded"""
        return {
            "id": self.id,
            "menu_item_id": self.menu_item_id,
            "location_id": self.location_id,
            "ingredient_id": self.ingredient_id,
            "quantity": float(self.quantity),
            "ingredient": self.ingredient.to_schema if self.ingredient is not None else None,
        }
