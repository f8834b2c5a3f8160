from datetime import datetime

from pydantic import BaseModel, field_validator
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, JSON, func
from sqlalchemy.orm import relationship

from enums.product_size import ProductSize
from models.base import Base
from models.category import CategoryDTO


SIZE_VALUES = ", ".join(f"'{size.value}'" for size in ProductSize)


# Product prices are stored in cents; the slug is the public, immutable identifier
class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, unique=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    description = Column(String, nullable=False, default="")
    price = Column(Integer, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    brand = Column(String, nullable=True, index=True)
    color = Column(String, nullable=True, index=True)
    size = Column(String(3), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    category = relationship("Category", lazy="joined")
    created_at = Column(DateTime, nullable=False, default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint(f"size IS NULL OR size IN ({SIZE_VALUES})", name='check_size_known'),
    )


class ProductDTO(BaseModel):
    id: int | None = None
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    price: int | None = None
    images: list[str] = []
    brand: str | None = None
    color: str | None = None
    size: str | None = None
    category_id: int | None = None
    category: CategoryDTO | None = None
    created_at: datetime | None = None

    @field_validator('size', mode='before')
    @classmethod
    def validate_size(cls, v):
        """Normalize size to its enum value; empty strings mean "no size"."""
        if isinstance(v, ProductSize):
            return v.value
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return ProductSize.from_string(v).value

    @field_validator('images', mode='before')
    @classmethod
    def validate_images(cls, v):
        return list(v) if v else []
