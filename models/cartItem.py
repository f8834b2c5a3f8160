from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, UniqueConstraint, DateTime, func
from sqlalchemy.orm import relationship

from models.base import Base
from models.product import ProductDTO


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(String(64), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product", lazy="joined")

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
        # One line per product; adding the same product again bumps the quantity
        UniqueConstraint('cart_id', 'product_id', name='uq_cart_items_cart_product'),
    )


class CartItemDTO(BaseModel):
    id: int | None = None
    cart_id: str | None = None
    product_id: int | None = None
    quantity: int | None = None
    product: ProductDTO | None = None

    @property
    def line_total(self) -> int:
        if self.product is None or self.product.price is None:
            return 0
        return self.product.price * (self.quantity or 0)
