# cart is a container for the products a visitor collects before checkout. It is
# identified by an opaque session token that the web layer keeps in a long-lived
# cookie, so the token itself is the primary key
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship

import config
from models.base import Base
from models.cartItem import CartItemDTO


class Cart(Base):
    __tablename__ = "carts"

    id = Column(String(64), primary_key=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    items = relationship("CartItem", back_populates="cart", cascade="all, delete-orphan",
                         order_by="CartItem.id")


class CartDTO(BaseModel):
    id: str | None = None
    created_at: datetime | None = None
    items: list[CartItemDTO] = []
    subtotal: int = 0
    currency: str = config.CURRENCY
