"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.category import Category
from models.product import Product
from models.cart import Cart
from models.cartItem import CartItem

__all__ = [
    'Base',
    'Category',
    'Product',
    'Cart',
    'CartItem',
]
