"""
Cart-related exceptions.
"""

from .base import StorefrontException

class CartException(StorefrontException):
    """Base exception for cart-related errors."""
    pass

class CartNotFoundException(CartException):
    """Raised when a cart token does not resolve to a cart."""

    def __init__(self, cart_id: str):
        super().__init__(
            f"Cart {cart_id} not found",
            details={'cart_id': cart_id}
        )
        self.cart_id = cart_id

class InvalidCartQuantityException(CartException):
    """Raised when a requested quantity is not positive on add, or above the per-request maximum."""

    def __init__(self, quantity: int, maximum: int | None = None):
        if maximum is None:
            message = f"Quantity must be positive when adding to cart (got: {quantity})"
        else:
            message = f"Quantity must not exceed {maximum} (got: {quantity})"
        super().__init__(message, details={'quantity': quantity, 'maximum': maximum})
        self.quantity = quantity
        self.maximum = maximum
