"""
Catalog-related exceptions.
"""

from .base import StorefrontException


class CatalogException(StorefrontException):
    """Base exception for catalog errors."""
    pass


class ProductNotFoundException(CatalogException):
    """Raised when a product referenced by a write operation does not exist."""

    def __init__(self, product_id: int | None = None, slug: str | None = None):
        if product_id is not None:
            message = f"Product {product_id} not found"
            details = {'product_id': product_id}
        elif slug is not None:
            message = f"Product '{slug}' not found"
            details = {'slug': slug}
        else:
            message = "Product not found"
            details = {}

        super().__init__(message, details)
        self.product_id = product_id
        self.slug = slug


class InvalidFilterException(CatalogException):
    """Raised when a filter state cannot be constructed."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid catalog filter: {reason}",
            details={'reason': reason}
        )
        self.reason = reason
