"""
Custom exceptions for the storefront.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── StoreException
│   └── StoreUnavailableException
├── CatalogException
│   ├── ProductNotFoundException
│   └── InvalidFilterException
└── CartException
    ├── CartNotFoundException
    └── InvalidCartQuantityException

Usage:
------
Repositories wrap driver errors:
    raise StoreUnavailableException("product.count", key=filters) from e

Services decide between fallback (reads) and propagation (writes);
the web layer maps what propagates to HTTP status codes.
"""

from .base import StorefrontException
from .store import StoreException, StoreUnavailableException
from .catalog import CatalogException, ProductNotFoundException, InvalidFilterException
from .cart import CartException, CartNotFoundException, InvalidCartQuantityException

__all__ = [
    # Base
    'StorefrontException',

    # Store
    'StoreException',
    'StoreUnavailableException',

    # Catalog
    'CatalogException',
    'ProductNotFoundException',
    'InvalidFilterException',

    # Cart
    'CartException',
    'CartNotFoundException',
    'InvalidCartQuantityException',
]
