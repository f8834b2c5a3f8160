"""
Storage-layer exceptions.
"""

from .base import StorefrontException


class StoreException(StorefrontException):
    """Base exception for storage errors."""
    pass


class StoreUnavailableException(StoreException):
    """
    Raised by repositories when a query or connection fails.

    Read paths may degrade to fallback data, write paths must propagate.
    """

    def __init__(self, operation: str, key: object | None = None, cause: Exception | None = None):
        message = f"Store unavailable during {operation}"
        if key is not None:
            message += f" (key={key})"
        details = {'operation': operation}
        if key is not None:
            details['key'] = key
        if cause is not None:
            details['cause'] = type(cause).__name__
        super().__init__(message, details)
        self.operation = operation
        self.key = key
        self.cause = cause
