"""
Base exception class for the storefront.

Every domain error carries a human-readable message plus a details dict with
machine-readable context (operation name, entity keys). The web layer logs
the repr and maps the exception type to a status code.
"""


class StorefrontException(Exception):

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if not self.details:
            return f"{type(self).__name__}({self.message!r})"
        details = ', '.join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{type(self).__name__}({self.message!r}, {details})"
