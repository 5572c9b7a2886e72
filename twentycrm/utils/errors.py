"""Custom exception classes for Twenty client failures."""

from __future__ import annotations

from typing import Optional


class TwentyCrmError(Exception):
    """Base exception for all client failures."""


class ApiError(TwentyCrmError):
    """Raised by a transport when the API answers with an error."""

    def __init__(self, message: str, status_code: int = 0, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def is_not_found(self) -> bool:
        # Twenty answers 400 for malformed/unknown ids as well as 404.
        return self.status_code in (400, 404)


class AuthenticationError(ApiError):
    """Raised when the API rejects the bearer token."""


class MissingIdError(TwentyCrmError, ValueError):
    """Raised when an operation needs an entity id that is not set."""

    def __init__(self, object_name: str, operation: str = "update"):
        super().__init__(f"Cannot {operation} {object_name} without an id")
        self.object_name = object_name
        self.operation = operation


class FilterError(TwentyCrmError, ValueError):
    """Raised for invalid filter operators, fields or SELECT values."""

    def __init__(self, message: str, field: Optional[str] = None, value: object = None):
        super().__init__(message)
        self.field = field
        self.value = value


class ResponseParseError(TwentyCrmError):
    """Raised when an API response does not have a recognised shape."""


class MetadataParseError(TwentyCrmError, ValueError):
    """Raised when a discovery payload cannot be turned into metadata."""


class EntityNotFoundError(TwentyCrmError, LookupError):
    """Raised when an object type is not known to the registry."""

    def __init__(self, object_name: str):
        super().__init__(f"Entity '{object_name}' not found in registry")
        self.object_name = object_name


class CodegenError(TwentyCrmError):
    """Raised when code generation cannot complete."""


class ConfigError(TwentyCrmError, ValueError):
    """Raised for missing or invalid configuration."""
