"""Custom exceptions for the application."""
from typing import Any


class EntityNotFound(Exception):
    """Raised when an entity is not found in the database."""

    def __init__(self, entity_name: str, entity_id: Any):
        """
        Initialize the exception.

        Args:
            entity_name: Name of the entity that was not found
            entity_id: ID of the entity that was not found
        """
        super().__init__(f"{entity_name} with ID {entity_id} not found")
        self.entity_name = entity_name
        self.entity_id = entity_id


class ConflictingEntityFound(Exception):
    """Raised when an entity with a conflicting field already exists."""

    def __init__(self, entity_name: str, field_name: str, field_value: Any):
        """
        Initialize the exception.

        Args:
            entity_name: Name of the entity
            field_name: Name of the conflicting field
            field_value: Value of the conflicting field
        """
        super().__init__(f"{entity_name} with {field_name} '{field_value}' already exists")
        self.entity_name = entity_name
        self.field_name = field_name
        self.field_value = field_value


class Unauthorized(Exception):
    """Raised when a request carries no verifiable caller identity."""

    def __init__(self, reason: str = "Unauthorized"):
        super().__init__(reason)
        self.reason = reason


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        """
        Initialize the exception.

        Args:
            message: Human readable message returned by the provider
            status_code: HTTP status returned by the provider, if any
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationFailed(IdentityProviderError):
    """Raised when the identity provider refuses credentials or tokens."""
