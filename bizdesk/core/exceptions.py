"""
Domain exceptions for the Bizdesk application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class BizdeskError(Exception):
    """Base exception for all Bizdesk errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(BizdeskError):
    """Base exception for storage operations."""

    pass


class NotFoundError(StorageError):
    """A referenced record is absent or owned by another tenant."""

    entity = "Record"

    def __init__(self, record_id: int | str):
        key = self.entity.lower()
        super().__init__(
            f"{self.entity} not found: {record_id}",
            code=f"{key.upper()}_NOT_FOUND",
            details={f"{key}_id": record_id},
        )


class ReminderNotFoundError(NotFoundError):
    """Reminder not found for the calling tenant."""

    entity = "Reminder"


class ClientNotFoundError(NotFoundError):
    """Client not found."""

    entity = "Client"


class UserNotFoundError(NotFoundError):
    """User not found."""

    entity = "User"


class ProductNotFoundError(NotFoundError):
    """Product not found."""

    entity = "Product"


class ServiceNotFoundError(NotFoundError):
    """Service not found."""

    entity = "Service"


class SaleNotFoundError(NotFoundError):
    """Sale not found."""

    entity = "Sale"


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class DuplicateProductError(StorageError):
    """Product with the same name, category and type already exists."""

    def __init__(self, name: str, existing_id: int):
        super().__init__(
            f"Product already exists: {name}",
            code="DUPLICATE_PRODUCT",
            details={"name": name, "existing_id": existing_id},
        )


class DuplicateUserError(StorageError):
    """User with the same email already exists."""

    def __init__(self, email: str):
        super().__init__(
            f"User already exists with email: {email}",
            code="DUPLICATE_USER",
            details={"email": email},
        )


# Notification Exceptions
class NotifierError(BizdeskError):
    """Notification dispatch failed."""

    def __init__(self, recipient: str, reason: str):
        super().__init__(
            f"Failed to notify {recipient}: {reason}",
            code="NOTIFIER_ERROR",
            details={"recipient": recipient, "reason": reason},
        )


# Workflow Exceptions
class InvalidStatusTransitionError(BizdeskError):
    """Reminder status may only move from pending to completed or cancelled."""

    def __init__(self, reminder_id: int | None, current: str, requested: str):
        super().__init__(
            f"Cannot move reminder {reminder_id} from '{current}' to '{requested}'",
            code="INVALID_STATUS_TRANSITION",
            details={
                "reminder_id": reminder_id,
                "current": current,
                "requested": requested,
            },
        )


class UnauthorizedError(BizdeskError):
    """No tenant could be resolved for the request."""

    def __init__(self, reason: str = "Missing or unknown user"):
        super().__init__(reason, code="UNAUTHORIZED")


# Validation Exceptions
class ValidationError(BizdeskError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


# Configuration Exceptions
class ConfigurationError(BizdeskError):
    """Configuration error."""

    pass
