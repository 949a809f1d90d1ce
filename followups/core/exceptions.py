"""
Domain exceptions for the follow-up suggestion engine.

Storage failures are captured per item by the use cases; only malformed
input and bad configuration surface to the caller.
"""

from typing import Any


class FollowUpError(Exception):
    """Base exception for all follow-up engine errors."""

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
        """Convert to dictionary for structured log fields."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FollowUpError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class SourceReadError(StorageError):
    """Reading one of the input collections failed."""

    def __init__(self, source: str, user_id: str, reason: str):
        super().__init__(
            f"Failed to read {source} for user {user_id}: {reason}",
            code="SOURCE_READ_FAILURE",
            details={"source": source, "user_id": user_id, "reason": reason},
        )


class PersistenceError(StorageError):
    """Writing a single reminder or notification failed."""

    def __init__(self, entity: str, reason: str, title: str | None = None):
        super().__init__(
            f"Failed to persist {entity}: {reason}",
            code="PERSISTENCE_FAILURE",
            details={"entity": entity, "reason": reason, "title": title},
        )


# Suggestion Exceptions
class InvalidSuggestionError(FollowUpError):
    """Suggestion is malformed and cannot be ranked or materialized."""

    def __init__(self, reason: str, title: str | None = None):
        super().__init__(
            f"Invalid suggestion: {reason}",
            code="INVALID_SUGGESTION",
            details={"reason": reason, "title": (title or "")[:100] or None},
        )


class ConfigurationError(FollowUpError):
    """Configuration error."""

    pass
