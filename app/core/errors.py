"""Domain error codes and exceptions for the data-access layer."""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Domain error codes."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NORMALIZATION_ERROR = "NORMALIZATION_ERROR"
    UNIQUENESS_VIOLATION = "UNIQUENESS_VIOLATION"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INFRASTRUCTURE_ERROR = "INFRASTRUCTURE_ERROR"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INFRASTRUCTURE_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @property
    def details(self) -> Optional[Any]:
        return None


class ConfigurationError(DomainError):
    """Raised when the database connection is not configured."""

    code = ErrorCode.CONFIGURATION_ERROR


class ValidationError(DomainError):
    """Raised when one or more fields fail their constraints.

    ``errors`` holds one ``{"field": ..., "message": ...}`` entry per failure.
    """

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        summary = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Validation failed: {summary}")
        self.errors = errors

    @property
    def details(self) -> List[Dict[str, str]]:
        return self.errors


class NormalizationError(DomainError):
    """Raised when a date can neither be parsed nor is already YYYY-MM-DD."""

    code = ErrorCode.NORMALIZATION_ERROR

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid date format: {value}. Expected YYYY-MM-DD or valid date string."
        )
        self.value = value


class UniquenessViolation(DomainError):
    """Raised when a unique field (the event slug) is already taken."""

    code = ErrorCode.UNIQUENESS_VIOLATION

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"An event with {field} '{value}' already exists")
        self.field = field
        self.value = value

    @property
    def details(self) -> Dict[str, str]:
        return {"field": self.field, "value": self.value}


class ReferenceNotFoundError(DomainError):
    """Raised when a booking references an event that does not exist."""

    code = ErrorCode.REFERENCE_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event with ID {event_id} does not exist")
        self.event_id = event_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class InfrastructureError(DomainError):
    """Raised on connection failures and unexpected store errors."""

    code = ErrorCode.INFRASTRUCTURE_ERROR
