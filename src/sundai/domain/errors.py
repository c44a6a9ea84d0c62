"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidDateError(DomainError):
    """Date is not a real calendar day in a recognised format."""

    def __init__(self, value: str) -> None:
        message = f"Invalid date '{value}'. Use YYYY-MM-DD or DD/MM/YYYY"
        super().__init__(message, "INVALID_DATE", {"value": value})


class InvalidEntityDataError(DomainError):
    """Entity field violates a data-model invariant."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        message = f"Invalid value for {field}: {reason}"
        super().__init__(
            message, "INVALID_ENTITY_DATA", {"field": field, "value": value}
        )
