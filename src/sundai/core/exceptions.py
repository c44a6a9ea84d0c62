"""
Exception handling for the SundAI assistant.

This module provides the failure taxonomy shared by the action handlers,
the conversation router and the API layer.
"""

from typing import Any, Dict, Optional


class SundaiException(Exception):
    """Base exception class for the SundAI assistant."""

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


class ConfigurationError(SundaiException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "CONFIG_ERROR", details)


class NotConnectedError(SundaiException):
    """Raised when the persistence collaborator is unreachable."""

    def __init__(
        self,
        message: str = "Database not connected. Please restart the application.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "NOT_CONNECTED", details)


class ValidationFailedError(SundaiException):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "VALIDATION_FAILED", details)


class EntityNotFoundError(SundaiException):
    """Raised when resolution finds no matching record."""

    def __init__(
        self, kind: str, term: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.kind = kind
        self.term = term
        message = f'{kind.capitalize()} "{term}" not found.'
        super().__init__(message, "NOT_FOUND", {"kind": kind, "term": term, **(details or {})})


class BackendFailureError(SundaiException):
    """Raised when the assistant or retrieval backend fails."""

    def __init__(
        self, service: str, message: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.service = service
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "BACKEND_FAILURE", details)


class TranscriptionFailureError(SundaiException):
    """Raised when a recording cannot be turned into text."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "TRANSCRIPTION_FAILURE", details)
