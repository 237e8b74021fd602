# =============================================================================
# app/exceptions.py - Record Store Exceptions
# =============================================================================
# Centralized error taxonomy for the record stores.
# Every failure a store can surface is one of these, so callers can tell
# bad input, identifier collisions, missing records and backend outages apart.
# Errors should tell HOW to fix, not just WHAT failed.
# =============================================================================

from typing import Any


class RecordStoreException(Exception):
    """
    Base exception for the record stores.

    All custom exceptions inherit from this class.
    Provides structured error data with actionable suggestions, plus an
    HTTP-style status code for upstream handlers that expose the stores.
    """

    def __init__(
        self,
        message: str,
        code: str = "BACKEND_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Input Exceptions
# =============================================================================

class ValidationError(RecordStoreException):
    """
    Raised when a record or filter fails validation.

    Nothing has been written when this is raised; the caller can retry
    with corrected input.
    """

    def __init__(
        self,
        entity: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        details: dict[str, Any] = {"entity": entity}
        if errors:
            details["errors"] = errors
        super().__init__(
            message=f"Invalid {entity}: {message}",
            code="VALIDATION_ERROR",
            status_code=422,
            suggestion="Check required fields and value types, then retry",
            details=details,
        )
        self.entity = entity
        self.errors = errors or []


class DuplicateKeyError(RecordStoreException):
    """Raised when a record with the same id already exists."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(
            message=f"{entity} already exists: {record_id}",
            code="DUPLICATE_KEY",
            status_code=409,
            suggestion="Use a new id, or fetch and update the existing record",
            details={"entity": entity, "id": record_id},
        )
        self.entity = entity
        self.record_id = record_id


class NotFoundError(RecordStoreException):
    """Raised when updating or acting on a record id that doesn't exist."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(
            message=f"{entity} not found: {record_id}",
            code="RECORD_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity} id is correct",
            details={"entity": entity, "id": record_id},
        )
        self.entity = entity
        self.record_id = record_id


# =============================================================================
# Backend Exceptions
# =============================================================================

class BackendUnavailableError(RecordStoreException):
    """Raised when the database backend can't be reached."""

    def __init__(self, error: str, operation: str | None = None):
        details: dict[str, Any] = {"error": error}
        if operation:
            details["operation"] = operation
        super().__init__(
            message=f"Database backend unavailable: {error}",
            code="BACKEND_UNAVAILABLE",
            status_code=503,
            suggestion="Check SUPABASE_URL and network connectivity, then retry",
            details=details,
        )
