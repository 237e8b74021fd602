# =============================================================================
# lib/supabase_client.py - Supabase Client Factory & Error Translation
# =============================================================================
# This module owns everything that touches the supabase library directly:
# - Building a Client from settings (once, at process start)
# - Translating postgrest / httpx failures into the record store taxonomy
#
# Stores never build their own client. The client is created here and
# injected, so there is no hidden module-level connection.
#
# Usage:
#   from lib.supabase_client import create_supabase_client
#   client = create_supabase_client(settings)
#   store = PaymentStore(client)
# =============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from app.exceptions import (
    BackendUnavailableError,
    DuplicateKeyError,
    RecordStoreException,
    ValidationError,
)

if TYPE_CHECKING:
    from app.config import Settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgreSQL error codes surfaced by PostgREST
UNIQUE_VIOLATION = "23505"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"
INVALID_TEXT_REPRESENTATION = "22P02"

_INPUT_ERROR_CODES = {NOT_NULL_VIOLATION, CHECK_VIOLATION, INVALID_TEXT_REPRESENTATION}


def create_supabase_client(settings: Settings) -> Client:
    """
    Create a Supabase client from settings.

    Uses the service_role key which bypasses Row Level Security (RLS).
    This is appropriate for server-side record stores.

    Args:
        settings: Application settings with SUPABASE_URL / SUPABASE_SERVICE_KEY

    Returns:
        Client: Supabase client instance

    Raises:
        BackendUnavailableError: If client creation fails
    """
    try:
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        raise BackendUnavailableError(
            f"Failed to create Supabase client: {e}",
            operation="connect",
        ) from e

    logger.info("Supabase client initialized successfully")
    return client


def translate_backend_error(
    error: Exception,
    entity: str,
    operation: str,
    record_id: str | None = None,
) -> RecordStoreException:
    """
    Map a backend exception onto the record store error taxonomy.

    Args:
        error: The exception raised by the supabase query builder
        entity: Entity name for the error message (e.g. "Payment")
        operation: What was being attempted (create, update, find)
        record_id: Id involved, used for duplicate key errors

    Returns:
        The exception the store should raise (the caller chains the original)
    """
    if isinstance(error, APIError):
        if error.code == UNIQUE_VIOLATION:
            return DuplicateKeyError(entity, record_id or "unknown")
        if error.code in _INPUT_ERROR_CODES:
            return ValidationError(
                entity,
                error.message or "rejected by the database",
                errors=[{"code": error.code, "details": error.details, "hint": error.hint}],
            )
        return RecordStoreException(
            message=f"{operation} {entity} failed: {error.message}",
            code="BACKEND_ERROR",
            status_code=500,
            suggestion=error.hint,
            details={"backend_code": error.code, "operation": operation},
        )

    if isinstance(error, httpx.TransportError):
        return BackendUnavailableError(str(error) or type(error).__name__, operation=operation)

    return RecordStoreException(
        message=f"{operation} {entity} failed: {error}",
        code="BACKEND_ERROR",
        status_code=500,
        details={"operation": operation, "error_type": type(error).__name__},
    )
