# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to its canonical string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Args:
        value: UUID as string or UUID object

    Returns:
        Lowercase hyphenated string representation of the UUID

    Raises:
        ValueError: If the value is not a valid UUID

    Example:
        record_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        record_id = normalize_uuid("550E8400-...")  # "550e8400-..."
    """
    if isinstance(value, UUID):
        return str(value)
    return str(UUID(str(value)))


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Make a datetime timezone-aware.

    Naive datetimes are taken to be UTC; aware ones are converted to UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
