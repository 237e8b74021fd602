# =============================================================================
# core/models/base.py - Shared Record Schema
# =============================================================================
# Every stored record carries:
# - id: externally supplied UUID (never generated here)
# - created_at / updated_at: timestamps defaulted by the record store
#
# Records validate on assignment, so mutating a fetched record with a bad
# value fails immediately rather than at save time.
# =============================================================================

from datetime import datetime
from typing import Any, ClassVar, Union
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)
from typing_extensions import TypeAliasType

from lib.utils import ensure_utc, utc_now


# Open-ended metadata stays JSON-shaped: scalars or nested mappings only
MetadataValue = TypeAliasType(
    "MetadataValue",
    "Union[StrictBool, StrictInt, StrictFloat, StrictStr, dict[str, MetadataValue]]",
)


class StoredRecord(BaseModel):
    """
    Base schema for records persisted by a RecordStore.

    Subclasses declare their own fields and may override
    `consistency_problems()` to report issues that the strict
    validation mode rejects.
    """

    # Entity name used in log lines and error messages
    entity_name: ClassVar[str] = "Record"

    # Immutable once set; update() targets the stored row by id
    id: UUID = Field(
        ...,
        frozen=True,
        description="Unique record identifier (supplied by the caller)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the record was first stored"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        description="When the record was last stored"
    )

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    @field_validator("*", mode="after")
    @classmethod
    def validate_datetimes_utc(cls, value: Any) -> Any:
        """Store every datetime as timezone-aware UTC."""
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value

    @classmethod
    def field_names(cls) -> set[str]:
        """Names of all declared fields."""
        return set(cls.model_fields)

    def consistency_problems(self) -> list[str]:
        """Cross-field issues the schema tolerates but strict mode rejects."""
        return []

    def to_row(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict matching the table columns."""
        return self.model_dump(mode="json")
