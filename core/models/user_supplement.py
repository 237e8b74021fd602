# =============================================================================
# core/models/user_supplement.py - User Supplement Schemas
# =============================================================================
# A user supplement is one user's adherence plan for a supplement product:
# how much, how often, when, and why they take it.
#
# Records are never deleted. Stopping a regimen is a soft-deactivation:
# is_active flips to false and end_date is set. The schema itself does not
# require end_date for inactive records; strict mode does.
# =============================================================================

from datetime import datetime
from typing import Annotated, ClassVar
from uuid import UUID

from pydantic import Field, StrictBool, StrictInt, StrictStr, StringConstraints

from .base import StoredRecord

# Rating scale shared by personal_rating and effectiveness
RATING_MIN = 1
RATING_MAX = 5

GoalTag = Annotated[StrictStr, StringConstraints(min_length=1)]


class UserSupplement(StoredRecord):
    """
    Stored user supplement record.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "supplement_id": "770e8400-e29b-41d4-a716-446655440002",
            "quantity": 2,
            "usage": "2 capsules",
            "frequency": "daily",
            "timing": "morning",
            "goals": ["energy", "immunity"],
            "start_date": "2025-11-01T00:00:00Z",
            "is_active": true
        }
    """

    entity_name: ClassVar[str] = "UserSupplement"

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    user_id: UUID = Field(
        ...,
        description="User following this regimen"
    )

    supplement_id: UUID = Field(
        ...,
        description="Supplement being taken"
    )

    # -------------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------------

    quantity: StrictInt = Field(
        ...,
        gt=0,
        description="Units per intake"
    )

    usage: StrictStr = Field(
        ...,
        min_length=1,
        description="How to take it (e.g. '2 capsules')"
    )

    frequency: StrictStr = Field(
        ...,
        min_length=1,
        description="How often (e.g. 'daily', 'twice daily')"
    )

    timing: StrictStr = Field(
        ...,
        min_length=1,
        description="When (e.g. 'morning', 'with meals')"
    )

    # -------------------------------------------------------------------------
    # Goals and tracking
    # -------------------------------------------------------------------------

    # Order is preserved as given
    goals: list[GoalTag] = Field(
        ...,
        min_length=1,
        description="Goal tags (energy, focus, immunity, ...)"
    )

    start_date: datetime = Field(
        ...,
        description="When the regimen started"
    )

    end_date: datetime | None = Field(
        default=None,
        description="When the regimen stopped"
    )

    is_active: StrictBool = Field(
        ...,
        description="Whether the user is still taking it"
    )

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    personal_rating: StrictInt | None = Field(
        default=None,
        ge=RATING_MIN,
        le=RATING_MAX,
        description="User's own rating"
    )

    effectiveness: StrictInt | None = Field(
        default=None,
        ge=RATING_MIN,
        le=RATING_MAX,
        description="Perceived effectiveness"
    )

    notes: StrictStr | None = Field(
        default=None,
        description="Free-form notes"
    )

    # -------------------------------------------------------------------------
    # Optional relations
    # -------------------------------------------------------------------------

    prescribed_by: UUID | None = Field(
        default=None,
        description="Advisor who recommended the supplement"
    )

    related_meeting: UUID | None = Field(
        default=None,
        description="Meeting where it was recommended"
    )

    def consistency_problems(self) -> list[str]:
        problems = []
        if not self.is_active and self.end_date is None:
            problems.append("end_date is required when is_active is false")
        if self.end_date is not None and self.end_date < self.start_date:
            problems.append("end_date must not be earlier than start_date")
        return problems
