# =============================================================================
# core/services/user_supplement_service.py - User Supplement Record Store
# =============================================================================
# Supplement regimens per user. Stopping a regimen is a soft-deactivation
# (is_active=False plus end_date), never a delete.
# =============================================================================

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from core.models.user_supplement import UserSupplement
from lib.utils import utc_now

from .record_store import RecordStore

logger = logging.getLogger(__name__)


class UserSupplementStore(RecordStore[UserSupplement]):
    """Store for user supplement records."""

    model = UserSupplement
    table_name = "user_supplements"

    def list_for_user(
        self,
        user_id: UUID | str,
        active_only: bool = False,
    ) -> list[UserSupplement]:
        """
        Supplements a user is (or was) taking.

        Args:
            user_id: Owning user
            active_only: Only return regimens with is_active=True

        Returns:
            Matching records in backend order
        """
        filters: dict[str, Any] = {"user_id": user_id}
        if active_only:
            filters["is_active"] = True
        return self.find_many(filters)

    def list_for_supplement(self, supplement_id: UUID | str) -> list[UserSupplement]:
        """Every user regimen that references a supplement."""
        return self.find_many({"supplement_id": supplement_id})

    def deactivate(
        self,
        record_id: UUID | str,
        end_date: datetime | None = None,
    ) -> UserSupplement:
        """
        Stop a regimen.

        is_active and end_date are written together in one update.

        Args:
            record_id: User supplement id
            end_date: When it stopped (defaults to now)

        Raises:
            NotFoundError: If the record doesn't exist
            ValidationError: In strict mode, if end_date precedes start_date
        """
        record = self._modify(
            record_id,
            is_active=False,
            end_date=end_date or utc_now(),
        )
        logger.info(f"Deactivated user supplement {record_id}")
        return record

    def reactivate(self, record_id: UUID | str) -> UserSupplement:
        """
        Resume a stopped regimen, clearing its end_date.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        record = self._modify(record_id, is_active=True, end_date=None)
        logger.info(f"Reactivated user supplement {record_id}")
        return record

    def rate(
        self,
        record_id: UUID | str,
        personal_rating: int | None = None,
        effectiveness: int | None = None,
        notes: str | None = None,
    ) -> UserSupplement:
        """
        Record the user's evaluation. Only the given values are changed.

        Raises:
            NotFoundError: If the record doesn't exist
            ValidationError: If a rating is outside the 1-5 scale
        """
        changes: dict[str, Any] = {}
        if personal_rating is not None:
            changes["personal_rating"] = personal_rating
        if effectiveness is not None:
            changes["effectiveness"] = effectiveness
        if notes is not None:
            changes["notes"] = notes

        if not changes:
            return self.get(record_id)

        return self._modify(record_id, **changes)
