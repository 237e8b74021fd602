# =============================================================================
# core/services/payment_service.py - Payment Record Store
# =============================================================================
# Payment persistence plus the status changes billing webhooks apply.
# Payments are never deleted; every change is a status transition.
# =============================================================================

import logging
from datetime import datetime
from uuid import UUID

from core.models.payment import Payment, PaymentStatus
from lib.utils import utc_now

from .record_store import RecordStore

logger = logging.getLogger(__name__)


class PaymentStore(RecordStore[Payment]):
    """
    Store for payment records.

    Any status may move to any other status; the helpers below only
    keep the related fields (completed_at, error_message) in step.
    """

    model = Payment
    table_name = "payments"

    def list_for_user(
        self,
        user_id: UUID | str,
        status: PaymentStatus | str | None = None,
    ) -> list[Payment]:
        """
        Payment history for a user.

        Args:
            user_id: Owning user
            status: Optional status filter

        Returns:
            Matching payments in backend order
        """
        filters: dict = {"user_id": user_id}
        if status is not None:
            filters["status"] = status
        return self.find_many(filters)

    def find_by_payment_intent(self, payment_intent_id: str) -> Payment | None:
        """Payment created for a Stripe PaymentIntent, or None."""
        return self.find_one({"stripe_payment_intent_id": payment_intent_id})

    def mark_completed(
        self,
        payment_id: UUID | str,
        completed_at: datetime | None = None,
    ) -> Payment:
        """
        Mark a payment as completed.

        Clears any error message left by an earlier failed attempt.

        Raises:
            NotFoundError: If the payment doesn't exist
        """
        payment = self._modify(
            payment_id,
            status=PaymentStatus.COMPLETED,
            completed_at=completed_at or utc_now(),
            error_message=None,
        )
        logger.info(f"Payment {payment_id} completed")
        return payment

    def mark_failed(self, payment_id: UUID | str, error_message: str) -> Payment:
        """
        Mark a payment as failed with the processor's reason.

        Raises:
            NotFoundError: If the payment doesn't exist
            ValidationError: If error_message is not a string
        """
        payment = self._modify(
            payment_id,
            status=PaymentStatus.FAILED,
            error_message=error_message,
            completed_at=utc_now(),
        )
        logger.info(f"Payment {payment_id} failed: {error_message}")
        return payment

    def mark_refunded(self, payment_id: UUID | str) -> Payment:
        """
        Mark a payment as refunded.

        Raises:
            NotFoundError: If the payment doesn't exist
        """
        payment = self._modify(
            payment_id,
            status=PaymentStatus.REFUNDED,
            completed_at=utc_now(),
            error_message=None,
        )
        logger.info(f"Payment {payment_id} refunded")
        return payment
