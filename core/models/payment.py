# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================
# A payment is one billing transaction tied to a user and a subscription
# purchase. Payments are created once per attempt, updated to move between
# statuses, and never deleted (financial record retention).
#
# Note: completed_at is required for every status, including pending and
# failed payments. This mirrors the existing table and is kept as-is.
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar
from uuid import UUID

from pydantic import BeforeValidator, Field, StrictInt, StrictStr, StringConstraints

from .base import MetadataValue, StoredRecord


class PaymentStatus(str, Enum):
    """
    Possible states for a payment.

    - pending: Charge initiated, outcome unknown
    - completed: Charge succeeded
    - failed: Charge declined or errored (see error_message)
    - refunded: Charge returned to the customer

    Any transition between states is allowed by the schema.
    """
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


def normalize_currency(value: Any) -> Any:
    """Normalize currency codes to upper case."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


# Lower-case input is accepted and stored upper-cased (usd -> USD)
CurrencyCode = Annotated[
    str,
    StringConstraints(strict=True, pattern=r"^[A-Z]{3}$"),
    BeforeValidator(normalize_currency),
]


class Payment(StoredRecord):
    """
    Stored payment record.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "amount": "29.99",
            "currency": "USD",
            "payment_method": "card",
            "status": "completed",
            "stripe_payment_intent_id": "pi_1234567890",
            "stripe_charge_id": "ch_1234567890",
            "subscription_plan": "pro",
            "subscription_duration": 30,
            "completed_at": "2025-11-01T10:30:00Z"
        }
    """

    entity_name: ClassVar[str] = "Payment"

    # Owning user
    user_id: UUID = Field(
        ...,
        description="User who made the payment"
    )

    amount: Decimal = Field(
        ...,
        ge=0,
        description="Charged amount in the given currency"
    )

    currency: CurrencyCode = Field(
        ...,
        description="Three-letter currency code (USD, EUR, GBP, TRY, ...)"
    )

    # Free-form: card, bank_transfer, paypal, apple_pay, google_pay, ...
    payment_method: StrictStr = Field(
        ...,
        min_length=1,
        description="Payment method tag"
    )

    status: PaymentStatus = Field(
        ...,
        description="Payment status"
    )

    stripe_payment_intent_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Stripe PaymentIntent id (pi_...)"
    )

    stripe_charge_id: StrictStr = Field(
        ...,
        min_length=1,
        description="Stripe Charge id (ch_...)"
    )

    subscription_plan: StrictStr = Field(
        ...,
        min_length=1,
        description="Subscription plan purchased (basic, pro, enterprise, ...)"
    )

    subscription_duration: StrictInt = Field(
        ...,
        gt=0,
        description="Subscription length in days"
    )

    metadata: dict[str, MetadataValue] | None = Field(
        default=None,
        description="Free-form key/value data (order ids, promo codes, ...)"
    )

    error_message: StrictStr | None = Field(
        default=None,
        description="Failure reason, only meaningful for failed payments"
    )

    completed_at: datetime = Field(
        ...,
        description="When the payment reached its current state"
    )

    @property
    def is_failed(self) -> bool:
        return self.status == PaymentStatus.FAILED

    def consistency_problems(self) -> list[str]:
        problems = []
        if self.error_message is not None and not self.is_failed:
            problems.append(
                f"error_message is only allowed when status is "
                f"'{PaymentStatus.FAILED.value}' (got '{self.status.value}')"
            )
        return problems
