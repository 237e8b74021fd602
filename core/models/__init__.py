# =============================================================================
# core/models/ - Pydantic Record Models
# =============================================================================
# This package contains Pydantic schemas for the stored records:
# - base.py: StoredRecord (id + timestamps) and the MetadataValue type
# - payment.py: Payment records and PaymentStatus
# - user_supplement.py: UserSupplement records (supplement regimens)
#
# These models define the "contract" between the stores and their callers.
# =============================================================================

from .base import MetadataValue, StoredRecord
from .payment import Payment, PaymentStatus
from .user_supplement import RATING_MAX, RATING_MIN, UserSupplement

__all__ = [
    # Base
    "MetadataValue",
    "StoredRecord",
    # Payment
    "Payment",
    "PaymentStatus",
    # User supplement
    "RATING_MAX",
    "RATING_MIN",
    "UserSupplement",
]
