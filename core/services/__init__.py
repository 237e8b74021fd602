# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .record_store import RecordStore
from .payment_service import PaymentStore
from .user_supplement_service import UserSupplementStore

__all__ = [
    "RecordStore",
    "PaymentStore",
    "UserSupplementStore",
]
