# =============================================================================
# tests/test_payment_service.py - Payment Store Tests
# =============================================================================
# Tests for the payment-specific helpers: user history, payment intent
# lookup and status transitions.
# =============================================================================

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.exceptions import NotFoundError, ValidationError
from core.models import PaymentStatus


class TestPaymentQueries:
    """Tests for PaymentStore lookups."""

    def test_list_for_user(self, payment_store, make_payment_data):
        user_id = uuid4()
        payment_store.create(make_payment_data(user_id=user_id))
        payment_store.create(make_payment_data(user_id=user_id, status="refunded"))
        payment_store.create(make_payment_data())

        history = payment_store.list_for_user(user_id)

        assert len(history) == 2
        assert {payment.user_id for payment in history} == {user_id}

    def test_list_for_user_by_status(self, payment_store, make_payment_data):
        user_id = uuid4()
        payment_store.create(make_payment_data(user_id=user_id))
        refunded = payment_store.create(make_payment_data(user_id=user_id, status="refunded"))

        found = payment_store.list_for_user(user_id, status=PaymentStatus.REFUNDED)

        assert [payment.id for payment in found] == [refunded.id]

    @pytest.mark.parametrize("plan", ["basic", "pro", "enterprise"])
    def test_find_by_subscription_plan(self, payment_store, make_payment_data, plan):
        payment_store.create(make_payment_data(subscription_plan=plan))

        found = payment_store.find_many({"subscription_plan": plan})

        assert len(found) == 1
        assert found[0].subscription_plan == plan

    def test_find_by_payment_intent(self, payment_store, make_payment_data):
        payment = payment_store.create(make_payment_data(stripe_payment_intent_id="pi_webhook_1"))
        payment_store.create(make_payment_data(stripe_payment_intent_id="pi_webhook_2"))

        found = payment_store.find_by_payment_intent("pi_webhook_1")

        assert found.id == payment.id

    def test_find_by_unknown_payment_intent(self, payment_store):
        assert payment_store.find_by_payment_intent("pi_missing") is None


class TestPaymentTransitions:
    """Tests for mark_completed / mark_failed / mark_refunded."""

    def test_mark_completed(self, payment_store, make_payment_data):
        payment = payment_store.create(make_payment_data(status="pending"))
        completed_at = datetime(2025, 11, 2, 9, 0, tzinfo=timezone.utc)

        saved = payment_store.mark_completed(payment.id, completed_at=completed_at)

        assert saved.status == PaymentStatus.COMPLETED
        assert saved.completed_at == completed_at
        assert saved.updated_at > payment.updated_at
        assert payment_store.find_by_id(payment.id).status == PaymentStatus.COMPLETED

    def test_mark_completed_clears_error(self, payment_store, make_payment_data):
        """Test that a retried payment drops the earlier failure reason."""
        payment = payment_store.create(make_payment_data(status="failed", error_message="Card declined"))

        saved = payment_store.mark_completed(payment.id)

        assert saved.error_message is None
        assert saved.completed_at > payment.completed_at

    def test_mark_failed(self, payment_store, make_payment_data):
        payment = payment_store.create(make_payment_data(status="pending"))

        saved = payment_store.mark_failed(payment.id, "Insufficient funds")

        assert saved.status == PaymentStatus.FAILED
        assert saved.error_message == "Insufficient funds"

    def test_mark_failed_requires_text(self, payment_store, make_payment_data):
        payment = payment_store.create(make_payment_data(status="pending"))

        with pytest.raises(ValidationError):
            payment_store.mark_failed(payment.id, 402)

        assert payment_store.find_by_id(payment.id).status == PaymentStatus.PENDING

    def test_mark_refunded(self, payment_store, make_payment_data):
        payment = payment_store.create(make_payment_data())

        saved = payment_store.mark_refunded(payment.id)

        assert saved.status == PaymentStatus.REFUNDED
        assert saved.created_at == payment.created_at

    @pytest.mark.parametrize("method", ["mark_completed", "mark_refunded"])
    def test_transition_missing_payment(self, payment_store, method):
        with pytest.raises(NotFoundError):
            getattr(payment_store, method)(uuid4())

    def test_mark_failed_missing_payment(self, payment_store):
        with pytest.raises(NotFoundError):
            payment_store.mark_failed(uuid4(), "Card declined")
