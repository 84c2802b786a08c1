"""Card payment commands and webhook processing."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.ordering.events import OrderPaid
from storefront.ordering.order import Order
from storefront.ordering.payment import (
    FAILED,
    SUCCEEDED,
    AttachPaymentIntent,
    ConfirmPayment,
    ProcessPaymentWebhook,
)


def _reload(order):
    return current_domain.repository_for(Order).get(order.id)


@pytest.fixture
def card_order(make_product, make_order):
    order = make_order([make_product(price=25.0)], quantities=[2])
    current_domain.process(
        AttachPaymentIntent(order_id=str(order.id), payment_intent_id="pi_abc"), asynchronous=False
    )
    return _reload(order)


def _webhook(status, intent_id="pi_abc", order_id=None, reason=None):
    return current_domain.process(
        ProcessPaymentWebhook(
            payment_intent_id=intent_id,
            gateway_status=status,
            order_id=order_id,
            failure_reason=reason,
        ),
        asynchronous=False,
    )


class TestAttachPaymentIntent:
    def test_intent_is_recorded(self, card_order):
        assert card_order.payment_intent_id == "pi_abc"
        assert card_order.payment_status == "pending"

    def test_new_intent_reopens_failed_payment(self, card_order):
        _webhook(FAILED, reason="Card declined")
        current_domain.process(
            AttachPaymentIntent(order_id=str(card_order.id), payment_intent_id="pi_retry"), asynchronous=False
        )

        order = _reload(card_order)
        assert order.payment_status == "pending"
        assert order.payment_intent_id == "pi_retry"

    def test_paid_order_rejects_new_intent(self, card_order):
        current_domain.process(ConfirmPayment(order_id=str(card_order.id)), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(
                AttachPaymentIntent(order_id=str(card_order.id), payment_intent_id="pi_again"), asynchronous=False
            )

    def test_bank_transfer_order_rejects_intent(self, make_product, make_order):
        order = make_order([make_product()], payment_method="bank_transfer")
        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                AttachPaymentIntent(order_id=str(order.id), payment_intent_id="pi_x"), asynchronous=False
            )
        assert "payment_method" in exc.value.messages


class TestConfirmPayment:
    def test_confirm_marks_paid_and_processing(self, card_order):
        result = current_domain.process(ConfirmPayment(order_id=str(card_order.id)), asynchronous=False)

        assert result == {"payment_status": "paid", "order_status": "processing"}
        order = _reload(card_order)
        assert order.is_paid
        assert order.processed_at is not None

    def test_confirm_twice_is_harmless(self, card_order):
        current_domain.process(ConfirmPayment(order_id=str(card_order.id)), asynchronous=False)
        result = current_domain.process(ConfirmPayment(order_id=str(card_order.id)), asynchronous=False)
        assert result == {"payment_status": "paid", "order_status": "processing"}


class TestWebhook:
    def test_success_by_intent_id(self, card_order):
        assert _webhook(SUCCEEDED) == str(card_order.id)
        assert _reload(card_order).payment_status == "paid"

    def test_success_by_order_id_metadata(self, card_order):
        _webhook(SUCCEEDED, intent_id="pi_other", order_id=str(card_order.id))
        assert _reload(card_order).is_paid

    def test_failure_marks_failed(self, card_order):
        _webhook(FAILED, reason="Card declined")
        order = _reload(card_order)
        assert order.payment_status == "failed"
        assert order.order_status == "pending"

    def test_duplicate_success_is_idempotent(self, card_order):
        _webhook(SUCCEEDED)
        paid_at = _reload(card_order).updated_at
        _webhook(SUCCEEDED)

        order = _reload(card_order)
        assert order.payment_status == "paid"
        assert order.order_status == "processing"
        assert order.updated_at == paid_at

    def test_late_failure_after_success_is_ignored(self, card_order):
        _webhook(SUCCEEDED)
        _webhook(FAILED, reason="Card declined")
        assert _reload(card_order).payment_status == "paid"

    def test_success_after_failure_recovers(self, card_order):
        _webhook(FAILED, reason="Card declined")
        _webhook(SUCCEEDED)
        order = _reload(card_order)
        assert order.payment_status == "paid"
        assert order.order_status == "processing"

    def test_unknown_order_is_acknowledged(self):
        assert _webhook(SUCCEEDED, intent_id="pi_unknown", order_id="missing-order") is None

    def test_paid_event_is_raised_once(self, card_order):
        order = _reload(card_order)
        assert order.confirm_payment() is True
        assert order.confirm_payment() is False
        assert len([e for e in order._events if isinstance(e, OrderPaid)]) == 1
