"""Order aggregate: placement, payment transitions and status changes."""

import pytest
from protean.exceptions import ValidationError
from storefront.ordering.events import (
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
    PaymentFailed,
    PaymentIntentAttached,
    PaymentSlipReviewed,
    PaymentSlipUploaded,
)
from storefront.ordering.order import Order, OrderStatus, PaymentStatus

ITEMS = [
    {"product_id": "prod-1", "name": "Windows 11 Pro Key", "price": 29.5, "quantity": 2},
    {"product_id": "prod-2", "name": "Office 2021", "price": 49.99, "quantity": 1},
]


def _card_order(**overrides):
    values = {
        "order_number": "CSH-000001",
        "items_data": ITEMS,
        "payment_method": "card",
        "user_id": "user-1",
    }
    values.update(overrides)
    return Order.place(**values)


def _bank_order(**overrides):
    return _card_order(payment_method="bank_transfer", **overrides)


def _events_of(order, event_cls):
    return [event for event in order._events if isinstance(event, event_cls)]


class TestPlacement:
    def test_total_is_sum_of_line_totals(self):
        order = _card_order()
        assert order.total_amount == pytest.approx(29.5 * 2 + 49.99)
        assert order.total_amount == sum(item.price * item.quantity for item in order.items)

    def test_initial_statuses(self):
        order = _card_order()
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.order_status == OrderStatus.PENDING.value
        assert order.payment_intent_id is None
        assert order.payment_slip is None
        assert order.created_at is not None

    def test_captures_item_names_and_prices(self):
        order = _card_order()
        names = sorted(item.name for item in order.items)
        assert names == ["Office 2021", "Windows 11 Pro Key"]

    def test_raises_order_placed(self):
        order = _card_order()
        placed = _events_of(order, OrderPlaced)
        assert len(placed) == 1
        assert placed[0].order_number == "CSH-000001"
        assert placed[0].payment_method == "card"

    def test_guest_order_keeps_guest_info(self):
        order = _card_order(user_id=None, guest_info={"name": "Guest", "email": "guest@example.com"})
        assert order.is_guest_order
        assert order.guest_info.email == "guest@example.com"

    def test_guest_info_ignored_for_signed_in_user(self):
        order = _card_order(guest_info={"name": "Guest", "email": "guest@example.com"})
        assert order.guest_info is None
        assert order.user_id == "user-1"

    def test_order_without_owner_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _card_order(user_id=None)
        assert "guest_info" in exc.value.messages

    def test_order_without_items_is_rejected(self):
        with pytest.raises(ValidationError):
            _card_order(items_data=[])

    def test_unknown_payment_method_is_rejected(self):
        with pytest.raises(ValidationError):
            _card_order(payment_method="cash")

    def test_amount_in_minor_units(self):
        order = _card_order(items_data=[{"product_id": "p", "name": "Game", "price": 49.99, "quantity": 2}])
        assert order.amount_minor == 9998


class TestCardPayment:
    def test_attach_intent(self):
        order = _card_order()
        order.attach_payment_intent("pi_123")
        assert order.payment_intent_id == "pi_123"
        assert len(_events_of(order, PaymentIntentAttached)) == 1

    def test_confirm_moves_to_paid_and_processing(self):
        order = _card_order()
        assert order.confirm_payment() is True
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.order_status == OrderStatus.PROCESSING.value
        assert order.processed_at is not None

    def test_confirm_twice_raises_order_paid_once(self):
        order = _card_order()
        order.confirm_payment()
        assert order.confirm_payment() is False

        assert len(_events_of(order, OrderPaid)) == 1
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.order_status == OrderStatus.PROCESSING.value

    def test_fail_from_pending(self):
        order = _card_order()
        assert order.fail_payment("Card declined") is True
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.order_status == OrderStatus.PENDING.value
        assert _events_of(order, PaymentFailed)[0].reason == "Card declined"

    def test_failure_after_paid_is_ignored(self):
        order = _card_order()
        order.confirm_payment()
        assert order.fail_payment("late webhook") is False
        assert order.payment_status == PaymentStatus.PAID.value
        assert _events_of(order, PaymentFailed) == []

    def test_paid_after_failure(self):
        order = _card_order()
        order.fail_payment()
        assert order.confirm_payment() is True
        assert order.payment_status == PaymentStatus.PAID.value

    def test_new_intent_after_failure_resets_to_pending(self):
        order = _card_order()
        order.attach_payment_intent("pi_1")
        order.fail_payment()
        order.attach_payment_intent("pi_2")
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_intent_id == "pi_2"

    def test_intent_rejected_once_paid(self):
        order = _card_order()
        order.confirm_payment()
        with pytest.raises(ValidationError):
            order.attach_payment_intent("pi_again")

    def test_intent_rejected_for_bank_transfer(self):
        order = _bank_order()
        with pytest.raises(ValidationError) as exc:
            order.attach_payment_intent("pi_123")
        assert "payment_method" in exc.value.messages


class TestPaymentSlip:
    def test_attach_slip(self):
        order = _bank_order()
        order.attach_payment_slip("memory://uploads/payment-slips/slip_CSH-000001_1")
        assert order.payment_slip.url.endswith("slip_CSH-000001_1")
        assert order.payment_slip.uploaded_at is not None
        assert order.payment_status == PaymentStatus.PENDING.value
        assert len(_events_of(order, PaymentSlipUploaded)) == 1

    def test_slip_rejected_for_card_orders(self):
        with pytest.raises(ValidationError) as exc:
            _card_order().attach_payment_slip("memory://slip")
        assert exc.value.messages["payment_method"] == ["Payment slip upload only allowed for bank transfer orders"]

    def test_reupload_after_rejection_returns_to_pending(self):
        order = _bank_order()
        order.attach_payment_slip("memory://slip-1")
        order.review_payment_slip(approved=False)
        assert order.payment_status == PaymentStatus.FAILED.value

        order.attach_payment_slip("memory://slip-2")
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.payment_slip.url == "memory://slip-2"

    def test_slip_rejected_once_paid(self):
        order = _bank_order()
        order.attach_payment_slip("memory://slip")
        order.review_payment_slip(approved=True)
        with pytest.raises(ValidationError):
            order.attach_payment_slip("memory://another")

    def test_approve_marks_paid_and_processing(self):
        order = _bank_order()
        order.attach_payment_slip("memory://slip")
        order.review_payment_slip(approved=True, notes="Matched bank statement", reviewed_by="admin-1")

        assert order.payment_status == PaymentStatus.PAID.value
        assert order.order_status == OrderStatus.PROCESSING.value
        assert order.notes == "Matched bank statement"
        reviewed = _events_of(order, PaymentSlipReviewed)
        assert reviewed[0].approved is True
        assert reviewed[0].reviewed_by == "admin-1"

    def test_reject_marks_failed(self):
        order = _bank_order()
        order.attach_payment_slip("memory://slip")
        order.review_payment_slip(approved=False, notes="Amount mismatch")
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.order_status == OrderStatus.PENDING.value

    def test_review_requires_slip(self):
        with pytest.raises(ValidationError) as exc:
            _bank_order().review_payment_slip(approved=True)
        assert "payment_slip" in exc.value.messages

    def test_review_requires_pending_payment(self):
        order = _bank_order()
        order.attach_payment_slip("memory://slip")
        order.review_payment_slip(approved=False)
        with pytest.raises(ValidationError):
            order.review_payment_slip(approved=True)


class TestStatusUpdates:
    def test_pending_to_processing_to_completed(self):
        order = _card_order()
        order.update_status(order_status="processing")
        assert order.processed_at is not None
        order.update_status(order_status="completed")
        assert order.order_status == OrderStatus.COMPLETED.value
        assert order.completed_at is not None
        assert [e.to_status for e in _events_of(order, OrderStatusChanged)] == ["processing", "completed"]

    def test_skipping_processing_is_rejected(self):
        with pytest.raises(ValidationError):
            _card_order().update_status(order_status="completed")

    def test_completed_is_terminal(self):
        order = _card_order()
        order.update_status(order_status="processing")
        order.update_status(order_status="completed")
        with pytest.raises(ValidationError):
            order.update_status(order_status="pending")

    def test_same_status_is_a_no_op(self):
        order = _card_order()
        order.update_status(order_status="pending", payment_status="pending")
        assert _events_of(order, OrderStatusChanged) == []

    def test_admin_marks_paid(self):
        order = _bank_order()
        order.update_status(payment_status="paid")
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.order_status == OrderStatus.PROCESSING.value
        assert len(_events_of(order, OrderPaid)) == 1

    def test_admin_marks_paid_and_completed_together(self):
        order = _card_order()
        order.update_status(payment_status="paid", order_status="completed")
        assert order.order_status == OrderStatus.COMPLETED.value

    @pytest.mark.parametrize("target", ["pending", "failed"])
    def test_paid_never_regresses(self, target):
        order = _card_order()
        order.confirm_payment()
        with pytest.raises(ValidationError):
            order.update_status(payment_status=target)
        assert order.payment_status == PaymentStatus.PAID.value

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _card_order().update_status(order_status="shipped")
        assert "order_status" in exc.value.messages

    def test_notes_are_recorded(self):
        order = _card_order()
        order.update_status(notes="Customer called")
        assert order.notes == "Customer called"
