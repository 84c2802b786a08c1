"""Order aggregate: line items, ownership and the payment lifecycle.

An order's lifecycle is the pair (payment_status, order_status):

    pending/pending  --pay-->  paid/processing  --complete-->  paid/completed
          |    ^
        fail   | new intent or slip re-upload
          v    |
       failed/pending  --pay-->  paid/processing

Payment moves forward only: once ``paid`` it never changes again, so late or
duplicated gateway notifications are harmless.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.ordering.events import (
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
    PaymentFailed,
    PaymentIntentAttached,
    PaymentSlipReviewed,
    PaymentSlipUploaded,
)

ORDER_NUMBER_PREFIX = "CSH-"


class PaymentMethod(Enum):
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: set(),  # Terminal
}

_ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
}


def format_order_number(sequence):
    return f"{ORDER_NUMBER_PREFIX}{sequence:06d}"


def _coerce(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError({field: [f"Invalid value '{value}'"]}) from None


def parse_order_number(order_number):
    """Return the numeric part of an order number, or 0 if it has none."""
    if not order_number or not order_number.startswith(ORDER_NUMBER_PREFIX):
        return 0
    digits = order_number[len(ORDER_NUMBER_PREFIX) :]
    return int(digits) if digits.isdigit() else 0


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    street = String(max_length=255, sanitize=False)
    city = String(max_length=100, sanitize=False)
    state = String(max_length=100, sanitize=False)
    zip_code = String(max_length=20, sanitize=False)
    country = String(max_length=100, sanitize=False)


@storefront.value_object(part_of="Order")
class GuestInfo:
    """Contact details for an order placed without an account."""

    name = String(required=True, max_length=100, sanitize=False)
    email = String(required=True, max_length=254, sanitize=False)
    phone = String(max_length=30, sanitize=False)


@storefront.value_object(part_of="Order")
class PaymentSlip:
    """A bank-transfer receipt image uploaded by the shopper."""

    url = String(required=True, max_length=1000, sanitize=False)
    uploaded_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased product with its name and price captured at order time."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=100, sanitize=False)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True, sanitize=False)
    user_id = Identifier()
    guest_info = ValueObject(GuestInfo)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(required=True, choices=PaymentMethod, sanitize=False)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value, sanitize=False)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value, sanitize=False)
    payment_intent_id = String(max_length=255, sanitize=False)
    payment_slip = ValueObject(PaymentSlip)
    notes = String(max_length=1000, sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()
    processed_at = DateTime()
    completed_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, order_number, items_data, payment_method, shipping_address=None, user_id=None, guest_info=None):
        """Create an order from resolved line items.

        Args:
            order_number: The next ``CSH-`` number.
            items_data: List of dicts with product_id, name, price, quantity.
            payment_method: ``card`` or ``bank_transfer``.
            shipping_address: Dict with street, city, state, zip_code, country.
            user_id: Owner, when the shopper is signed in.
            guest_info: Dict with name, email, phone, for guest checkout.
        """
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})
        if user_id is None and not guest_info:
            raise ValidationError({"guest_info": ["Guest information is required for guest orders"]})

        items = [
            OrderItem(
                product_id=item["product_id"],
                name=item["name"],
                price=item["price"],
                quantity=item["quantity"],
            )
            for item in items_data
        ]
        total = sum(item.line_total for item in items)
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            guest_info=GuestInfo(**guest_info) if user_id is None else None,
            items=items,
            total_amount=total,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            payment_method=payment_method,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id) if user_id else None,
                guest_email=order.guest_info.email if order.guest_info else None,
                total_amount=total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID.value

    @property
    def is_guest_order(self):
        return self.user_id is None

    @property
    def amount_minor(self):
        """Total in the currency's minor unit (cents)."""
        return round(self.total_amount * 100)

    def is_owned_by(self, user_id):
        return self.user_id is not None and str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_payment_transition(self, target):
        current = PaymentStatus(self.payment_status)
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot change payment status from {current.value} to {target.value}"]}
            )

    def _assert_order_transition(self, target):
        current = OrderStatus(self.order_status)
        if target not in _ORDER_TRANSITIONS[current]:
            raise ValidationError({"order_status": [f"Cannot change order status from {current.value} to {target.value}"]})

    def _assert_payment_method(self, method, message):
        if self.payment_method != method.value:
            raise ValidationError({"payment_method": [message]})

    def _assert_not_paid(self):
        if self.is_paid:
            raise ValidationError({"payment_status": ["Order is already paid"]})

    def _change_order_status(self, target, now):
        previous = self.order_status
        self._assert_order_transition(target)
        self.order_status = target.value
        if target == OrderStatus.PROCESSING:
            self.processed_at = now
        elif target == OrderStatus.COMPLETED:
            self.completed_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=previous,
                to_status=target.value,
                changed_at=now,
            )
        )

    def _mark_paid(self, now):
        self._assert_payment_transition(PaymentStatus.PAID)
        self.payment_status = PaymentStatus.PAID.value
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                order_number=self.order_number,
                payment_method=self.payment_method,
                amount=self.total_amount,
                payment_intent_id=self.payment_intent_id,
                paid_at=now,
            )
        )
        if self.order_status == OrderStatus.PENDING.value:
            self._change_order_status(OrderStatus.PROCESSING, now)

    def _mark_failed(self, reason, now):
        self._assert_payment_transition(PaymentStatus.FAILED)
        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = now
        self.raise_(PaymentFailed(order_id=str(self.id), reason=reason, failed_at=now))

    # -------------------------------------------------------------------
    # Card payments
    # -------------------------------------------------------------------
    def ensure_can_accept_intent(self):
        self._assert_payment_method(PaymentMethod.CARD, "Payment intents are only used for card orders")
        self._assert_not_paid()

    def attach_payment_intent(self, payment_intent_id):
        self.ensure_can_accept_intent()

        now = datetime.now(UTC)
        if self.payment_status == PaymentStatus.FAILED.value:
            self.payment_status = PaymentStatus.PENDING.value
        self.payment_intent_id = payment_intent_id
        self.updated_at = now
        self.raise_(
            PaymentIntentAttached(
                order_id=str(self.id),
                payment_intent_id=payment_intent_id,
                attached_at=now,
            )
        )

    def confirm_payment(self):
        """Mark the order paid. Returns False when it already was."""
        if self.is_paid:
            return False
        self._mark_paid(datetime.now(UTC))
        return True

    def fail_payment(self, reason=None):
        """Mark the payment failed. Returns False when nothing changed.

        A failure reported after the order is paid is ignored.
        """
        if self.payment_status != PaymentStatus.PENDING.value:
            return False
        self._mark_failed(reason, datetime.now(UTC))
        return True

    # -------------------------------------------------------------------
    # Bank transfers
    # -------------------------------------------------------------------
    def ensure_can_accept_slip(self):
        self._assert_payment_method(
            PaymentMethod.BANK_TRANSFER, "Payment slip upload only allowed for bank transfer orders"
        )
        self._assert_not_paid()

    def attach_payment_slip(self, url):
        self.ensure_can_accept_slip()

        now = datetime.now(UTC)
        self.payment_slip = PaymentSlip(url=url, uploaded_at=now)
        self.payment_status = PaymentStatus.PENDING.value
        self.updated_at = now
        self.raise_(PaymentSlipUploaded(order_id=str(self.id), url=url, uploaded_at=now))

    def review_payment_slip(self, approved, notes=None, reviewed_by=None):
        if self.payment_slip is None:
            raise ValidationError({"payment_slip": ["No payment slip has been uploaded"]})
        if self.payment_status != PaymentStatus.PENDING.value:
            raise ValidationError({"payment_status": ["Only pending payment slips can be reviewed"]})

        now = datetime.now(UTC)
        if notes:
            self.notes = notes
        if approved:
            self._mark_paid(now)
        else:
            self._mark_failed("Payment slip rejected", now)
        self.raise_(
            PaymentSlipReviewed(
                order_id=str(self.id),
                approved=bool(approved),
                reviewed_by=str(reviewed_by) if reviewed_by else None,
                notes=notes,
                reviewed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_status(self, order_status=None, payment_status=None, notes=None):
        """Admin status change. Either status may be omitted; unchanged values are no-ops."""
        now = datetime.now(UTC)

        if payment_status and payment_status != self.payment_status:
            target = _coerce(PaymentStatus, payment_status, "payment_status")
            if target == PaymentStatus.PAID:
                self._mark_paid(now)
            elif target == PaymentStatus.FAILED:
                self._mark_failed("Marked failed by admin", now)
            else:
                self._assert_payment_transition(target)
                self.payment_status = target.value

        if order_status and order_status != self.order_status:
            self._change_order_status(_coerce(OrderStatus, order_status, "order_status"), now)

        if notes:
            self.notes = notes
        self.updated_at = now
