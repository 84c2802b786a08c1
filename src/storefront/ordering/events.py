"""Domain events for the Order aggregate.

Events are versioned, immutable facts. They are dispatched synchronously in
development and tests and through the configured broker in production.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A shopper (registered or guest) placed an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=20, sanitize=False)
    user_id = Identifier()
    guest_email = String(max_length=254, sanitize=False)
    total_amount = Float(required=True)
    payment_method = String(required=True, max_length=20, sanitize=False)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentIntentAttached:
    """A card payment intent was opened at the gateway for this order."""

    __version__ = 1

    order_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255, sanitize=False)
    attached_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    """Payment was confirmed, by the gateway or by an admin reviewing a slip.

    Raised at most once per order.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=20, sanitize=False)
    payment_method = String(required=True, max_length=20, sanitize=False)
    amount = Float(required=True)
    payment_intent_id = String(max_length=255, sanitize=False)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentFailed:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String(max_length=500, sanitize=False)
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentSlipUploaded:
    __version__ = 1

    order_id = Identifier(required=True)
    url = String(required=True, max_length=1000, sanitize=False)
    uploaded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentSlipReviewed:
    """An admin approved or rejected a bank-transfer slip."""

    __version__ = 1

    order_id = Identifier(required=True)
    approved = Boolean(required=True)
    reviewed_by = Identifier()
    notes = String(max_length=1000, sanitize=False)
    reviewed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True, max_length=20, sanitize=False)
    to_status = String(required=True, max_length=20, sanitize=False)
    changed_at = DateTime(required=True)
