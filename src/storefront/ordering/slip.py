"""Bank-transfer payment slips: upload and admin review."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.ordering.order import Order

SLIP_KEY_PREFIX = "payment-slips"
MAX_SLIP_BYTES = 5 * 1024 * 1024


def slip_storage_key(order_number, uploaded_at_ms):
    return f"{SLIP_KEY_PREFIX}/slip_{order_number}_{uploaded_at_ms}"


@storefront.command(part_of="Order")
class AttachPaymentSlip:
    order_id = Identifier(required=True)
    url = String(required=True, max_length=1000, sanitize=False)


@storefront.command(part_of="Order")
class ReviewPaymentSlip:
    order_id = Identifier(required=True)
    approved = Boolean(required=True)
    notes = String(max_length=1000, sanitize=False)
    reviewed_by = Identifier()


@storefront.command_handler(part_of=Order)
class PaymentSlipHandler:
    @handle(AttachPaymentSlip)
    def attach_payment_slip(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.attach_payment_slip(command.url)
        repo.add(order)

    @handle(ReviewPaymentSlip)
    def review_payment_slip(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.review_payment_slip(
            approved=command.approved,
            notes=command.notes,
            reviewed_by=command.reviewed_by,
        )
        repo.add(order)
        logger.info(
            "payment_slip_reviewed",
            order_id=str(order.id),
            approved=command.approved,
            reviewed_by=command.reviewed_by,
        )
