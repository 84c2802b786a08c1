"""Card payment lifecycle: commands and handler.

Gateway calls happen before these commands are dispatched, so a handler only
records outcomes the gateway has already reported.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.ordering.lookup import find_order_by_intent
from storefront.ordering.order import Order

SUCCEEDED = "succeeded"
FAILED = "failed"


@storefront.command(part_of="Order")
class AttachPaymentIntent:
    order_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=255, sanitize=False)


@storefront.command(part_of="Order")
class ConfirmPayment:
    """Record a succeeded intent. Safe to repeat."""

    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class ProcessPaymentWebhook:
    """Record the outcome of a verified gateway notification."""

    payment_intent_id = String(required=True, max_length=255, sanitize=False)
    gateway_status = String(required=True, max_length=20, sanitize=False)  # succeeded, failed
    order_id = Identifier()
    failure_reason = String(max_length=500, sanitize=False)


@storefront.command_handler(part_of=Order)
class PaymentHandler:
    @handle(AttachPaymentIntent)
    def attach_payment_intent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.attach_payment_intent(command.payment_intent_id)
        repo.add(order)

    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.confirm_payment():
            repo.add(order)
            logger.info("order_paid", order_id=str(order.id), order_number=order.order_number)
        return {"payment_status": order.payment_status, "order_status": order.order_status}

    @handle(ProcessPaymentWebhook)
    def process_webhook(self, command):
        order = self._locate(command.order_id, command.payment_intent_id)
        if order is None:
            logger.warning("webhook_order_not_found", payment_intent_id=command.payment_intent_id)
            return None

        if command.gateway_status == SUCCEEDED:
            changed = order.confirm_payment()
        else:
            changed = order.fail_payment(command.failure_reason or "Payment failed")

        if changed:
            current_domain.repository_for(Order).add(order)
        else:
            logger.info(
                "webhook_ignored",
                order_id=str(order.id),
                gateway_status=command.gateway_status,
                payment_status=order.payment_status,
            )
        return str(order.id)

    @staticmethod
    def _locate(order_id, payment_intent_id):
        if order_id:
            try:
                return current_domain.repository_for(Order).get(order_id)
            except ObjectNotFoundError:
                pass
        return find_order_by_intent(payment_intent_id)
