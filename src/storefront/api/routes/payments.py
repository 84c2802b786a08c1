"""Card payments: payment intents, client-side confirmation and gateway webhooks."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from storefront.api.dependencies import get_services, require_user
from storefront.api.schemas import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    WebhookAck,
)
from storefront.auth.principal import Authenticated
from storefront.gateway.port import WebhookVerificationError
from storefront.ordering.lookup import find_order_by_intent
from storefront.ordering.order import Order
from storefront.ordering.payment import FAILED, SUCCEEDED, AttachPaymentIntent, ConfirmPayment, ProcessPaymentWebhook
from storefront.services import Services

logger = structlog.get_logger(__name__)

payment_router = APIRouter(prefix="/payments", tags=["payments"])

# Gateway event types mapped to the outcome they report
WEBHOOK_OUTCOMES = {
    "payment_intent.succeeded": SUCCEEDED,
    "payment_intent.payment_failed": FAILED,
}


def _order_for_intent(intent) -> Order:
    order_id = intent.metadata.get("order_id")
    if order_id:
        return current_domain.repository_for(Order).get(order_id)
    order = find_order_by_intent(intent.id)
    if order is None:
        raise ObjectNotFoundError({"_entity": f"No order for payment intent {intent.id}"})
    return order


@payment_router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: CreatePaymentIntentRequest,
    principal: Authenticated = Depends(require_user),
    services: Services = Depends(get_services),
) -> PaymentIntentResponse:
    order = current_domain.repository_for(Order).get(body.order_id)
    if not order.is_owned_by(principal.user_id):
        raise HTTPException(status_code=403, detail="Access denied")
    order.ensure_can_accept_intent()

    intent = await run_in_threadpool(
        services.gateway.create_payment_intent,
        order.amount_minor,
        services.settings.currency,
        {"order_id": str(order.id), "order_number": order.order_number},
    )
    current_domain.process(
        AttachPaymentIntent(order_id=str(order.id), payment_intent_id=intent.id),
        asynchronous=False,
    )

    logger.info("payment_intent_created", order_id=str(order.id), payment_intent_id=intent.id, amount=intent.amount)
    return PaymentIntentResponse(client_secret=intent.client_secret, payment_intent_id=intent.id)


@payment_router.post("/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    body: ConfirmPaymentRequest,
    principal: Authenticated = Depends(require_user),
    services: Services = Depends(get_services),
) -> ConfirmPaymentResponse:
    intent = await run_in_threadpool(services.gateway.retrieve_payment_intent, body.payment_intent_id)
    order = _order_for_intent(intent)
    if not (principal.is_admin or order.is_owned_by(principal.user_id)):
        raise HTTPException(status_code=403, detail="Access denied")

    if not intent.succeeded:
        return ConfirmPaymentResponse(
            success=False,
            payment_status=order.payment_status,
            order_status=order.order_status,
        )

    result = current_domain.process(ConfirmPayment(order_id=str(order.id)), asynchronous=False)
    return ConfirmPaymentResponse(
        success=True,
        payment_status=result["payment_status"],
        order_status=result["order_status"],
    )


@payment_router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(request: Request, services: Services = Depends(get_services)) -> WebhookAck:
    """Receive gateway notifications. The raw body is needed for signature checks."""
    payload = await request.body()
    signature = request.headers.get("Stripe-Signature", "")

    try:
        event = services.gateway.construct_webhook_event(payload, signature)
    except WebhookVerificationError as exc:
        logger.warning("webhook_signature_rejected", error=str(exc))
        raise HTTPException(status_code=400, detail=f"Webhook Error: {exc}") from exc

    outcome = WEBHOOK_OUTCOMES.get(event.type)
    if outcome is None:
        logger.info("webhook_event_skipped", event_id=event.id, event_type=event.type)
        return WebhookAck(received=True)

    current_domain.process(
        ProcessPaymentWebhook(
            payment_intent_id=event.intent.id,
            gateway_status=outcome,
            order_id=event.intent.metadata.get("order_id"),
            failure_reason=event.failure_reason,
        ),
        asynchronous=False,
    )
    logger.info("webhook_processed", event_id=event.id, event_type=event.type, payment_intent_id=event.intent.id)
    return WebhookAck(received=True)
