"""Stripe payment gateway adapter, backed by the stripe-python SDK."""

import stripe
import structlog

from storefront.gateway.port import GatewayError, PaymentGateway, PaymentIntent, WebhookEvent
from storefront.gateway.webhooks import DEFAULT_TOLERANCE, verify_and_parse

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production gateway. The API key is passed per call, never set globally."""

    def __init__(self, api_key: str, webhook_secret: str, tolerance: int = DEFAULT_TOLERANCE) -> None:
        if not webhook_secret:
            raise ValueError("Stripe gateway requires a webhook signing secret")
        self.api_key = api_key
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    @staticmethod
    def _to_intent(intent) -> PaymentIntent:
        return PaymentIntent(
            id=intent.id,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
            client_secret=intent.client_secret,
            metadata=dict(intent.metadata or {}),
        )

    def create_payment_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency,
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as exc:
            logger.error("stripe_create_intent_failed", error=str(exc), metadata=metadata)
            raise GatewayError(exc.user_message or str(exc)) from exc
        return self._to_intent(intent)

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.error("stripe_retrieve_intent_failed", error=str(exc), payment_intent_id=intent_id)
            raise GatewayError(exc.user_message or str(exc)) from exc
        return self._to_intent(intent)

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        return verify_and_parse(payload, signature, self.webhook_secret, self.tolerance)
