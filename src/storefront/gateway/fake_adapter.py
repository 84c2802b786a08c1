"""In-memory payment gateway for development and testing.

Intents live in a dict and can be moved to ``succeeded`` or failed by hand.
Webhooks are signed and verified exactly as Stripe does it, so the webhook
route runs the same code path against either adapter.
"""

import json
from uuid import uuid4

from storefront.gateway.port import GatewayError, PaymentGateway, PaymentIntent, WebhookEvent
from storefront.gateway.webhooks import sign_payload, verify_and_parse


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, webhook_secret: str = "whsec_test_secret") -> None:
        self.webhook_secret = webhook_secret
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []
        self.error: str | None = None

    def configure(self, error: str | None = None) -> None:
        """Make every subsequent call raise GatewayError(error); None restores normal behavior."""
        self.error = error

    def _record(self, **call) -> None:
        self.calls.append(call)
        if self.error:
            raise GatewayError(self.error)

    def create_payment_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        self._record(method="create_payment_intent", amount=amount_minor, currency=currency, metadata=metadata)

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntent(
            id=intent_id,
            status="requires_payment_method",
            amount=amount_minor,
            currency=currency,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        self._record(method="retrieve_payment_intent", intent_id=intent_id)
        try:
            return self.intents[intent_id]
        except KeyError:
            raise GatewayError(f"No such payment_intent: '{intent_id}'") from None

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        return verify_and_parse(payload, signature, self.webhook_secret)

    # -------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------
    def set_status(self, intent_id: str, status: str) -> PaymentIntent:
        current = self.intents[intent_id]
        updated = PaymentIntent(
            id=current.id,
            status=status,
            amount=current.amount,
            currency=current.currency,
            client_secret=current.client_secret,
            metadata=current.metadata,
        )
        self.intents[intent_id] = updated
        return updated

    def webhook_payload(self, intent_id: str, event_type: str, failure_message: str | None = None) -> bytes:
        """Serialize a webhook event for ``intent_id`` the way the gateway would send it."""
        intent = self.intents[intent_id]
        data = {
            "id": intent.id,
            "object": "payment_intent",
            "status": intent.status,
            "amount": intent.amount,
            "currency": intent.currency,
            "metadata": intent.metadata,
        }
        if failure_message:
            data["last_payment_error"] = {"message": failure_message}
        event = {
            "id": f"evt_fake_{uuid4().hex[:16]}",
            "object": "event",
            "type": event_type,
            "data": {"object": data},
        }
        return json.dumps(event).encode()

    def sign(self, payload: bytes, timestamp: int | None = None) -> str:
        return sign_payload(payload, self.webhook_secret, timestamp)
