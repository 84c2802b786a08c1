"""Webhook signature verification shared by the gateway adapters.

Signatures follow Stripe's scheme: the ``Stripe-Signature`` header carries
``t=<unix time>,v1=<hex HMAC-SHA256 of "<t>.<payload>">``. Verification is
delegated to the stripe SDK.
"""

import hashlib
import hmac
import json
import time

import stripe

from storefront.gateway.port import PaymentIntent, WebhookEvent, WebhookVerificationError

DEFAULT_TOLERANCE = 300


def intent_from_payload(data: dict) -> PaymentIntent:
    return PaymentIntent(
        id=data["id"],
        status=data.get("status") or "",
        amount=int(data.get("amount") or 0),
        currency=data.get("currency") or "",
        client_secret=data.get("client_secret"),
        metadata=dict(data.get("metadata") or {}),
    )


def verify_and_parse(payload: bytes, signature: str, secret: str, tolerance: int = DEFAULT_TOLERANCE) -> WebhookEvent:
    if not signature:
        raise WebhookVerificationError("Missing signature header")

    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise WebhookVerificationError("Payload is not valid UTF-8") from exc

    try:
        stripe.WebhookSignature.verify_header(body, signature, secret, tolerance)
    except stripe.SignatureVerificationError as exc:
        raise WebhookVerificationError(str(exc)) from exc

    try:
        event = json.loads(body)
        intent_data = event["data"]["object"]
        last_error = intent_data.get("last_payment_error") or {}
        return WebhookEvent(
            id=event["id"],
            type=event["type"],
            intent=intent_from_payload(intent_data),
            failure_reason=last_error.get("message"),
        )
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise WebhookVerificationError("Malformed webhook payload") from exc


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Build a signature header for ``payload``, as the gateway would."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"
