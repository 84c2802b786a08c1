"""Gateway selection and the credentials the live gateway insists on."""

import json

import pytest
from pydantic import ValidationError
from storefront.config import DEV_WEBHOOK_SECRET, Settings
from storefront.gateway import build_gateway
from storefront.gateway.fake_adapter import FakeGateway
from storefront.gateway.port import WebhookVerificationError
from storefront.gateway.stripe_adapter import StripeGateway
from storefront.gateway.webhooks import sign_payload

LIVE = {
    "gateway": "stripe",
    "stripe_secret_key": "sk_live_abc",
    "stripe_webhook_secret": "whsec_endpoint_secret",
    "jwt_secret": "a-long-random-secret",
}


def _settings(**values):
    return Settings(_env_file=None, **values)


def test_development_defaults_use_the_fake_gateway():
    assert isinstance(build_gateway(_settings()), FakeGateway)


def test_live_gateway_with_real_secrets():
    assert isinstance(build_gateway(_settings(**LIVE)), StripeGateway)


@pytest.mark.parametrize(
    "overrides",
    [
        {"stripe_webhook_secret": DEV_WEBHOOK_SECRET},
        {"stripe_webhook_secret": ""},
        {"stripe_secret_key": ""},
        {"stripe_secret_key": "pk_live_abc"},
        {"jwt_secret": "change-me"},
    ],
)
def test_live_gateway_rejects_development_secrets(overrides):
    with pytest.raises(ValidationError):
        _settings(**{**LIVE, **overrides})


def test_live_gateway_rejects_webhooks_signed_with_the_development_secret():
    gateway = build_gateway(_settings(**LIVE))
    intent = {"id": "pi_1", "status": "succeeded", "amount": 100, "currency": "usd"}
    payload = json.dumps({"id": "evt_1", "type": "payment_intent.succeeded", "data": {"object": intent}}).encode()

    with pytest.raises(WebhookVerificationError):
        gateway.construct_webhook_event(payload, sign_payload(payload, DEV_WEBHOOK_SECRET))


def test_stripe_gateway_requires_a_webhook_secret():
    with pytest.raises(ValueError):
        StripeGateway(api_key="sk_live_abc", webhook_secret="")
