"""Payment gateway factory.

``build_gateway`` picks the adapter named in settings:
- FakeGateway for development and testing
- StripeGateway for production
"""

from storefront.gateway.fake_adapter import FakeGateway
from storefront.gateway.port import PaymentGateway
from storefront.gateway.stripe_adapter import StripeGateway


def build_gateway(settings) -> PaymentGateway:
    if settings.gateway == "stripe":
        return StripeGateway(api_key=settings.stripe_secret_key, webhook_secret=settings.stripe_webhook_secret)
    if settings.gateway == "fake":
        return FakeGateway(webhook_secret=settings.stripe_webhook_secret)
    raise ValueError(f"Unknown payment gateway '{settings.gateway}'")
