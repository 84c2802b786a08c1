"""Payment gateway port (abstract interface).

Defines the contract that gateway adapters implement so routes can swap
between FakeGateway (development and tests) and StripeGateway (production)
without any change to the ordering code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class GatewayError(Exception):
    """The gateway could not be reached or rejected the request."""


class WebhookVerificationError(Exception):
    """A webhook payload did not carry a valid signature."""


@dataclass(frozen=True)
class PaymentIntent:
    """A gateway-side payment attempt for one order."""

    id: str
    status: str
    amount: int
    currency: str
    client_secret: str | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


@dataclass(frozen=True)
class WebhookEvent:
    """A verified gateway notification about a payment intent."""

    id: str
    type: str
    intent: PaymentIntent
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        """Open a payment intent for ``amount_minor`` (cents) in ``currency``."""
        ...

    @abstractmethod
    def retrieve_payment_intent(self, intent_id: str) -> PaymentIntent:
        """Fetch the current state of an intent."""
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify ``signature`` against the raw ``payload`` and parse it.

        Raises WebhookVerificationError when the signature is missing or wrong.
        """
        ...
