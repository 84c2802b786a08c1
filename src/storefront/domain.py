"""Storefront domain: accounts, catalogue, orders, payments and back-office.

A single bounded context: the order/payment lifecycle is the only part with
multi-step state transitions, everything else is CRUD over the repository
layer. External collaborators (payment gateway, object storage, mailer) live
outside the domain and are injected at the API edge.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
