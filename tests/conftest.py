import json
import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch):
    import storefront.identity.credentials as credentials

    monkeypatch.setattr(credentials, "BCRYPT_ROUNDS", 4)


# ---------------------------------------------------------------------------
# Collaborators and HTTP client
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from storefront.config import Settings

    return Settings(
        _env_file=None,
        jwt_secret="test-secret",
        gateway="fake",
        storage="memory",
        smtp_user="",
        smtp_password="",
        stripe_webhook_secret="whsec_test_secret",
        admin_email="admin@storefront.test",
    )


@pytest.fixture()
def services(settings):
    from storefront.services import build_services

    return build_services(settings)


@pytest.fixture()
def client(services):
    from fastapi.testclient import TestClient
    from storefront.api import create_app

    return TestClient(create_app(services))


@pytest.fixture()
def auth_headers(services):
    def _headers(user):
        return {"Authorization": f"Bearer {services.tokens.issue(user.id)}"}

    return _headers


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user():
    from protean import current_domain
    from storefront.identity.credentials import hash_password
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import User

    def _make(name="Jane Shopper", email="jane@example.com", password="secret123", role="user"):
        user_id = current_domain.process(
            RegisterUser(name=name, email=email, password_hash=hash_password(password), role=role),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _make


@pytest.fixture()
def customer(make_user):
    return make_user()


@pytest.fixture()
def admin(make_user):
    return make_user(name="Store Admin", email="admin@example.com", password="admin-secret", role="admin")


@pytest.fixture()
def make_product(make_user):
    from protean import current_domain
    from storefront.catalogue.management import CreateProduct
    from storefront.catalogue.product import Product

    owner = {}

    def _make(**overrides):
        if "created_by" not in overrides and "user" not in owner:
            owner["user"] = make_user(name="Catalogue Owner", email="owner@example.com", role="admin")
        values = {
            "name": "Office Suite Pro",
            "description": "Productivity suite with lifetime license",
            "price": 49.99,
            "category": "software & apps",
            "download_url": "https://downloads.example.com/office-suite.zip",
            "created_by": str(owner["user"].id) if "user" in owner else None,
            "tags": json.dumps(["office", "productivity"]),
        }
        values.update(overrides)
        product_id = current_domain.process(CreateProduct(**values), asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def make_order(customer):
    from protean import current_domain
    from storefront.ordering.order import Order
    from storefront.ordering.placement import PlaceOrder

    def _make(products, quantities=None, payment_method="card", user=customer, guest_info=None):
        quantities = quantities or [1] * len(products)
        items = [{"product_id": str(p.id), "quantity": q} for p, q in zip(products, quantities, strict=True)]
        order_id = current_domain.process(
            PlaceOrder(
                items=json.dumps(items),
                payment_method=payment_method,
                shipping_address=json.dumps({"street": "1 Main St", "city": "Colombo", "country": "LK"}),
                user_id=str(user.id) if user is not None else None,
                guest_info=json.dumps(guest_info) if guest_info else None,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Order).get(order_id)

    return _make
