"""Shared BDD fixtures and step definitions for order payments."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.ordering.events import OrderPaid
from storefront.ordering.order import Order


@pytest.fixture()
def error():
    """Container for a captured validation error."""
    return {"exc": None}


def _attempt(error, action):
    try:
        action()
    except ValidationError as exc:
        error["exc"] = exc


def _place(payment_method, quantity, price):
    return Order.place(
        order_number="CSH-000001",
        items_data=[{"product_id": "prod-001", "name": "Office Suite Pro", "price": price, "quantity": quantity}],
        payment_method=payment_method,
        user_id="user-001",
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a card order for {quantity:d} licenses at {price:f}"), target_fixture="order")
def _(quantity, price):
    order = _place("card", quantity, price)
    order.attach_payment_intent("pi_001")
    return order


@given(parsers.cfparse("a bank transfer order for {quantity:d} license at {price:f}"), target_fixture="order")
def _(quantity, price):
    return _place("bank_transfer", quantity, price)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('an admin marks the order "{status}"'))
def _(order, error, status):
    _attempt(error, lambda: order.update_status(order_status=status))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the payment status is "{status}"'))
def _(order, status):
    assert order.payment_status == status


@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert order.order_status == status


@then(parsers.cfparse('the change is rejected for "{field}"'))
def _(error, field):
    assert error["exc"] is not None
    assert field in error["exc"].messages


@then("an OrderPaid event is raised")
def _(order):
    assert any(isinstance(event, OrderPaid) for event in order._events)


@then(parsers.cfparse("exactly {count:d} OrderPaid event is raised"))
def _(order, count):
    assert len([event for event in order._events if isinstance(event, OrderPaid)]) == count
