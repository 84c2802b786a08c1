"""BDD tests for bank transfer payment slips."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import scenarios, when

scenarios("features/bank_transfer.feature")

SLIP_URL = "memory://uploads/payment-slips/slip.png"


@pytest.fixture()
def attempt(error):
    def _attempt(action, *args, **kwargs):
        try:
            action(*args, **kwargs)
        except ValidationError as exc:
            error["exc"] = exc

    return _attempt


@when("a payment slip is uploaded")
def _(order, attempt):
    attempt(order.attach_payment_slip, SLIP_URL)


@when("an admin approves the slip")
def _(order, attempt):
    attempt(order.review_payment_slip, approved=True, reviewed_by="admin-001")


@when("an admin rejects the slip")
def _(order, attempt):
    attempt(order.review_payment_slip, approved=False, notes="Amount does not match")
