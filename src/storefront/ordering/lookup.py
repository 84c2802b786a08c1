"""Read helpers over the Order repository."""

from protean.utils.globals import current_domain

from storefront.ordering.order import Order, PaymentMethod
from storefront.shared.records import fetch_all


def _dao():
    return current_domain.repository_for(Order)._dao


def all_orders():
    return fetch_all(_dao().query)


def orders_for_user(user_id):
    return fetch_all(_dao().query.filter(user_id=str(user_id)))


def find_order_by_intent(payment_intent_id):
    orders = _dao().query.filter(payment_intent_id=payment_intent_id).all().items
    return orders[0] if orders else None


def bank_transfer_orders_with_slips():
    orders = fetch_all(_dao().query.filter(payment_method=PaymentMethod.BANK_TRANSFER.value))
    return [order for order in orders if order.payment_slip is not None]
