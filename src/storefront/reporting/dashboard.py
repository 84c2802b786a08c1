"""Back-office dashboard figures computed over users, products and orders."""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.identity.lookup import all_users
from storefront.identity.user import Role
from storefront.ordering.lookup import all_orders
from storefront.ordering.order import OrderStatus, PaymentStatus
from storefront.shared.records import fetch_all

RECENT_LIMIT = 5


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    active_users: int
    total_products: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    monthly_growth: int
    recent_orders: list
    recent_users: list


def _month_start(moment):
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _previous_month_start(moment):
    start = _month_start(moment)
    if start.month == 1:
        return start.replace(year=start.year - 1, month=12)
    return start.replace(month=start.month - 1)


def _as_utc(moment):
    return moment.replace(tzinfo=UTC) if moment.tzinfo is None else moment


def monthly_growth(paid_orders, now=None) -> int:
    """Percent change of paid revenue, this month against last month.

    Last month's revenue counts as 1 when it was zero, so a first month of
    sales reports a large growth figure rather than dividing by zero.
    """
    now = now or datetime.now(UTC)
    current_start = _month_start(now)
    previous_start = _previous_month_start(now)

    current = previous = 0.0
    for order in paid_orders:
        created = _as_utc(order.created_at)
        if created >= current_start:
            current += order.total_amount
        elif created >= previous_start:
            previous += order.total_amount

    previous = previous or 1
    return round((current - previous) / previous * 100)


def _newest(records, limit=RECENT_LIMIT):
    return sorted(records, key=lambda record: _as_utc(record.created_at), reverse=True)[:limit]


def dashboard_stats(now=None) -> DashboardStats:
    users = all_users()
    orders = all_orders()
    active_products = fetch_all(current_domain.repository_for(Product)._dao.query.filter(is_active=True))
    paid = [order for order in orders if order.payment_status == PaymentStatus.PAID.value]
    customers = [user for user in users if user.role == Role.USER.value]

    return DashboardStats(
        total_users=len(customers),
        active_users=sum(1 for user in customers if user.is_active),
        total_products=len(active_products),
        total_orders=len(orders),
        total_revenue=sum(order.total_amount for order in paid),
        pending_orders=sum(1 for order in orders if order.order_status == OrderStatus.PENDING.value),
        monthly_growth=monthly_growth(paid, now),
        recent_orders=_newest(orders),
        recent_users=_newest(customers),
    )
