"""Back-office endpoints. Every route requires an admin."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    DashboardResponse,
    DashboardStatsSchema,
    OrderListResponse,
    OrderResponse,
    OrderSavedResponse,
    ProductListResponse,
    ProductResponse,
    SetUserStatusRequest,
    UpdateOrderStatusRequest,
    UserListResponse,
    UserResponse,
    UserUpdatedResponse,
    VerifyPaymentSlipRequest,
)
from storefront.auth.principal import Authenticated
from storefront.catalogue.listing import sort_records
from storefront.catalogue.product import Product
from storefront.identity.account import SetUserActive
from storefront.identity.lookup import all_users
from storefront.identity.user import Role, User
from storefront.ordering.administration import UpdateOrderStatus
from storefront.ordering.lookup import all_orders, bank_transfer_orders_with_slips, orders_for_user
from storefront.ordering.order import Order
from storefront.ordering.slip import ReviewPaymentSlip
from storefront.reporting.dashboard import dashboard_stats
from storefront.shared.pagination import DEFAULT_LIMIT, newest_first, paginate
from storefront.shared.records import fetch_all

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _page_params(page: int = Query(default=1, ge=1), limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100)):
    return page, limit


def _matches_status(is_active, status):
    if not status or status == "all":
        return True
    return is_active == (status == "active")


def _contains(needle, *values):
    needle = needle.lower()
    return any(needle in (value or "").lower() for value in values)


def _order_list(orders, page, limit) -> OrderListResponse:
    result = paginate(orders, page, limit)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in result.items],
        **OrderListResponse.fields_from(result),
    )


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
@admin_router.get("/dashboard/stats", response_model=DashboardResponse)
async def dashboard() -> DashboardResponse:
    stats = dashboard_stats()
    return DashboardResponse(
        stats=DashboardStatsSchema(
            total_users=stats.total_users,
            active_users=stats.active_users,
            total_products=stats.total_products,
            total_orders=stats.total_orders,
            total_revenue=stats.total_revenue,
            pending_orders=stats.pending_orders,
            monthly_growth=stats.monthly_growth,
        ),
        recent_orders=[OrderResponse.from_order(order) for order in stats.recent_orders],
        recent_users=[UserResponse.from_user(user) for user in stats.recent_users],
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
@admin_router.get("/users", response_model=UserListResponse)
async def list_users(
    search: str | None = None,
    status: str | None = None,
    paging: tuple = Depends(_page_params),
) -> UserListResponse:
    users = [
        user
        for user in all_users()
        if user.role == Role.USER.value
        and _matches_status(user.is_active, status)
        and (not search or _contains(search, user.name, user.email))
    ]
    result = paginate(newest_first(users), *paging)
    return UserListResponse(
        users=[UserResponse.from_user(user) for user in result.items],
        **UserListResponse.fields_from(result),
    )


@admin_router.put("/users/{user_id}/status", response_model=UserUpdatedResponse)
async def set_user_status(user_id: str, body: SetUserStatusRequest) -> UserUpdatedResponse:
    current_domain.process(SetUserActive(user_id=user_id, is_active=body.is_active), asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)
    verb = "activated" if body.is_active else "deactivated"
    return UserUpdatedResponse(message=f"User {verb} successfully", user=UserResponse.from_user(user))


@admin_router.get("/users/{user_id}/orders", response_model=OrderListResponse)
async def user_orders(user_id: str, paging: tuple = Depends(_page_params)) -> OrderListResponse:
    current_domain.repository_for(User).get(user_id)
    return _order_list(newest_first(orders_for_user(user_id)), *paging)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@admin_router.get("/products", response_model=ProductListResponse)
async def list_all_products(
    search: str | None = None,
    category: str | None = None,
    status: str | None = None,
    paging: tuple = Depends(_page_params),
) -> ProductListResponse:
    products = [
        product
        for product in fetch_all(current_domain.repository_for(Product)._dao.query)
        if _matches_status(product.is_active, status)
        and (not category or category == "all" or product.category == category)
        and (not search or _contains(search, product.name, product.description))
    ]
    result = paginate(sort_records(products), *paging)
    return ProductListResponse(
        products=[ProductResponse.from_product(product) for product in result.items],
        **ProductListResponse.fields_from(result),
    )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@admin_router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status: str | None = None,
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    search: str | None = None,
    paging: tuple = Depends(_page_params),
) -> OrderListResponse:
    orders = [
        order
        for order in all_orders()
        if (not status or status == "all" or order.order_status == status)
        and (not payment_status or payment_status == "all" or order.payment_status == payment_status)
        and (not search or _contains(search, order.order_number))
    ]
    return _order_list(newest_first(orders), *paging)


@admin_router.put("/orders/{order_id}/status", response_model=OrderSavedResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderSavedResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        order_status=body.order_status,
        payment_status=body.payment_status,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderSavedResponse(message="Order updated successfully", order=OrderResponse.from_order(order))


# ---------------------------------------------------------------------------
# Payment slips
# ---------------------------------------------------------------------------
@admin_router.get("/payment-slips", response_model=OrderListResponse)
async def list_payment_slips(status: str | None = None, paging: tuple = Depends(_page_params)) -> OrderListResponse:
    orders = [
        order
        for order in bank_transfer_orders_with_slips()
        if not status or status == "all" or order.payment_status == status
    ]
    orders.sort(key=lambda order: order.payment_slip.uploaded_at, reverse=True)
    return _order_list(orders, *paging)


@admin_router.put("/payment-slips/{order_id}/verify", response_model=OrderSavedResponse)
async def verify_payment_slip(
    order_id: str,
    body: VerifyPaymentSlipRequest,
    admin: Authenticated = Depends(require_admin),
) -> OrderSavedResponse:
    command = ReviewPaymentSlip(
        order_id=order_id,
        approved=body.approved,
        notes=body.notes,
        reviewed_by=admin.user_id,
    )
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    verb = "approved" if body.approved else "rejected"
    return OrderSavedResponse(message=f"Payment {verb} successfully", order=OrderResponse.from_order(order))
