"""Order placement, order history and payment-slip upload."""

import json
import time

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from storefront.api.dependencies import get_principal, get_services, require_admin, require_user
from storefront.api.schemas import (
    MessageResponse,
    OrderListResponse,
    OrderResponse,
    OrderSavedResponse,
    PlaceOrderRequest,
)
from storefront.api.uploads import read_image_upload
from storefront.auth.principal import Anonymous, Authenticated, Principal
from storefront.ordering.administration import DeleteOrder
from storefront.ordering.lookup import orders_for_user
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.slip import AttachPaymentSlip, slip_storage_key
from storefront.services import Services
from storefront.shared.pagination import newest_first, paginate

logger = structlog.get_logger(__name__)

order_router = APIRouter(prefix="/orders", tags=["orders"])

ORDER_PAGE_SIZE = 10


def load_order_for(order_id, principal) -> Order:
    """Fetch an order the caller may see.

    Guest orders are reachable by id alone; owned orders only by their owner
    or an admin.
    """
    order = current_domain.repository_for(Order).get(order_id)
    if order.user_id is not None and not (principal.is_admin or order.is_owned_by(principal.user_id)):
        raise HTTPException(status_code=403, detail="Access denied")
    return order


@order_router.post("", status_code=201, response_model=OrderSavedResponse)
async def place_order(
    body: PlaceOrderRequest,
    principal: Principal = Depends(get_principal),
) -> OrderSavedResponse:
    guest_info = None
    if isinstance(principal, Anonymous) and body.guest_info is not None:
        guest_info = json.dumps(body.guest_info.model_dump())

    command = PlaceOrder(
        items=json.dumps([{"product_id": item.product_id, "quantity": item.quantity} for item in body.items]),
        payment_method=body.payment_method,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        user_id=principal.user_id,
        guest_info=guest_info,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderSavedResponse(message="Order created successfully", order=OrderResponse.from_order(order))


@order_router.get("/my-orders", response_model=OrderListResponse)
async def my_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=ORDER_PAGE_SIZE, ge=1, le=100),
    principal: Authenticated = Depends(require_user),
) -> OrderListResponse:
    result = paginate(newest_first(orders_for_user(principal.user_id)), page, limit)
    return OrderListResponse(
        orders=[OrderResponse.from_order(order) for order in result.items],
        **OrderListResponse.fields_from(result),
    )


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(
    order_id: str,
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    return OrderResponse.from_order(load_order_for(order_id, principal))


@order_router.post("/{order_id}/payment-slip", response_model=OrderSavedResponse)
async def upload_payment_slip(
    order_id: str,
    payment_slip: UploadFile | None = File(default=None, alias="paymentSlip"),
    principal: Principal = Depends(get_principal),
    services: Services = Depends(get_services),
) -> OrderSavedResponse:
    order = load_order_for(order_id, principal)
    order.ensure_can_accept_slip()

    data = await read_image_upload(payment_slip)
    key = slip_storage_key(order.order_number, int(time.time() * 1000))
    url = await run_in_threadpool(services.storage.upload, data, key, payment_slip.content_type)

    current_domain.process(AttachPaymentSlip(order_id=order_id, url=url), asynchronous=False)
    logger.info("payment_slip_uploaded", order_id=order_id, key=key)

    order = current_domain.repository_for(Order).get(order_id)
    return OrderSavedResponse(message="Payment slip uploaded successfully", order=OrderResponse.from_order(order))


@order_router.delete("/{order_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_order(order_id: str) -> MessageResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return MessageResponse(message="Order deleted successfully")
