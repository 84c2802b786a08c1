"""Order placement: command and handler.

Line items arrive as product ids and quantities; names and prices are read
from the catalogue and frozen on the order.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.identity.email import normalize_email
from storefront.ordering.numbering import issue_order_number
from storefront.ordering.order import Order


@storefront.command(part_of="Order")
class PlaceOrder:
    items = Text(required=True, sanitize=False)  # JSON: [{"product_id": ..., "quantity": ...}]
    payment_method = String(required=True, max_length=20, sanitize=False)
    shipping_address = Text(sanitize=False)  # JSON: address dict
    user_id = Identifier()
    guest_info = Text(sanitize=False)  # JSON: {"name": ..., "email": ..., "phone": ...}


def _resolve_item(repo, product_id, quantity):
    try:
        product = repo.get(product_id)
    except ObjectNotFoundError:
        product = None
    if product is None or not product.is_active:
        raise ValidationError({"items": [f"Product {product_id} not found or inactive"]})
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValidationError({"items": [f"Quantity for product {product_id} must be a positive integer"]})

    return {
        "product_id": str(product.id),
        "name": product.name,
        "price": product.price,
        "quantity": quantity,
    }


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        product_repo = current_domain.repository_for(Product)
        requested = json.loads(command.items)
        items_data = [_resolve_item(product_repo, item.get("product_id"), item.get("quantity")) for item in requested]

        guest_info = None
        if command.user_id is None:
            guest_info = json.loads(command.guest_info) if command.guest_info else None
            if guest_info:
                guest_info["email"] = normalize_email(guest_info.get("email") or "", field="guest_info")

        order = Order.place(
            order_number=issue_order_number(),
            items_data=items_data,
            payment_method=command.payment_method,
            shipping_address=json.loads(command.shipping_address) if command.shipping_address else None,
            user_id=command.user_id,
            guest_info=guest_info,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=order.total_amount,
            guest=order.is_guest_order,
        )
        return str(order.id)
