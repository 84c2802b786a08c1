"""Shopper ratings for products."""

from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class RateProduct:
    product_id: Identifier(required=True)
    rating: Float(required=True)


@storefront.command_handler(part_of=Product)
class RateProductHandler:
    @handle(RateProduct)
    def rate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.rate(command.rating)
        repo.add(product)
        return {"average": product.rating.average, "count": product.rating.count}
