"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    category: String(required=True, sanitize=False)
    price: Float(required=True)
    created_by: Identifier(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    changed_fields: String(required=True, sanitize=False)  # comma-separated field names
    updated_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductRated:
    """A shopper submitted a 1-5 rating; carries the recomputed aggregate."""

    __version__ = 1

    product_id: Identifier(required=True)
    rating: Float(required=True)
    new_average: Float(required=True)
    new_count: Integer(required=True)
