"""Public product listing: filtering, search, sorting and pagination.

The repository only supports exact-match filters, so keyword search and
ordering run over the fetched records.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.shared.pagination import Page, paginate
from storefront.shared.records import fetch_all

DEFAULT_PAGE_SIZE = 12
DEFAULT_SORT = "-createdAt"

# Public sort keys mapped to Product attributes
SORT_FIELDS = {
    "createdAt": "created_at",
    "created_at": "created_at",
    "price": "price",
    "name": "name",
    "downloads": "downloads",
    "rating": "rating",
}


def _sort_key(attribute):
    def key(product):
        if attribute == "rating":
            return product.rating.average if product.rating else 0.0
        value = getattr(product, attribute)
        if value is None:
            return ""
        return value.lower() if isinstance(value, str) else value

    return key


def sort_records(records, sort=DEFAULT_SORT):
    """Sort by a public key, ``-`` prefix meaning descending. Unknown keys fall back to newest first."""
    sort = sort or DEFAULT_SORT
    descending = sort.startswith("-")
    attribute = SORT_FIELDS.get(sort.lstrip("-"))
    if attribute is None:
        attribute, descending = "created_at", True
    return sorted(records, key=_sort_key(attribute), reverse=descending)


def list_products(
    category=None,
    search=None,
    sort=DEFAULT_SORT,
    page=1,
    limit=DEFAULT_PAGE_SIZE,
    include_inactive=False,
) -> Page:
    dao = current_domain.repository_for(Product)._dao
    if include_inactive:
        records = fetch_all(dao.query)
    else:
        records = fetch_all(dao.query.filter(is_active=True))

    if category and category != "all":
        records = [product for product in records if product.category == category]
    if search:
        records = [product for product in records if product.matches(search)]

    return paginate(sort_records(records, sort), page, limit)


def get_product(product_id, include_inactive=False):
    """Fetch one product. Inactive products are hidden from the public."""
    product = current_domain.repository_for(Product).get(product_id)
    if not include_inactive and not product.is_active:
        raise ObjectNotFoundError({"_entity": f"Product with id {product_id} does not exist"})
    return product
