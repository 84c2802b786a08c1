"""Public catalogue browsing, ratings and admin product maintenance."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.dependencies import require_admin
from storefront.api.schemas import (
    CreateProductRequest,
    MessageResponse,
    ProductListResponse,
    ProductResponse,
    ProductSavedResponse,
    RateProductRequest,
    UpdateProductRequest,
)
from storefront.auth.principal import Authenticated
from storefront.catalogue.listing import DEFAULT_PAGE_SIZE, DEFAULT_SORT, get_product, list_products
from storefront.catalogue.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.catalogue.product import Category, Product
from storefront.catalogue.rating import RateProduct
from storefront.shared.records import fetch_all

product_router = APIRouter(prefix="/products", tags=["products"])


def _json_or_none(value):
    return json.dumps(value) if value is not None else None


@product_router.get("", response_model=ProductListResponse)
async def browse_products(
    category: str | None = None,
    search: str | None = None,
    sort: str = DEFAULT_SORT,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100),
) -> ProductListResponse:
    result = list_products(category=category, search=search, sort=sort, page=page, limit=limit)
    return ProductListResponse(
        products=[ProductResponse.from_product(product) for product in result.items],
        **ProductListResponse.fields_from(result),
    )


@product_router.get("/meta/categories", response_model=list[str])
async def product_categories() -> list[str]:
    """Distinct categories that have at least one active product, in catalogue order."""
    products = fetch_all(current_domain.repository_for(Product)._dao.query.filter(is_active=True))
    in_use = {product.category for product in products}
    return [category.value for category in Category if category.value in in_use]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def product_detail(product_id: str) -> ProductResponse:
    return ProductResponse.from_product(get_product(product_id))


@product_router.post("/{product_id}/rate", response_model=ProductResponse)
async def rate_product(product_id: str, body: RateProductRequest) -> ProductResponse:
    get_product(product_id)
    current_domain.process(RateProduct(product_id=product_id, rating=body.rating), asynchronous=False)
    return ProductResponse.from_product(get_product(product_id))


@product_router.post("", status_code=201, response_model=ProductSavedResponse)
async def create_product(
    body: CreateProductRequest,
    admin: Authenticated = Depends(require_admin),
) -> ProductSavedResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        download_url=body.download_url,
        created_by=admin.user_id,
        images=json.dumps([image.model_dump() for image in body.images]),
        system_requirements=_json_or_none(body.system_requirements.model_dump() if body.system_requirements else None),
        version=body.version,
        license=body.license,
        tags=json.dumps(body.tags),
        features=json.dumps(body.features),
        is_active=body.is_active,
    )
    product_id = current_domain.process(command, asynchronous=False)
    product = get_product(product_id, include_inactive=True)
    return ProductSavedResponse(message="Product created successfully", product=ProductResponse.from_product(product))


@product_router.put("/{product_id}", response_model=ProductSavedResponse, dependencies=[Depends(require_admin)])
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductSavedResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        category=body.category,
        download_url=body.download_url,
        images=_json_or_none([image.model_dump() for image in body.images] if body.images is not None else None),
        system_requirements=_json_or_none(body.system_requirements.model_dump() if body.system_requirements else None),
        version=body.version,
        license=body.license,
        tags=_json_or_none(body.tags),
        features=_json_or_none(body.features),
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    product = get_product(product_id, include_inactive=True)
    return ProductSavedResponse(message="Product updated successfully", product=ProductResponse.from_product(product))


@product_router.delete("/{product_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def delete_product(product_id: str) -> MessageResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(message="Product permanently deleted")
