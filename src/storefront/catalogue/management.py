"""Product administration: create, update and delete commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import logger, storefront


def _decode(raw):
    return json.loads(raw) if raw else None


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=100, sanitize=False)
    description: String(required=True, max_length=1000, sanitize=False)
    price: Float(required=True)
    category: String(required=True, max_length=50, sanitize=False)
    download_url: String(required=True, max_length=1000, sanitize=False)
    created_by: Identifier(required=True)
    images: Text(sanitize=False)
    system_requirements: Text(sanitize=False)
    version: String(max_length=30, sanitize=False)
    license: String(max_length=20, sanitize=False)
    tags: Text(sanitize=False)
    features: Text(sanitize=False)
    is_active: Boolean(default=True)


@storefront.command(part_of="Product")
class UpdateProduct:
    """Partial update. Unset fields are left alone."""

    product_id: Identifier(required=True)
    name: String(max_length=100, sanitize=False)
    description: String(max_length=1000, sanitize=False)
    price: Float()
    category: String(max_length=50, sanitize=False)
    download_url: String(max_length=1000, sanitize=False)
    images: Text(sanitize=False)
    system_requirements: Text(sanitize=False)
    version: String(max_length=30, sanitize=False)
    license: String(max_length=20, sanitize=False)
    tags: Text(sanitize=False)
    features: Text(sanitize=False)
    is_active: Boolean()


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            download_url=command.download_url,
            created_by=command.created_by,
            images=_decode(command.images),
            system_requirements=_decode(command.system_requirements),
            version=command.version,
            license=command.license,
            tags=_decode(command.tags),
            features=_decode(command.features),
            is_active=command.is_active,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            download_url=command.download_url,
            images=_decode(command.images),
            system_requirements=_decode(command.system_requirements),
            version=command.version,
            license=command.license,
            tags=_decode(command.tags),
            features=_decode(command.features),
            is_active=command.is_active,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("product_deleted", product_id=command.product_id)
