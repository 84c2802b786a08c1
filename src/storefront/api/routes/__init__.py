"""Storefront API routers."""

from storefront.api.routes.admin import admin_router
from storefront.api.routes.auth import auth_router
from storefront.api.routes.contact import contact_router
from storefront.api.routes.orders import order_router
from storefront.api.routes.payments import payment_router
from storefront.api.routes.products import product_router
from storefront.api.routes.users import users_router

__all__ = [
    "admin_router",
    "auth_router",
    "contact_router",
    "order_router",
    "payment_router",
    "product_router",
    "users_router",
]
