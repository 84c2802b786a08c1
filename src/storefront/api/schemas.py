"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the Protean commands and
aggregates. Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    message: str


class Paginated(CamelModel):
    total_pages: int
    current_page: int
    total: int

    @staticmethod
    def fields_from(page) -> dict:
        return {"total_pages": page.total_pages, "current_page": page.page, "total": page.total}


# ---------------------------------------------------------------------------
# Users and auth
# ---------------------------------------------------------------------------
class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: str
    password: str


class LoginRequest(CamelModel):
    email: str
    password: str


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: str
    is_active: bool
    phone: str | None = None
    address: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=user.is_active,
            phone=user.phone,
            address=user.address,
            created_at=user.created_at,
        )


class AuthResponse(CamelModel):
    message: str
    token: str
    user: UserResponse


class UserEnvelope(CamelModel):
    user: UserResponse


class UserUpdatedResponse(CamelModel):
    message: str
    user: UserResponse


class UpdateProfileRequest(CamelModel):
    name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    address: str | None = Field(default=None, max_length=500)


class ChangePasswordRequest(CamelModel):
    current_password: str
    new_password: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class ProductImage(CamelModel):
    url: str
    alt: str | None = None


class SystemRequirements(CamelModel):
    os: list[str] = Field(default_factory=list)
    processor: str | None = None
    memory: str | None = None
    storage: str | None = None


class CreateProductRequest(CamelModel):
    name: str
    description: str
    price: float = Field(ge=0)
    category: str
    download_url: str
    images: list[ProductImage] = Field(default_factory=list)
    system_requirements: SystemRequirements | None = None
    version: str | None = None
    license: str | None = None
    tags: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)
    is_active: bool = True


class UpdateProductRequest(CamelModel):
    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    download_url: str | None = None
    images: list[ProductImage] | None = None
    system_requirements: SystemRequirements | None = None
    version: str | None = None
    license: str | None = None
    tags: list[str] | None = None
    features: list[str] | None = None
    is_active: bool | None = None


class RatingSchema(CamelModel):
    average: float
    count: int


class RateProductRequest(CamelModel):
    rating: float


class ProductResponse(CamelModel):
    id: str
    name: str
    description: str
    price: float
    category: str
    images: list[ProductImage]
    download_url: str
    system_requirements: SystemRequirements
    version: str
    license: str
    tags: list[str]
    features: list[str]
    is_active: bool
    downloads: int
    rating: RatingSchema
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> "ProductResponse":
        rating = product.rating
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            price=product.price,
            category=product.category,
            images=product.decoded("images"),
            download_url=product.download_url,
            system_requirements=product.decoded("system_requirements"),
            version=product.version,
            license=product.license,
            tags=product.decoded("tags"),
            features=product.decoded("features"),
            is_active=product.is_active,
            downloads=product.downloads or 0,
            rating=RatingSchema(
                average=rating.average if rating else 0.0,
                count=rating.count if rating else 0,
            ),
            created_by=str(product.created_by),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(Paginated):
    products: list[ProductResponse]


class ProductSavedResponse(CamelModel):
    message: str
    product: ProductResponse


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderItemRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1)


class GuestInfoSchema(CamelModel):
    name: str
    email: str
    phone: str | None = None


class ShippingAddressSchema(CamelModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class PlaceOrderRequest(CamelModel):
    items: list[OrderItemRequest] = Field(min_length=1)
    guest_info: GuestInfoSchema | None = None
    payment_method: Literal["card", "bank_transfer"]
    shipping_address: ShippingAddressSchema | None = None


class OrderItemResponse(CamelModel):
    product_id: str
    name: str
    price: float
    quantity: int


class PaymentSlipResponse(CamelModel):
    url: str
    uploaded_at: datetime


class OrderResponse(CamelModel):
    id: str
    order_number: str
    user_id: str | None = None
    guest_info: GuestInfoSchema | None = None
    items: list[OrderItemResponse]
    total_amount: float
    shipping_address: ShippingAddressSchema | None = None
    payment_method: str
    payment_status: str
    order_status: str
    payment_intent_id: str | None = None
    payment_slip: PaymentSlipResponse | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    processed_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        guest = order.guest_info
        address = order.shipping_address
        slip = order.payment_slip
        return cls(
            id=str(order.id),
            order_number=order.order_number,
            user_id=str(order.user_id) if order.user_id else None,
            guest_info=GuestInfoSchema(name=guest.name, email=guest.email, phone=guest.phone) if guest else None,
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    name=item.name,
                    price=item.price,
                    quantity=item.quantity,
                )
                for item in order.items
            ],
            total_amount=order.total_amount,
            shipping_address=ShippingAddressSchema(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            )
            if address
            else None,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            order_status=order.order_status,
            payment_intent_id=order.payment_intent_id,
            payment_slip=PaymentSlipResponse(url=slip.url, uploaded_at=slip.uploaded_at) if slip else None,
            notes=order.notes,
            created_at=order.created_at,
            updated_at=order.updated_at,
            processed_at=order.processed_at,
            completed_at=order.completed_at,
        )


class OrderSavedResponse(CamelModel):
    message: str
    order: OrderResponse


class OrderListResponse(Paginated):
    orders: list[OrderResponse]


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreatePaymentIntentRequest(CamelModel):
    order_id: str


class PaymentIntentResponse(CamelModel):
    client_secret: str | None
    payment_intent_id: str


class ConfirmPaymentRequest(CamelModel):
    payment_intent_id: str


class ConfirmPaymentResponse(CamelModel):
    success: bool
    payment_status: str
    order_status: str


class WebhookAck(CamelModel):
    received: bool = True


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class DashboardStatsSchema(CamelModel):
    total_users: int
    active_users: int
    total_products: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    monthly_growth: int


class DashboardResponse(CamelModel):
    stats: DashboardStatsSchema
    recent_orders: list[OrderResponse]
    recent_users: list[UserResponse]


class UserListResponse(Paginated):
    users: list[UserResponse]


class SetUserStatusRequest(CamelModel):
    is_active: bool


class UpdateOrderStatusRequest(CamelModel):
    order_status: Literal["pending", "processing", "completed"] | None = None
    payment_status: Literal["pending", "paid", "failed"] | None = None
    notes: str | None = Field(default=None, max_length=1000)


class VerifyPaymentSlipRequest(CamelModel):
    approved: bool
    notes: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------
class ContactRequest(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    subject: str | None = None
    message: str | None = None


class ContactResponse(CamelModel):
    message: str
    success: bool


class ContactMessageResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    subject: str
    message: str
    user_id: str | None = None
    submitted_at: datetime | None = None

    @classmethod
    def from_message(cls, contact) -> "ContactMessageResponse":
        return cls(
            id=str(contact.id),
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            company=contact.company,
            subject=contact.subject,
            message=contact.message,
            user_id=str(contact.user_id) if contact.user_id else None,
            submitted_at=contact.submitted_at,
        )


class ContactSubmissionsResponse(Paginated):
    submissions: list[ContactMessageResponse]
