"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    email: String(required=True, sanitize=False)
    role: String(required=True, sanitize=False)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True, sanitize=False)
    phone: String(sanitize=False)
    address: String(sanitize=False)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserActivationChanged:
    """An admin activated or deactivated an account."""

    __version__ = 1

    user_id: Identifier(required=True)
    is_active: Boolean(required=True)
    changed_at: DateTime(required=True)
