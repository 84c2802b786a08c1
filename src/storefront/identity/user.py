"""User aggregate: a registered account with a role and an active flag."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from storefront.domain import storefront
from storefront.identity.email import normalize_email


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@storefront.aggregate
class User:
    """An account holder on the storefront.

    Credentials are stored as a bcrypt hash only; hashing happens before a
    command is built so plain passwords never enter the domain.
    """

    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=255, sanitize=False)
    role: String(choices=Role, default=Role.USER.value, sanitize=False)
    is_active: Boolean(default=True)
    phone: String(max_length=30, sanitize=False)
    address: String(max_length=500, sanitize=False)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, name, email, password_hash, role=Role.USER.value):
        from storefront.identity.events import UserRegistered

        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Name is required"]})

        email = normalize_email(email)
        now = datetime.now(UTC)

        user = cls(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=name,
                email=email,
                role=role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    def update_profile(self, name=None, phone=None, address=None):
        from storefront.identity.events import UserProfileUpdated

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": ["Name cannot be blank"]})
            self.name = name
        if phone is not None:
            self.phone = phone
        if address is not None:
            self.address = address

        self.updated_at = datetime.now(UTC)
        self.raise_(
            UserProfileUpdated(
                user_id=self.id,
                name=self.name,
                phone=self.phone,
                address=self.address,
            )
        )

    def change_password(self, new_password_hash):
        from storefront.identity.events import PasswordChanged

        now = datetime.now(UTC)
        self.password_hash = new_password_hash
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    def set_active(self, is_active):
        from storefront.identity.events import UserActivationChanged

        if self.is_active == is_active:
            return

        now = datetime.now(UTC)
        self.is_active = is_active
        self.updated_at = now
        self.raise_(UserActivationChanged(user_id=self.id, is_active=is_active, changed_at=now))
