"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.email import normalize_email
from storefront.identity.lookup import find_user_by_email
from storefront.identity.user import Role, User


@storefront.command(part_of="User")
class RegisterUser:
    """Create a new account. The password arrives already hashed."""

    name: String(required=True, max_length=100, sanitize=False)
    email: String(required=True, max_length=254, sanitize=False)
    password_hash: String(required=True, max_length=255, sanitize=False)
    role: String(max_length=10, default=Role.USER.value, sanitize=False)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        email = normalize_email(command.email)
        if find_user_by_email(email) is not None:
            raise ValidationError({"email": ["User with this email already exists"]})

        user = User.register(
            name=command.name,
            email=email,
            password_hash=command.password_hash,
            role=command.role or Role.USER.value,
        )
        current_domain.repository_for(User).add(user)
        return str(user.id)
