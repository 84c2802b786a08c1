"""Profile maintenance: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100, sanitize=False)
    phone: String(max_length=30, sanitize=False)
    address: String(max_length=500, sanitize=False)


@storefront.command(part_of="User")
class ChangePassword:
    """Replace the credential hash. The caller verifies the current password."""

    user_id: Identifier(required=True)
    new_password_hash: String(required=True, max_length=255, sanitize=False)


@storefront.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(
            name=command.name,
            phone=command.phone,
            address=command.address,
        )
        repo.add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.new_password_hash)
        repo.add(user)
