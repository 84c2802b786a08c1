"""Account activation: admin command and handler."""

from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.user import User


@storefront.command(part_of="User")
class SetUserActive:
    user_id: Identifier(required=True)
    is_active: Boolean(required=True)


@storefront.command_handler(part_of=User)
class AccountHandler:
    @handle(SetUserActive)
    def set_user_active(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_active(command.is_active)
        repo.add(user)
