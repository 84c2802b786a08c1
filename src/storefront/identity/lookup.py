"""Read helpers over the User repository."""

from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.shared.records import fetch_all


def find_user_by_email(email):
    users = current_domain.repository_for(User)._dao.query.filter(email=email.strip().lower()).all().items
    return users[0] if users else None


def all_users():
    return fetch_all(current_domain.repository_for(User)._dao.query)
