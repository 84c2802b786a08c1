"""FastAPI dependencies: injected services and the request principal."""

from fastapi import Depends, HTTPException, Request
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.auth.principal import Anonymous, Authenticated, Principal
from storefront.auth.tokens import InvalidToken
from storefront.identity.user import User
from storefront.services import Services


async def get_services(request: Request) -> Services:
    return request.app.state.services


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_principal(request: Request, services: Services = Depends(get_services)) -> Principal:
    """Resolve the caller. Bad tokens, unknown and deactivated users are all Anonymous."""
    token = _bearer_token(request)
    if token is None:
        return Anonymous()

    try:
        user_id = services.tokens.decode(token)
    except InvalidToken:
        return Anonymous()

    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        return Anonymous()

    if not user.is_active:
        return Anonymous()
    return Authenticated(user)


async def require_user(principal: Principal = Depends(get_principal)) -> Authenticated:
    if not isinstance(principal, Authenticated):
        raise HTTPException(status_code=401, detail="Authentication required")
    return principal


async def require_admin(principal: Authenticated = Depends(require_user)) -> Authenticated:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal
