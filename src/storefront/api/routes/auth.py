"""Registration, login and the current-user endpoint."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.api.dependencies import get_services, require_user
from storefront.api.schemas import AuthResponse, LoginRequest, RegisterRequest, UserEnvelope, UserResponse
from storefront.auth.principal import Authenticated
from storefront.identity.credentials import hash_password, verify_password
from storefront.identity.email import normalize_email
from storefront.identity.lookup import find_user_by_email
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User
from storefront.services import Services

logger = structlog.get_logger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
async def register(body: RegisterRequest, services: Services = Depends(get_services)) -> AuthResponse:
    command = RegisterUser(
        name=body.name,
        email=body.email,
        password_hash=hash_password(body.password),
    )
    user_id = current_domain.process(command, asynchronous=False)
    user = current_domain.repository_for(User).get(user_id)

    logger.info("user_registered", user_id=user_id)
    return AuthResponse(
        message="User registered successfully",
        token=services.tokens.issue(user.id),
        user=UserResponse.from_user(user),
    )


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, services: Services = Depends(get_services)) -> AuthResponse:
    try:
        email = normalize_email(body.email)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Invalid credentials") from None

    user = find_user_by_email(email)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("login_failed", email=email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is deactivated")

    return AuthResponse(
        message="Login successful",
        token=services.tokens.issue(user.id),
        user=UserResponse.from_user(user),
    )


@auth_router.get("/me", response_model=UserEnvelope)
async def me(principal: Authenticated = Depends(require_user)) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.from_user(principal.user))
