"""Storefront FastAPI application factory.

The factory has no side effects at import time: the caller initializes the
domain and passes in the collaborators the routes use.
"""

import json

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.rate_limit import install_rate_limiting
from storefront.api.routes import (
    admin_router,
    auth_router,
    contact_router,
    order_router,
    payment_router,
    product_router,
    users_router,
)
from storefront.domain import storefront
from storefront.gateway.port import GatewayError
from storefront.services import Services
from storefront.storage.port import StorageError
from storefront.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)

ROUTERS = (
    auth_router,
    users_router,
    product_router,
    order_router,
    payment_router,
    admin_router,
    contact_router,
)


def _first_error_message(errors) -> str:
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request")


def jsonable_errors(errors) -> list[dict]:
    return [{"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")} for error in errors]


def describe_error(error) -> str:
    """First human-readable message in a Protean error payload."""
    if isinstance(error, dict):
        for messages in error.values():
            return describe_error(messages)
        return "Invalid request"
    if isinstance(error, (list, tuple)):
        return describe_error(error[0]) if error else "Invalid request"
    return str(error)


def _with_message(handler):
    async def handle_with_message(request: Request, exc: Exception):
        response = await handler(request, exc)
        body = json.loads(response.body)
        details = getattr(exc, "messages", None) or (exc.args[0] if exc.args else body.get("error"))
        return JSONResponse(status_code=response.status_code, content={"message": describe_error(details), **body})

    return handle_with_message


def register_domain_error_handlers(app: FastAPI) -> None:
    """Protean's exception handlers, with a ``message`` beside their ``error`` payload."""
    existing = set(app.exception_handlers)
    register_exception_handlers(app)
    for exc_class in set(app.exception_handlers) - existing:
        app.exception_handlers[exc_class] = _with_message(app.exception_handlers[exc_class])


def register_error_handlers(app: FastAPI) -> None:
    """Map request-shape and external-service failures to JSON responses."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        return JSONResponse(
            status_code=400,
            content={"message": _first_error_message(errors), "errors": jsonable_errors(errors)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail, "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        logger.error("gateway_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"message": str(exc) or "Payment gateway error"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"message": str(exc) or "File storage error"})


def create_app(services: Services) -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        description="Digital software storefront: catalogue, orders, payments and back-office",
    )
    app.state.services = services
    limiter = install_rate_limiting(app, services.settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=services.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        with storefront.domain_context():
            return await call_next(request)

    for router in ROUTERS:
        app.include_router(router)

    register_domain_error_handlers(app)
    register_error_handlers(app)

    @app.get("/health")
    @limiter.exempt
    async def health():
        return JSONResponse(content={"status": "ok", "domain": storefront.name})

    return app
