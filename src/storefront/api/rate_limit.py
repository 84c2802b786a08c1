"""Per-client request limiting, keyed by remote address."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from storefront.config import Settings

logger = structlog.get_logger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests from this IP, please try again later."


def build_limiter(settings: Settings) -> Limiter:
    # One counter per client across every route, held in process memory
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
        storage_uri="memory://",
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Must stay sync: SlowAPIMiddleware calls it without awaiting
    logger.warning("rate_limited", client=get_remote_address(request), path=request.url.path, limit=str(exc.detail))
    return JSONResponse(status_code=429, content={"message": RATE_LIMITED_MESSAGE})


def install_rate_limiting(app: FastAPI, settings: Settings) -> Limiter:
    limiter = build_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    return limiter
