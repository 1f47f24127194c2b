"""FastAPI dependencies guarding the authenticated API."""

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from foundrelay.config import Config
from foundrelay.domain.shared.error import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    RateLimitedError,
)
from foundrelay.infrastructure.ratelimit.memory import SlidingWindowRateLimiter

auth_logger = logging.getLogger("foundrelay.auth")

API_KEY_HEADER = "X-API-Key"

# Shared-secret security scheme (shows up in the OpenAPI docs)
api_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def client_key(request: Request, trust_forwarded: bool = False) -> str:
    """Identify the caller for rate limiting.

    The first X-Forwarded-For hop is used only when ``trust_forwarded`` is set;
    otherwise the peer address is the key.
    """
    forwarded = request.headers.get("x-forwarded-for") if trust_forwarded else None
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def require_api_key(
    request: Request,
    presented: Annotated[str | None, Depends(api_key_header)],
) -> None:
    """Reject requests whose X-API-Key does not match the configured secret.

    Usage in routers:
        router = APIRouter(dependencies=[Depends(require_api_key)])
    """
    config = await request.state.dishka_container.get(Config)
    expected = config.auth.api_key
    if not expected:
        raise ConfigurationError("Server configuration error")

    if not presented:
        auth_logger.info("Unauthorized request to %s - missing API key", request.url.path)
        raise AuthenticationError(f"Missing {API_KEY_HEADER} header")

    if not secrets.compare_digest(presented.encode(), expected.encode()):
        auth_logger.info("Unauthorized request to %s - invalid API key", request.url.path)
        raise AuthorizationError("Invalid API key")


async def enforce_rate_limit(request: Request) -> None:
    """Count the request against the caller's window; 429 once it is full."""
    config = await request.state.dishka_container.get(Config)
    if not config.rate_limit.enabled:
        return

    limiter = await request.state.dishka_container.get(SlidingWindowRateLimiter)
    decision = limiter.hit(client_key(request, config.rate_limit.trust_forwarded))
    if not decision.allowed:
        raise RateLimitedError(
            "Too many requests, please try again later.",
            retry_after=decision.retry_after,
        )


# Applied to every authenticated router, in this order
PROTECTED = [Depends(enforce_rate_limit), Depends(require_api_key)]
