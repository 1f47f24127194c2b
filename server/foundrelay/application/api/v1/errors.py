"""Centralized error transformation for API routes.

Maps foundrelay errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from foundrelay.domain.shared.error import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    RateLimitedError,
    RelayError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    RateLimitedError: 429,
}


def map_relay_error(error: RelayError) -> HTTPException:
    """Map a foundrelay error to an HTTPException.

    Args:
        error: The error to map.

    Returns:
        HTTPException with appropriate status code, detail and headers.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        # Infrastructure errors → 503 Service Unavailable
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        if isinstance(error, AuthenticationError):
            return HTTPException(
                status_code=status_code,
                detail=detail,
                headers={"WWW-Authenticate": "ApiKey"},
            )
        if isinstance(error, RateLimitedError):
            return HTTPException(
                status_code=status_code,
                detail=detail,
                headers={"Retry-After": str(max(1, round(error.retry_after)))},
            )
        return HTTPException(status_code=status_code, detail=detail)

    # Fallback for unknown RelayError subclasses
    return HTTPException(status_code=500, detail=detail)
