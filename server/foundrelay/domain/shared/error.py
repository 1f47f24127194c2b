"""Error hierarchy for foundrelay.

Error layers:
- RelayError: Base class for all foundrelay errors
- DomainError: Rule violations, bad input, missing keys (4xx responses)
- InfrastructureError: System-level failures like misconfiguration or an
  unreachable sink (503 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py.
"""


class RelayError(Exception):
    """Base class for all foundrelay errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(RelayError):
    """Base class for domain errors."""


class NotFoundError(DomainError):
    """Resource not found (or already expired)."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class AuthenticationError(DomainError):
    """Caller did not present credentials."""


class AuthorizationError(DomainError):
    """Caller presented credentials that do not match."""


class RateLimitedError(DomainError):
    """Caller exceeded the request budget for the current window."""

    def __init__(self, message: str, retry_after: float) -> None:
        super().__init__(message)
        self.retry_after = retry_after


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(RelayError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """External service (notification sink) is unavailable or failed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
