"""Custom Dishka scopes for foundrelay."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """foundrelay dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (store, relay, sweeper, HTTP client)
    - UOW: Unit of Work (one HTTP request)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
