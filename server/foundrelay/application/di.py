from dishka import AsyncContainer, from_context, make_async_container
from starlette.requests import Request

from foundrelay.config import Config
from foundrelay.domain.listing.util.di import ListingProvider
from foundrelay.infrastructure.expiry import ExpiryProvider
from foundrelay.infrastructure.notify import NotifyProvider
from foundrelay.infrastructure.ratelimit import RateLimitProvider
from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope


class ContextProvider(Provider):
    """Values handed to the container from outside."""

    config = from_context(provides=Config, scope=Scope.APP)
    request = from_context(provides=Request, scope=Scope.UOW)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        ContextProvider(),
        ListingProvider(),
        NotifyProvider(),
        ExpiryProvider(),
        RateLimitProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
