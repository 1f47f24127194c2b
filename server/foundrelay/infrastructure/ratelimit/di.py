"""DI provider for request rate limiting."""

from dishka import provide

from foundrelay.config import Config
from foundrelay.infrastructure.ratelimit.memory import SlidingWindowRateLimiter
from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope


class RateLimitProvider(Provider):
    @provide(scope=Scope.APP)
    def get_rate_limiter(self, config: Config) -> SlidingWindowRateLimiter:
        return SlidingWindowRateLimiter(
            max_requests=config.rate_limit.max_requests,
            window=config.rate_limit.window_seconds,
        )
