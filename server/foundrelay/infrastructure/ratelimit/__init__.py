from foundrelay.infrastructure.ratelimit.di import RateLimitProvider

__all__ = ["RateLimitProvider"]
