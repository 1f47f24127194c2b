from foundrelay.infrastructure.expiry.di import ExpiryProvider

__all__ = ["ExpiryProvider"]
