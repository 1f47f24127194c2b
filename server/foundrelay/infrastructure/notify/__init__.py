from foundrelay.infrastructure.notify.di import NotifyProvider

__all__ = ["NotifyProvider"]
