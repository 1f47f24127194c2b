from foundrelay.domain.listing.port.notifier import Notifier

__all__ = ["Notifier"]
