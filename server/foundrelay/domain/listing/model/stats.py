from foundrelay.domain.shared.model.value import ValueObject


class StoreStats(ValueObject):
    """Point-in-time counters of a ListingStore."""

    total_inserted: int
    total_expired: int
    active: int
    started_at: int  # epoch milliseconds
    uptime_ms: int

    @property
    def uptime(self) -> int:
        """Uptime in whole seconds."""
        return self.uptime_ms // 1000
