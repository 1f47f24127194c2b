from foundrelay.domain.listing.service.listing import ListingService
from foundrelay.domain.listing.service.store import ListingStore

__all__ = ["ListingService", "ListingStore"]
