from foundrelay.domain.listing.model.server import FoundServer, ServerDraft
from foundrelay.domain.listing.model.stats import StoreStats

__all__ = ["FoundServer", "ServerDraft", "StoreStats"]
