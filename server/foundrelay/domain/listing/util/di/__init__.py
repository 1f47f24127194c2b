from foundrelay.domain.listing.util.di.provider import ListingProvider

__all__ = ["ListingProvider"]
