from dishka import provide

from foundrelay.config import Config
from foundrelay.domain.listing.service.listing import ListingService
from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.infrastructure.notify.relay import NotificationRelay
from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope


class ListingProvider(Provider):
    """One ListingStore per application; a fresh service per request."""

    @provide(scope=Scope.APP)
    def get_store(self, config: Config) -> ListingStore:
        return ListingStore(ttl_ms=config.store.ttl_ms)

    @provide(scope=Scope.UOW)
    def get_service(self, store: ListingStore, relay: NotificationRelay) -> ListingService:
        return ListingService(store=store, relay=relay)
