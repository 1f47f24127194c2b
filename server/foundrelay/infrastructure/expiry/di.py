"""DI provider for the expiry sweeper."""

from dishka import provide

from foundrelay.config import Config
from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.infrastructure.expiry.sweeper import ExpirySweeper
from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope


class ExpiryProvider(Provider):
    @provide(scope=Scope.APP)
    def get_sweeper(self, config: Config, store: ListingStore) -> ExpirySweeper:
        return ExpirySweeper(store, interval=config.store.sweep_interval_ms / 1000)
