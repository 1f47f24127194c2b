"""DI provider for the notification sink."""

from collections.abc import AsyncIterator
from typing import NewType

import httpx
from dishka import provide

from foundrelay.config import Config
from foundrelay.domain.listing.port.notifier import Notifier
from foundrelay.infrastructure.notify.discord import DiscordWebhookNotifier
from foundrelay.infrastructure.notify.relay import NotificationRelay
from foundrelay.util.di.base import Provider
from foundrelay.util.di.scope import Scope

# Dedicated client so webhook traffic gets its own pool and timeouts
WebhookHttpClient = NewType("WebhookHttpClient", httpx.AsyncClient)


def _webhook_timeout(config: Config) -> httpx.Timeout:
    total = config.notifier.timeout_seconds
    return httpx.Timeout(total, connect=min(total, 5.0))


class NotifyProvider(Provider):
    """Provides the webhook client, the Notifier adapter and the relay."""

    @provide(scope=Scope.APP)
    async def get_webhook_client(self, config: Config) -> AsyncIterator[WebhookHttpClient]:
        client = httpx.AsyncClient(timeout=_webhook_timeout(config))
        yield WebhookHttpClient(client)
        await client.aclose()

    @provide(scope=Scope.APP, provides=Notifier)
    def get_notifier(self, config: Config, client: WebhookHttpClient) -> DiscordWebhookNotifier:
        return DiscordWebhookNotifier(
            client=client,
            webhook_url=config.notifier.webhook_url,
            username=config.notifier.username,
        )

    @provide(scope=Scope.APP)
    def get_relay(self, config: Config, notifier: Notifier) -> NotificationRelay:
        return NotificationRelay(
            notifier,
            timeout=config.notifier.timeout_seconds,
            drain_timeout=config.notifier.drain_timeout_seconds,
        )
