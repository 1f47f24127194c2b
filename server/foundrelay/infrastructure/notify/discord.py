"""Discord webhook adapter for the Notifier port."""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from foundrelay.domain.listing.model.server import FoundServer
from foundrelay.domain.listing.port.notifier import Notifier
from foundrelay.domain.listing.util.value import format_value
from foundrelay.domain.shared.error import ExternalServiceError

logger = logging.getLogger(__name__)

EMBED_TITLE = "🔔 Brainrot Found!"
EMBED_COLOR = 0x5865F2


def _field(name: str, value: str, inline: bool) -> dict[str, Any]:
    return {"name": name, "value": value, "inline": inline}


def build_webhook_payload(server: FoundServer, username: str) -> dict[str, Any]:
    """Build the Discord embed announcing ``server``."""
    fields = [
        _field("🐾 Brainrot", server.display_name or "Unknown", False),
        _field("💰 Value", server.value_formatted or format_value(server.value), True),
        _field("✨ Mutation", server.mutation or "Unknown", True),
        _field("🎯 Rarity", server.rarity or "Unknown", True),
        _field("👥 Players", server.players or "N/A", True),
        _field("🆔 Job ID", f"```{server.job_id or 'Unknown'}```", False),
    ]
    if server.teleport_script:
        fields.append(
            _field("🚀 Teleport Script", f"```lua\n{server.teleport_script}\n```", False)
        )
    else:
        place = server.place_id if server.place_id is not None else "Unknown"
        fields.append(_field("📍 Place ID", str(place), True))

    timestamp = datetime.fromtimestamp(server.inserted_at / 1000, tz=UTC)
    return {
        "username": username,
        "embeds": [
            {
                "title": EMBED_TITLE,
                "color": EMBED_COLOR,
                "fields": fields,
                "timestamp": timestamp.isoformat(),
            }
        ],
    }


class DiscordWebhookNotifier(Notifier):
    """Posts an embed per new server to a Discord-compatible webhook."""

    def __init__(self, client: httpx.AsyncClient, webhook_url: str, username: str) -> None:
        self._client = client
        self._webhook_url = webhook_url
        self._username = username

    @property
    def enabled(self) -> bool:
        return bool(self._webhook_url)

    async def notify(self, server: FoundServer) -> None:
        if not self.enabled:
            return

        payload = build_webhook_payload(server, self._username)
        try:
            response = await self._client.post(self._webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                f"Webhook answered {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Webhook unreachable: {e}") from e

        logger.info("Webhook notified for %s (%s)", server.display_name, server.job_id)
