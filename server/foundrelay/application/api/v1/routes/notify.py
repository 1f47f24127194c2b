"""Ingest endpoint for notifier clients running inside the game."""

import logging
from typing import Any

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict

from foundrelay.application.api.v1.deps import PROTECTED
from foundrelay.domain.listing.model.server import FoundServer, ServerDraft
from foundrelay.domain.listing.service.listing import ListingService
from foundrelay.domain.shared.error import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/notify",
    tags=["notify"],
    route_class=DishkaRoute,
    dependencies=PROTECTED,
)

REQUIRED_FIELDS = ("displayName", "jobId", "placeId")


class NotifyRequest(BaseModel):
    """Raw payload from a client. Loosely typed; normalized by ServerDraft."""

    model_config = ConfigDict(extra="ignore")

    displayName: Any = None
    value: Any = None
    valueFormatted: Any = None
    mutation: Any = None
    rarity: Any = None
    players: Any = None
    jobId: Any = None
    placeId: Any = None
    teleportScript: Any = None

    def to_draft(self) -> ServerDraft:
        missing = [name for name in REQUIRED_FIELDS if not getattr(self, name)]
        if missing:
            raise ValidationError(
                "Missing required fields (displayName, jobId, placeId)",
                field=missing[0],
            )
        return ServerDraft.model_validate(self.model_dump())


class NotifyResponse(BaseModel):
    message: str
    server: FoundServer


@router.post("")
async def notify(
    payload: NotifyRequest,
    service: FromDishka[ListingService],
) -> NotifyResponse:
    """Store a found server and relay it to the webhook in the background."""
    server = service.ingest(payload.to_draft())
    logger.info("POST /notify - stored %s (%s)", server.display_name, server.job_id)
    return NotifyResponse(message="Notification stored", server=server)
