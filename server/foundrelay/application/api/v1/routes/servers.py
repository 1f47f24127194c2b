"""Queries over the active found servers."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import BaseModel

from foundrelay.application.api.v1.deps import PROTECTED
from foundrelay.domain.listing.model.server import FoundServer
from foundrelay.domain.listing.service.listing import ListingService
from foundrelay.domain.listing.util.value import parse_value

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/servers",
    tags=["servers"],
    route_class=DishkaRoute,
    dependencies=PROTECTED,
)


class RemovedResponse(BaseModel):
    message: str
    removed: list[FoundServer]


@router.get("")
async def list_servers(service: FromDishka[ListingService]) -> list[FoundServer]:
    """All active servers, oldest first."""
    servers = service.list_active()
    logger.info("GET /servers - returned %d servers", len(servers))
    return servers


@router.get("/filter")
async def filter_servers(
    service: FromDishka[ListingService],
    min_value: str | None = Query(
        None,
        alias="minValue",
        description='Minimum value, e.g. "1500000" or "1.5M"; anything unparseable means 0',
    ),
) -> list[FoundServer]:
    """Active servers worth at least ``minValue``."""
    threshold = parse_value(min_value)
    servers = service.filter_by_min_value(threshold)
    logger.info("GET /servers/filter?minValue=%d - returned %d servers", threshold, len(servers))
    return servers


@router.get("/{job_id}")
async def get_servers_for_job(
    job_id: str,
    service: FromDishka[ListingService],
) -> list[FoundServer]:
    """Active entries reported for a job id."""
    servers = service.get_by_job(job_id)
    logger.info("GET /servers/%s - returned %d entries", job_id, len(servers))
    return servers


@router.delete("/{job_id}")
async def remove_servers_for_job(
    job_id: str,
    service: FromDishka[ListingService],
) -> RemovedResponse:
    """Remove every entry for a job id, e.g. once a player has joined it."""
    removed = service.remove_by_job(job_id)
    logger.info("DELETE /servers/%s - removed %d entries", job_id, len(removed))
    return RemovedResponse(message="Server removed", removed=removed)
