"""Store statistics endpoint."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from foundrelay.application.api.v1.deps import PROTECTED
from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.domain.listing.util.value import format_uptime

router = APIRouter(
    prefix="/stats",
    tags=["stats"],
    route_class=DishkaRoute,
    dependencies=PROTECTED,
)


class StatsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_inserted: int
    total_expired: int
    active: int
    started_at: int
    uptime: int  # seconds
    uptime_formatted: str


@router.get("")
async def get_stats(store: FromDishka[ListingStore]) -> StatsResponse:
    """Counters since startup plus a readable uptime."""
    stats = store.stats()
    return StatsResponse(
        total_inserted=stats.total_inserted,
        total_expired=stats.total_expired,
        active=stats.active,
        started_at=stats.started_at,
        uptime=stats.uptime,
        uptime_formatted=format_uptime(stats.uptime_ms),
    )
