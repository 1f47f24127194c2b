"""Unit tests for ListingService."""

from unittest.mock import MagicMock

import pytest

from foundrelay.domain.listing.model.server import ServerDraft
from foundrelay.domain.listing.service.listing import (
    JOB_ID_MAX_LENGTH,
    ListingService,
    validate_job_id,
)
from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.domain.shared.error import NotFoundError, ValidationError


@pytest.fixture
def relay() -> MagicMock:
    return MagicMock()


@pytest.fixture
def service(relay: MagicMock) -> ListingService:
    return ListingService(store=ListingStore(ttl_ms=60_000), relay=relay)


def draft(job_id: str = "job-1", value: int = 0) -> ServerDraft:
    return ServerDraft(display_name="Odin Din Din Dun", job_id=job_id, place_id=1, value=value)


class TestIngest:
    def test_stores_and_dispatches(self, service: ListingService, relay: MagicMock):
        server = service.ingest(draft())

        relay.dispatch.assert_called_once_with(server)
        assert service.list_active() == [server]

    def test_store_keeps_record_when_dispatch_fails(self, relay: MagicMock):
        relay.dispatch.side_effect = RuntimeError("no running event loop")
        store = ListingStore(ttl_ms=60_000)
        service = ListingService(store=store, relay=relay)

        with pytest.raises(RuntimeError):
            service.ingest(draft())

        assert store.stats().total_inserted == 1


class TestLookup:
    def test_filter_by_min_value(self, service: ListingService):
        service.ingest(draft("low", value=10))
        high = service.ingest(draft("high", value=1_000))

        assert service.filter_by_min_value(100) == [high]

    def test_get_by_job(self, service: ListingService):
        server = service.ingest(draft("a"))
        service.ingest(draft("b"))

        assert service.get_by_job("a") == [server]

    def test_get_unknown_job_raises(self, service: ListingService):
        with pytest.raises(NotFoundError, match="not found or expired"):
            service.get_by_job("missing")

    def test_remove_by_job(self, service: ListingService):
        service.ingest(draft("a"))
        service.ingest(draft("a"))

        assert len(service.remove_by_job("a")) == 2
        with pytest.raises(NotFoundError):
            service.remove_by_job("a")


class TestValidateJobId:
    @pytest.mark.parametrize("job_id", ["", " ", "\t\n"])
    def test_blank_is_rejected(self, job_id: str):
        with pytest.raises(ValidationError) as exc_info:
            validate_job_id(job_id)
        assert exc_info.value.field == "jobId"

    def test_overlong_is_rejected(self):
        with pytest.raises(ValidationError):
            validate_job_id("x" * (JOB_ID_MAX_LENGTH + 1))

    def test_max_length_is_accepted(self):
        job_id = "x" * JOB_ID_MAX_LENGTH
        assert validate_job_id(job_id) == job_id
