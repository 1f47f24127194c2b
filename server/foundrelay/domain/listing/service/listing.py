"""ListingService - ingest and keyed access on top of the ListingStore."""

import logging
from typing import Protocol

import logfire

from foundrelay.domain.listing.model.server import FoundServer, ServerDraft
from foundrelay.domain.listing.service.store import ListingStore
from foundrelay.domain.shared.error import NotFoundError, ValidationError
from foundrelay.domain.shared.service import Service

logger = logging.getLogger(__name__)

JOB_ID_MAX_LENGTH = 256


class Dispatcher(Protocol):
    def dispatch(self, server: FoundServer) -> None: ...


def validate_job_id(job_id: str) -> str:
    """Reject blank or oversized job ids before they reach the store."""
    if not job_id or not job_id.strip():
        raise ValidationError("jobId must not be blank", field="jobId")
    if len(job_id) > JOB_ID_MAX_LENGTH:
        raise ValidationError(
            f"jobId must be at most {JOB_ID_MAX_LENGTH} characters", field="jobId"
        )
    return job_id


class ListingService(Service):
    """Stores reported servers and hands them to the notification relay."""

    store: ListingStore
    relay: Dispatcher

    def ingest(self, draft: ServerDraft) -> FoundServer:
        """Store ``draft`` and schedule its notification without waiting on it."""
        with logfire.span("IngestServer", job_id=draft.job_id):
            server = self.store.insert(draft)
            self.relay.dispatch(server)
        return server

    def list_active(self) -> list[FoundServer]:
        return self.store.active_records()

    def filter_by_min_value(self, min_value: int) -> list[FoundServer]:
        return self.store.filter_by_min_value(min_value)

    def get_by_job(self, job_id: str) -> list[FoundServer]:
        """Active entries for a job; NotFoundError when there are none."""
        servers = self.store.records_by_key(validate_job_id(job_id))
        if not servers:
            raise NotFoundError("Server not found or expired")
        return servers

    def remove_by_job(self, job_id: str) -> list[FoundServer]:
        """Remove all entries for a job; NotFoundError when nothing was removed."""
        removed = self.store.remove_by_key(validate_job_id(job_id))
        if not removed:
            raise NotFoundError("Server not found")
        return removed
