"""Unit tests for ListingStore.

A manual clock drives time so expiry boundaries can be checked exactly.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from foundrelay.domain.listing.model.server import ServerDraft
from foundrelay.domain.listing.service.store import ListingStore

TTL = 1_000


class ManualClock:
    def __init__(self, now: int = 1_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_draft(job_id: str = "job-1", value: int = 0, name: str = "Tralalero") -> ServerDraft:
    return ServerDraft(display_name=name, job_id=job_id, value=value)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(clock: ManualClock) -> ListingStore:
    return ListingStore(ttl_ms=TTL, clock=clock)


class TestInsert:
    def test_assigns_id_and_expiry(self, store: ListingStore, clock: ManualClock):
        server = store.insert(make_draft())

        assert server.inserted_at == clock.now
        assert server.expires_at == clock.now + TTL
        assert server.id.startswith(f"{clock.now}-job-1")

    def test_duplicate_job_ids_are_kept_with_distinct_ids(self, store: ListingStore):
        first = store.insert(make_draft("job-1"))
        second = store.insert(make_draft("job-1"))

        assert first.id != second.id
        assert store.records_by_key("job-1") == [first, second]

    def test_counts_every_insert(self, store: ListingStore):
        for _ in range(3):
            store.insert(make_draft())

        assert store.stats().total_inserted == 3

    def test_rejects_non_positive_ttl(self):
        with pytest.raises(ValueError):
            ListingStore(ttl_ms=0)


class TestActiveRecords:
    def test_preserves_insertion_order(self, store: ListingStore, clock: ManualClock):
        a = store.insert(make_draft("a"))
        clock.advance(1)
        b = store.insert(make_draft("b"))
        c = store.insert(make_draft("c"))

        assert store.active_records() == [a, b, c]

    def test_active_for_whole_ttl_then_inactive(self, store: ListingStore, clock: ManualClock):
        t = clock.now
        server = store.insert(make_draft())

        for now in (t, t + 1, t + TTL // 2, t + TTL - 1):
            assert store.active_records(now=now) == [server]
        for now in (t + TTL, t + TTL + 1, t + 10 * TTL):
            assert store.active_records(now=now) == []

    def test_expired_records_hidden_before_sweep(self, store: ListingStore, clock: ManualClock):
        store.insert(make_draft())
        clock.advance(TTL)

        assert store.active_records() == []
        assert store.records_by_key("job-1") == []
        assert store.stats().active == 0


class TestRecordsByKey:
    def test_unknown_key_is_empty(self, store: ListingStore):
        store.insert(make_draft("job-1"))
        assert store.records_by_key("job-2") == []

    def test_only_matching_key(self, store: ListingStore):
        store.insert(make_draft("job-1"))
        wanted = store.insert(make_draft("job-2"))

        assert store.records_by_key("job-2") == [wanted]


class TestFilterByMinValue:
    def test_zero_equals_active_records(self, store: ListingStore):
        for value in (0, 10, 5_000):
            store.insert(make_draft(f"job-{value}", value=value))

        assert store.filter_by_min_value(0) == store.active_records()

    def test_threshold_is_inclusive_subset(self, store: ListingStore):
        for value in (999, 1_000, 2_200_000):
            store.insert(make_draft(f"job-{value}", value=value))

        result = store.filter_by_min_value(1_000)

        assert [s.value for s in result] == [1_000, 2_200_000]
        assert all(s in store.active_records() for s in result)

    def test_excludes_expired(self, store: ListingStore, clock: ManualClock):
        store.insert(make_draft(value=10_000))
        clock.advance(TTL)

        assert store.filter_by_min_value(0) == []


class TestRemoveByKey:
    def test_removes_all_duplicates(self, store: ListingStore):
        store.insert(make_draft("job-1"))
        store.insert(make_draft("job-1"))
        keep = store.insert(make_draft("job-2"))

        removed = store.remove_by_key("job-1")

        assert len(removed) == 2
        assert {s.job_id for s in removed} == {"job-1"}
        assert store.records_by_key("job-1") == []
        assert store.active_records() == [keep]

    def test_also_removes_expired_entries(self, store: ListingStore, clock: ManualClock):
        store.insert(make_draft("job-1"))
        clock.advance(TTL)

        assert len(store.remove_by_key("job-1")) == 1
        assert store.sweep() == 0

    def test_missing_key_is_empty_and_leaves_counters(self, store: ListingStore):
        store.insert(make_draft("job-1"))
        before = store.stats()

        assert store.remove_by_key("nope") == []
        assert store.remove_by_key("nope") == []

        after = store.stats()
        assert after.total_inserted == before.total_inserted
        assert after.total_expired == before.total_expired

    def test_does_not_count_as_expired(self, store: ListingStore):
        store.insert(make_draft("job-1"))
        store.remove_by_key("job-1")

        stats = store.stats()
        assert stats.total_expired == 0
        assert stats.total_inserted == 1


class TestSweep:
    def test_removes_only_expired(self, store: ListingStore, clock: ManualClock):
        store.insert(make_draft("old"))
        clock.advance(TTL // 2)
        fresh = store.insert(make_draft("fresh"))
        clock.advance(TTL // 2)

        assert store.sweep() == 1
        assert store.active_records() == [fresh]
        assert store.stats().total_expired == 1

    def test_boundary_is_inclusive(self, store: ListingStore, clock: ManualClock):
        server = store.insert(make_draft())

        assert store.sweep(now=server.expires_at - 1) == 0
        assert store.sweep(now=server.expires_at) == 1

    def test_second_sweep_returns_zero(self, store: ListingStore, clock: ManualClock):
        store.insert(make_draft("a"))
        store.insert(make_draft("b"))
        clock.advance(TTL)

        assert store.sweep() == 2
        assert store.sweep() == 0
        assert store.stats().total_expired == 2

    def test_empty_store(self, store: ListingStore):
        assert store.sweep() == 0


class TestStats:
    def test_snapshot(self, store: ListingStore, clock: ManualClock):
        started = clock.now
        store.insert(make_draft("a"))
        store.insert(make_draft("b"))
        clock.advance(TTL)
        store.insert(make_draft("c"))
        store.sweep()
        store.remove_by_key("c")
        clock.advance(2_500)

        stats = store.stats()

        assert stats.total_inserted == 3
        assert stats.total_expired == 2
        assert stats.active == 0
        assert stats.started_at == started
        assert stats.uptime_ms == TTL + 2_500
        assert stats.uptime == 3


class TestConcurrency:
    """Threads hammer the store; counts must still add up exactly."""

    def test_concurrent_inserts_and_sweeps_lose_nothing(self):
        # Real clock, long TTL: every inserted record stays live
        store = ListingStore(ttl_ms=3_600_000)
        inserts_per_worker = 200
        workers = 8
        stop = threading.Event()

        def insert_many(worker: int) -> None:
            for i in range(inserts_per_worker):
                store.insert(make_draft(f"job-{worker}-{i}"))

        def sweep_forever() -> int:
            removed = 0
            while not stop.is_set():
                removed += store.sweep()
            return removed

        with ThreadPoolExecutor(max_workers=workers + 2) as pool:
            sweepers = [pool.submit(sweep_forever) for _ in range(2)]
            list(pool.map(insert_many, range(workers)))
            stop.set()
            swept = sum(f.result() for f in sweepers)

        total = workers * inserts_per_worker
        stats = store.stats()
        assert swept == 0
        assert stats.total_expired == 0
        assert stats.total_inserted == total
        assert len(store.active_records()) == total
        assert len({s.id for s in store.active_records()}) == total

    def test_overlapping_sweeps_count_each_expiry_once(self, clock: ManualClock):
        store = ListingStore(ttl_ms=TTL, clock=clock)
        for i in range(500):
            store.insert(make_draft(f"job-{i}"))
        clock.advance(TTL)

        barrier = threading.Barrier(4)

        def sweep() -> int:
            barrier.wait()
            return store.sweep()

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: sweep(), range(4)))

        assert sum(results) == 500
        assert store.stats().total_expired == 500
        assert store.active_records() == []

    def test_concurrent_insert_and_delete_of_same_key(self):
        store = ListingStore(ttl_ms=3_600_000)
        removed_total = 0
        lock = threading.Lock()

        def insert_many() -> None:
            for _ in range(300):
                store.insert(make_draft("shared"))

        def delete_many() -> None:
            nonlocal removed_total
            for _ in range(300):
                removed = len(store.remove_by_key("shared"))
                with lock:
                    removed_total += removed

        with ThreadPoolExecutor(max_workers=4) as pool:
            futures = [pool.submit(insert_many), pool.submit(insert_many), pool.submit(delete_many)]
            for f in futures:
                f.result()

        remaining = len(store.records_by_key("shared"))
        assert removed_total + remaining == 600
        assert store.stats().total_expired == 0
