"""Tests for stats hydration: additive merging, sync modes and fan-out ordering."""

import asyncio
from typing import Dict
from uuid import uuid4

import pytest

from synchistory import schemas
from synchistory.core.exceptions import InvalidArgumentException
from synchistory.core.shared_models import SyncMode
from synchistory.domains.jobs.converters import to_attempt_read, to_job_with_attempts_read
from synchistory.domains.jobs.fakes.builders import make_attempt_stats, make_job
from synchistory.domains.jobs.fakes.repository import FakeJobRepository
from synchistory.domains.jobs.stats_hydration import (
    StatsHydrator,
    hydrate_attempt,
    merge_stream_stats,
    streams_to_sync_mode,
)
from synchistory.domains.jobs.types import StreamKey

SCOPE = str(uuid4())


def _stream(job_read: schemas.JobWithAttemptsRead, name: str) -> schemas.StreamStatsRead:
    return next(s for s in job_read.job.stream_aggregated_stats if s.stream_name == name)


def test_merge_is_additive_across_attempts():
    merged = merge_stream_stats(
        [
            make_attempt_stats(("users", "public", 10, 5)),
            make_attempt_stats(("users", "public", 10, 5)),
        ]
    )

    assert merged[StreamKey("users", "public")] == schemas.SyncStats(
        records_emitted=20, bytes_emitted=200, records_committed=10, bytes_committed=100
    )


def test_merge_keeps_namespaces_apart_and_first_seen_order():
    merged = merge_stream_stats(
        [
            make_attempt_stats(("users", "public", 1, 1), ("orders", None, 2, 2)),
            make_attempt_stats(("users", "archive", 3, 3), ("users", "public", 4, 4)),
        ]
    )

    assert list(merged) == [
        StreamKey("users", "public"),
        StreamKey("orders", None),
        StreamKey("users", "archive"),
    ]
    assert merged[StreamKey("users", "public")].records_emitted == 5


def test_streams_to_sync_mode():
    job = make_job(
        1,
        SCOPE,
        streams=[
            ("users", "public", SyncMode.INCREMENTAL),
            ("orders", None, SyncMode.FULL_REFRESH),
        ],
    )

    assert streams_to_sync_mode(job) == {
        StreamKey("users", "public"): SyncMode.INCREMENTAL,
        StreamKey("orders", None): SyncMode.FULL_REFRESH,
    }
    assert streams_to_sync_mode(make_job(2, SCOPE)) == {}


def test_hydrate_attempt_uses_its_own_stats():
    job = make_job(1, SCOPE, attempt_count=1)
    attempt_read = to_attempt_read(job.attempts[0])

    hydrate_attempt(attempt_read, make_attempt_stats(("users", "public", 7, 6)))

    assert attempt_read.total_stats.records_emitted == 7
    assert attempt_read.records_synced == 6
    assert attempt_read.bytes_synced == 60
    assert [s.stream_name for s in attempt_read.stream_stats] == ["users"]


@pytest.mark.asyncio
async def test_hydrate_merges_attempts_into_job_view():
    repo = FakeJobRepository()
    job = make_job(
        1, SCOPE, attempt_count=2, streams=[("users", "public", SyncMode.INCREMENTAL)]
    )
    repo.seed(job)
    repo.seed_attempt_stats(1, 0, make_attempt_stats(("users", "public", 10, 5)))
    repo.seed_attempt_stats(1, 1, make_attempt_stats(("users", "public", 10, 5)))
    job_read = to_job_with_attempts_read(job)

    await StatsHydrator(repo).hydrate([job_read], [job], hydration_enabled=True)

    users = _stream(job_read, "users")
    assert (users.records_emitted, users.records_committed) == (20, 10)
    assert users.sync_mode == SyncMode.INCREMENTAL
    assert job_read.job.aggregated_stats.records_emitted == 20
    assert job_read.attempts[0].total_stats.records_emitted == 10
    assert job_read.attempts[1].records_synced == 5


@pytest.mark.asyncio
async def test_hydrate_job_without_attempts_yields_empty_stats():
    repo = FakeJobRepository()
    job = make_job(1, SCOPE)
    job_read = to_job_with_attempts_read(job)

    await StatsHydrator(repo).hydrate([job_read], [job], hydration_enabled=True)

    assert job_read.job.aggregated_stats == schemas.SyncStatsRead()
    assert job_read.job.stream_aggregated_stats == []


@pytest.mark.asyncio
async def test_stream_without_configured_mode_has_no_sync_mode():
    repo = FakeJobRepository()
    job = make_job(1, SCOPE, attempt_count=1)
    repo.seed_attempt_stats(1, 0, make_attempt_stats(("ghost", None, 1, 1)))
    job_read = to_job_with_attempts_read(job)

    await StatsHydrator(repo).hydrate([job_read], [job], hydration_enabled=True)

    assert _stream(job_read, "ghost").sync_mode is None


@pytest.mark.asyncio
async def test_disabled_hydration_leaves_views_untouched():
    repo = FakeJobRepository()
    job = make_job(1, SCOPE, attempt_count=1)
    repo.seed_attempt_stats(1, 0, make_attempt_stats(("users", "public", 1, 1)))
    job_read = to_job_with_attempts_read(job)
    before = job_read.model_copy(deep=True)

    await StatsHydrator(repo).hydrate([job_read], [job], hydration_enabled=False)

    assert job_read == before
    assert repo._calls == []


@pytest.mark.asyncio
async def test_mismatched_inputs_are_rejected():
    job = make_job(1, SCOPE)
    with pytest.raises(InvalidArgumentException):
        await StatsHydrator(FakeJobRepository()).hydrate([], [job], hydration_enabled=True)


class _SlowFirstRepository(FakeJobRepository):
    """Answers stats lookups in reverse order of the request."""

    def __init__(self, delays: Dict[int, float]) -> None:
        super().__init__()
        self._delays = delays

    async def get_attempt_stats_for_job(self, job_id: int) -> Dict[int, schemas.AttemptStats]:
        await asyncio.sleep(self._delays.get(job_id, 0))
        return await super().get_attempt_stats_for_job(job_id)


@pytest.mark.asyncio
async def test_concurrent_hydration_preserves_order():
    repo = _SlowFirstRepository({1: 0.03, 2: 0.02, 3: 0.01})
    jobs = [make_job(i, SCOPE, attempt_count=1) for i in (1, 2, 3)]
    for job in jobs:
        stats = make_attempt_stats((f"stream_{job.id}", None, job.id, 0))
        repo.seed_attempt_stats(job.id, 0, stats)
    job_reads = [to_job_with_attempts_read(job) for job in jobs]

    await StatsHydrator(repo, max_concurrency=3).hydrate(job_reads, jobs, hydration_enabled=True)

    assert [r.job.id for r in job_reads] == [1, 2, 3]
    assert [r.job.aggregated_stats.records_emitted for r in job_reads] == [1, 2, 3]
    assert [r.job.stream_aggregated_stats[0].stream_name for r in job_reads] == [
        "stream_1",
        "stream_2",
        "stream_3",
    ]
    # Slowest first: lookups finished in reverse, results still line up
    finished = [call[1] for call in repo._calls if call[0] == "get_attempt_stats_for_job"]
    assert finished == [3, 2, 1]
