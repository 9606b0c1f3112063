"""Stats hydration: merge per-stream attempt statistics into job views.

Per-job statistics fetches are independent, so a batch is fetched
concurrently (bounded by ``max_concurrency``). Each fetch writes only into
its own view, so the caller's ordering is never disturbed.
"""

import asyncio
from typing import Dict, Iterable, List, Sequence

from synchistory import schemas
from synchistory.core.exceptions import InvalidArgumentException
from synchistory.core.logging import logger
from synchistory.core.shared_models import SyncMode
from synchistory.domains.jobs.converters import to_sync_stats_read
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.types import StreamKey


def streams_to_sync_mode(job: schemas.Job) -> Dict[StreamKey, SyncMode]:
    """Configured sync mode of each stream in the job's catalog."""
    catalog = job.config.configured_catalog or []
    return {StreamKey(stream.name, stream.namespace): stream.sync_mode for stream in catalog}


def merge_stream_stats(
    attempt_stats: Iterable[schemas.AttemptStats],
) -> Dict[StreamKey, schemas.SyncStats]:
    """Sum counters per (stream name, namespace) across attempts.

    Keys keep first-seen order.
    """
    merged: Dict[StreamKey, schemas.SyncStats] = {}
    for stats in attempt_stats:
        for stream in stats.per_stream_stats:
            key = StreamKey(stream.stream_name, stream.stream_namespace)
            merged[key] = merged.get(key, schemas.SyncStats()) + stream.stats
    return merged


def to_stream_stats_reads(
    merged: Dict[StreamKey, schemas.SyncStats], sync_modes: Dict[StreamKey, SyncMode]
) -> List[schemas.StreamStatsRead]:
    return [
        schemas.StreamStatsRead(
            stream_name=key.name,
            stream_namespace=key.namespace,
            sync_mode=sync_modes.get(key),
            **stats.model_dump(),
        )
        for key, stats in merged.items()
    ]


def hydrate_attempt(attempt: schemas.AttemptRead, attempt_stats: schemas.AttemptStats) -> None:
    """Write one attempt's own statistics into its view, in place."""
    merged = merge_stream_stats([attempt_stats])
    totals = attempt_stats.combined_stats
    attempt.total_stats = to_sync_stats_read(totals)
    attempt.stream_stats = to_stream_stats_reads(merged, {})
    attempt.records_synced = totals.records_committed
    attempt.bytes_synced = totals.bytes_committed


class StatsHydrator:
    """Fetches attempt statistics and merges them into job views."""

    def __init__(self, job_repo: JobRepositoryProtocol, max_concurrency: int = 10) -> None:
        """Initialize with injected repository and fan-out bound."""
        self._job_repo = job_repo
        self._max_concurrency = max_concurrency

    async def hydrate(
        self,
        job_reads: Sequence[schemas.JobWithAttemptsRead],
        jobs: Sequence[schemas.Job],
        hydration_enabled: bool,
    ) -> None:
        """Hydrate each view from the job at the same position.

        When ``hydration_enabled`` is false the views are left untouched.
        """
        if len(job_reads) != len(jobs):
            raise InvalidArgumentException(
                f"Got {len(job_reads)} job views for {len(jobs)} jobs; they must pair up"
            )
        if not hydration_enabled or not jobs:
            return

        logger.debug(f"Hydrating stats for {len(jobs)} job(s)")
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(job_read: schemas.JobWithAttemptsRead, job: schemas.Job) -> None:
            async with semaphore:
                await self._hydrate_job(job_read, job)

        await asyncio.gather(*(_bounded(job_read, job) for job_read, job in zip(job_reads, jobs)))

    async def _hydrate_job(self, job_read: schemas.JobWithAttemptsRead, job: schemas.Job) -> None:
        stats_by_attempt = await self._job_repo.get_attempt_stats_for_job(job.id)
        for attempt_read in job_read.attempts:
            attempt_stats = stats_by_attempt.get(attempt_read.id, schemas.AttemptStats())
            hydrate_attempt(attempt_read, attempt_stats)

        ordered = [
            stats_by_attempt[attempt.attempt_number]
            for attempt in job.attempts
            if attempt.attempt_number in stats_by_attempt
        ]
        totals = schemas.SyncStats()
        for stats in ordered:
            totals = totals + stats.combined_stats

        job_read.job.aggregated_stats = to_sync_stats_read(totals)
        job_read.job.stream_aggregated_stats = to_stream_stats_reads(
            merge_stream_stats(ordered), streams_to_sync_mode(job)
        )
