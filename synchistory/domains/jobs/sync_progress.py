"""Live per-stream progress of a connection's running sync."""

from typing import List
from uuid import UUID

from synchistory import schemas
from synchistory.core.logging import logger
from synchistory.domains.jobs.converters import to_job_with_attempts_read
from synchistory.domains.jobs.query import JobQueryPlanner
from synchistory.domains.jobs.stats_hydration import StatsHydrator


class SyncProgressAggregator:
    """Projects the merged stream stats of running sync jobs into progress items."""

    def __init__(self, planner: JobQueryPlanner, hydrator: StatsHydrator) -> None:
        """Initialize with injected planner and hydrator."""
        self._planner = planner
        self._hydrator = hydrator

    async def get_connection_sync_progress(
        self, connection_id: UUID
    ) -> List[schemas.ConnectionSyncProgressReadItem]:
        """Progress items for the connection's running sync, empty when nothing runs.

        A connection runs at most one sync at a time, so every item reports
        the job id and start time of the most recent running job. Should
        several run at once, the stream counters stay correct per job but
        the job-level fields all come from the newest one.
        """
        jobs = await self._planner.running_sync_jobs_for_connections([connection_id])
        if not jobs:
            return []
        if len(jobs) > 1:
            logger.warning(
                f"Connection {connection_id} has {len(jobs)} running sync jobs; "
                f"reporting progress against job {jobs[0].id}"
            )

        job_reads = [to_job_with_attempts_read(job) for job in jobs]
        await self._hydrator.hydrate(job_reads, jobs, hydration_enabled=True)

        head = job_reads[0].job
        return [
            schemas.ConnectionSyncProgressReadItem(
                job_id=head.id,
                stream_name=stream.stream_name,
                stream_namespace=stream.stream_namespace,
                records_extracted=stream.records_emitted,
                records_loaded=stream.records_committed,
                bytes_extracted=stream.bytes_emitted,
                bytes_loaded=stream.bytes_committed,
                sync_started_at=head.started_at,
            )
            for job_read in job_reads
            for stream in job_read.job.stream_aggregated_stats or []
        ]
