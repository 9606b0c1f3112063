"""Job history service: the API-facing read operations over sync job history.

Listings and lookups go through the query planner; stats hydration is
applied afterwards, over the rows the planner returned.
"""

from typing import List, Optional
from uuid import UUID

from synchistory import schemas
from synchistory.core.context import ApiContext
from synchistory.core.shared_models import FeatureFlag
from synchistory.domains.jobs.converters import (
    to_attempt_normalization_status_read,
    to_data_history_item,
    to_job_info_light_read,
    to_job_optional_read,
    to_job_read,
    to_job_with_attempts_read,
)
from synchistory.domains.jobs.debug_info import JobDebugInfoAssembler
from synchistory.domains.jobs.job_info import build_job_info_read, build_job_info_without_logs
from synchistory.domains.jobs.protocols import JobHistoryServiceProtocol
from synchistory.domains.jobs.query import JobQueryPlanner
from synchistory.domains.jobs.stats_hydration import StatsHydrator
from synchistory.domains.jobs.sync_progress import SyncProgressAggregator
from synchistory.domains.jobs.types import JobPage
from synchistory.domains.logs.protocols import LogReaderProtocol

DEFAULT_DATA_HISTORY_JOB_COUNT = 30


class JobHistoryService(JobHistoryServiceProtocol):
    """Read and aggregation operations over jobs, attempts and their stats."""

    def __init__(
        self,
        planner: JobQueryPlanner,
        hydrator: StatsHydrator,
        sync_progress: SyncProgressAggregator,
        debug_assembler: JobDebugInfoAssembler,
        log_reader: LogReaderProtocol,
    ) -> None:
        """Initialize with injected collaborators."""
        self._planner = planner
        self._hydrator = hydrator
        self._sync_progress = sync_progress
        self._debug_assembler = debug_assembler
        self._log_reader = log_reader

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_jobs(
        self, request: schemas.JobListRequest, ctx: ApiContext
    ) -> schemas.JobReadList:
        """List jobs of one scope (or unscoped) with a total count."""
        ctx.logger.info(f"Listing jobs for config {request.config_id}")
        page = await self._planner.list_jobs(request)
        return await self._to_read_list(page, ctx)

    async def list_jobs_for_workspaces(
        self, request: schemas.JobListForWorkspacesRequest, ctx: ApiContext
    ) -> schemas.JobReadList:
        """List jobs across workspaces; the total is the page length."""
        ctx.logger.info(f"Listing jobs for {len(request.workspace_ids)} workspace(s)")
        page = await self._planner.list_jobs_for_workspaces(request)
        return await self._to_read_list(page, ctx)

    async def _to_read_list(self, page: JobPage, ctx: ApiContext) -> schemas.JobReadList:
        job_reads = [to_job_with_attempts_read(job) for job in page.jobs]
        await self._hydrator.hydrate(
            job_reads,
            page.jobs,
            hydration_enabled=ctx.has_feature(FeatureFlag.HYDRATE_AGGREGATED_STATS),
        )
        return schemas.JobReadList(jobs=job_reads, total_job_count=page.total_count)

    # ------------------------------------------------------------------
    # Single job views
    # ------------------------------------------------------------------

    async def get_job_info(self, job_id: int, ctx: ApiContext) -> schemas.JobInfoRead:
        """Full job with attempts and their logs."""
        ctx.logger.info(f"Getting job info for job {job_id}")
        job = await self._planner.get_job(job_id)
        return await build_job_info_read(job, self._log_reader)

    async def get_job_info_without_logs(
        self, job_id: int, ctx: ApiContext
    ) -> schemas.JobInfoRead:
        """Job with hydrated attempts, logs omitted."""
        ctx.logger.info(f"Getting job info without logs for job {job_id}")
        job = await self._planner.get_job(job_id)
        job_read = to_job_with_attempts_read(job)
        await self._hydrator.hydrate([job_read], [job], hydration_enabled=True)
        return build_job_info_without_logs(job_read)

    async def get_job_info_light(self, job_id: int, ctx: ApiContext) -> schemas.JobInfoLightRead:
        """Job record only."""
        job = await self._planner.get_job(job_id)
        return to_job_info_light_read(job)

    async def get_attempt_normalization_statuses(
        self, job_id: int, ctx: ApiContext
    ) -> List[schemas.AttemptNormalizationStatusRead]:
        """Normalization status of each attempt of a job."""
        statuses = await self._planner.attempt_normalization_statuses(job_id)
        return [to_attempt_normalization_status_read(status) for status in statuses]

    async def get_job_debug_info(self, job_id: int, ctx: ApiContext) -> schemas.JobDebugInfoRead:
        """Consolidated debug record for a job."""
        ctx.logger.info(f"Assembling debug info for job {job_id}")
        return await self._debug_assembler.get_job_debug_info(job_id)

    # ------------------------------------------------------------------
    # Per-connection views
    # ------------------------------------------------------------------

    async def get_last_replication_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> schemas.JobOptionalRead:
        """Latest replication job of a connection, or an explicit absence."""
        job = await self._planner.latest_replication_job(connection_id)
        return to_job_optional_read(job)

    async def get_latest_running_sync_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> Optional[schemas.JobRead]:
        """Most recent non-terminal sync job of a connection."""
        job = await self._planner.latest_non_terminal_sync_job(connection_id)
        return to_job_read(job) if job is not None else None

    async def get_connection_sync_progress(
        self, connection_id: UUID, ctx: ApiContext
    ) -> List[schemas.ConnectionSyncProgressReadItem]:
        """Per-stream progress of the connection's running sync."""
        return await self._sync_progress.get_connection_sync_progress(connection_id)

    async def get_latest_sync_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> Optional[schemas.JobRead]:
        """Most recent sync job of a connection in any status."""
        job = await self._planner.latest_sync_job(connection_id)
        return to_job_read(job) if job is not None else None

    async def get_latest_sync_jobs_for_connections(
        self, connection_ids: List[UUID], ctx: ApiContext
    ) -> List[schemas.JobStatusSummary]:
        """Latest sync job status of each connection."""
        return await self._planner.latest_sync_jobs_for_connections(connection_ids)

    async def get_running_sync_jobs_for_connections(
        self, connection_ids: List[UUID], ctx: ApiContext
    ) -> List[schemas.JobRead]:
        """All non-terminal sync jobs across the connections."""
        jobs = await self._planner.running_sync_jobs_for_connections(connection_ids)
        return [to_job_read(job) for job in jobs]

    async def get_connection_data_history(
        self,
        connection_id: UUID,
        ctx: ApiContext,
        job_count: int = DEFAULT_DATA_HISTORY_JOB_COUNT,
    ) -> List[schemas.ConnectionDataHistoryReadItem]:
        """Data moved by the connection's most recent finished syncs, oldest first."""
        jobs = await self._planner.recent_terminal_sync_jobs(connection_id, job_count)
        job_reads = [to_job_with_attempts_read(job) for job in jobs]
        await self._hydrator.hydrate(job_reads, jobs, hydration_enabled=True)
        return [to_data_history_item(job_read) for job_read in reversed(job_reads)]
