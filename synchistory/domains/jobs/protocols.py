"""Protocols for the jobs domain."""

from typing import Dict, List, Optional, Protocol
from uuid import UUID

from synchistory import schemas
from synchistory.core.context import ApiContext
from synchistory.domains.jobs.types import JobQuery


class JobRepositoryProtocol(Protocol):
    """Read-only access to jobs, attempts and attempt statistics.

    Listings honour ``JobQuery`` ordering, with ties broken by job id in
    the same direction. Storage failures surface as TransientIOException.
    """

    async def get_job(self, job_id: int) -> Optional[schemas.Job]:
        """Get a job with its attempts by id."""
        ...

    async def list_jobs(
        self, query: JobQuery, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Job]:
        """List jobs matching the query; ``limit=None`` returns every match."""
        ...

    async def count_jobs(self, query: JobQuery) -> int:
        """Count jobs matching the query, ignoring any window."""
        ...

    async def get_last_job_per_scope(self, query: JobQuery) -> List[schemas.JobStatusSummary]:
        """Most recently created matching job of each scope, as status summaries."""
        ...

    async def get_attempt_stats(self, job_id: int, attempt_number: int) -> schemas.AttemptStats:
        """Per-stream statistics for one attempt; empty when none were recorded."""
        ...

    async def get_attempt_stats_for_job(self, job_id: int) -> Dict[int, schemas.AttemptStats]:
        """Per-stream statistics for every attempt of a job, keyed by attempt number."""
        ...

    async def get_attempt_normalization_statuses(
        self, job_id: int
    ) -> List[schemas.AttemptNormalizationStatus]:
        """Normalization status of each attempt of a job, in attempt order."""
        ...


class JobHistoryServiceProtocol(Protocol):
    """API-facing job history views."""

    async def list_jobs(
        self, request: schemas.JobListRequest, ctx: ApiContext
    ) -> schemas.JobReadList:
        """List jobs of one scope (or unscoped) with a total count."""
        ...

    async def list_jobs_for_workspaces(
        self, request: schemas.JobListForWorkspacesRequest, ctx: ApiContext
    ) -> schemas.JobReadList:
        """List jobs across workspaces; the total is the page length."""
        ...

    async def get_job_info(self, job_id: int, ctx: ApiContext) -> schemas.JobInfoRead:
        """Full job with attempts and their logs."""
        ...

    async def get_job_info_without_logs(
        self, job_id: int, ctx: ApiContext
    ) -> schemas.JobInfoRead:
        """Job with hydrated attempts, logs omitted."""
        ...

    async def get_job_info_light(self, job_id: int, ctx: ApiContext) -> schemas.JobInfoLightRead:
        """Job record only."""
        ...

    async def get_last_replication_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> schemas.JobOptionalRead:
        """Latest replication job of a connection, or an explicit absence."""
        ...

    async def get_job_debug_info(self, job_id: int, ctx: ApiContext) -> schemas.JobDebugInfoRead:
        """Consolidated debug record for a job."""
        ...

    async def get_latest_running_sync_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> Optional[schemas.JobRead]:
        """Most recent non-terminal sync job of a connection."""
        ...

    async def get_connection_sync_progress(
        self, connection_id: UUID, ctx: ApiContext
    ) -> List[schemas.ConnectionSyncProgressReadItem]:
        """Per-stream progress of the connection's running sync."""
        ...

    async def get_latest_sync_job(
        self, connection_id: UUID, ctx: ApiContext
    ) -> Optional[schemas.JobRead]:
        """Most recent sync job of a connection in any status."""
        ...

    async def get_latest_sync_jobs_for_connections(
        self, connection_ids: List[UUID], ctx: ApiContext
    ) -> List[schemas.JobStatusSummary]:
        """Latest sync job status of each connection."""
        ...

    async def get_running_sync_jobs_for_connections(
        self, connection_ids: List[UUID], ctx: ApiContext
    ) -> List[schemas.JobRead]:
        """All non-terminal sync jobs across the connections."""
        ...

    async def get_connection_data_history(
        self, connection_id: UUID, ctx: ApiContext, job_count: int = 30
    ) -> List[schemas.ConnectionDataHistoryReadItem]:
        """Data moved by the connection's most recent finished syncs."""
        ...

    async def get_attempt_normalization_statuses(
        self, job_id: int, ctx: ApiContext
    ) -> List[schemas.AttemptNormalizationStatusRead]:
        """Normalization status of each attempt of a job."""
        ...
