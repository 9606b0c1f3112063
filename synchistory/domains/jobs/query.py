"""Job query planner: validates listing requests and runs them as JobQuery plans.

Planning is pure and happens before any storage access, so a malformed
request fails with InvalidArgumentException without touching the store.
The page query and the total count share one JobQuery, which keeps the
count consistent with the page for a given filter.
"""

import math
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from synchistory import schemas
from synchistory.core.exceptions import InvalidArgumentException, JobNotFoundException
from synchistory.core.logging import logger
from synchistory.core.shared_models import (
    NON_TERMINAL_STATUSES,
    REPLICATION_TYPES,
    SYNC_REPLICATION_TYPES,
    TERMINAL_STATUSES,
    ConfigType,
    OrderByField,
    OrderByMethod,
)
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.status_mapper import to_job_statuses
from synchistory.domains.jobs.types import (
    IncludingJobPage,
    JobPage,
    JobQuery,
    JobQueryPlan,
    OffsetPage,
    PageRequest,
)

DEFAULT_PAGE_SIZE = 200

_ORDER_FIELDS = {
    **{f.value.lower(): f for f in OrderByField},
    **{f.name.lower(): f for f in OrderByField},
}
_ORDER_METHODS = {m.value.lower(): m for m in OrderByMethod}


def parse_ordering(
    field: Optional[str], method: Optional[str]
) -> Tuple[OrderByField, OrderByMethod]:
    """Validate ordering tokens against the allow-list.

    Missing values default to creation time, descending.
    """
    order_by = OrderByField.CREATED_AT
    order_method = OrderByMethod.DESC
    if field is not None:
        order_by = _ORDER_FIELDS.get(str(field).strip().lower())
        if order_by is None:
            raise InvalidArgumentException(f"Cannot order jobs by {field!r}")
    if method is not None:
        order_method = _ORDER_METHODS.get(str(method).strip().lower())
        if order_method is None:
            raise InvalidArgumentException(f"Unknown order method {method!r}")
    return order_by, order_method


def require_config_types(config_types: Optional[Iterable[ConfigType]]) -> frozenset:
    """Config types are mandatory for every listing."""
    if config_types is None:
        raise InvalidArgumentException("configTypes cannot be null.")
    resolved = frozenset(ConfigType(t) for t in config_types)
    if not resolved:
        raise InvalidArgumentException("Must include at least one configType.")
    return resolved


def _connection_scopes(connection_ids: Iterable[UUID]) -> frozenset:
    return frozenset(str(connection_id) for connection_id in connection_ids)


class JobQueryPlanner:
    """Builds job listings and the "latest job" lookups on top of the job repository."""

    def __init__(
        self,
        job_repo: JobRepositoryProtocol,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: Optional[int] = None,
    ) -> None:
        """Initialize with injected repository and paging bounds."""
        self._job_repo = job_repo
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan_list(self, request: schemas.JobListRequest) -> JobQueryPlan:
        """Validate a single-scope (or unscoped) listing request."""
        scopes = frozenset({request.config_id}) if request.config_id is not None else None
        query = self._build_query(request, scopes=scopes)
        return JobQueryPlan(query=query, page=self._resolve_page(request, request.including_job_id))

    def plan_workspace_list(self, request: schemas.JobListForWorkspacesRequest) -> JobQueryPlan:
        """Validate a workspace-scoped listing request."""
        query = self._build_query(request, workspace_ids=frozenset(request.workspace_ids))
        return JobQueryPlan(query=query, page=self._resolve_page(request, None))

    def _build_query(
        self,
        request: schemas.JobListFilter,
        scopes: Optional[frozenset] = None,
        workspace_ids: Optional[frozenset] = None,
    ) -> JobQuery:
        config_types = require_config_types(request.config_types)
        statuses = to_job_statuses(request.statuses)
        order_by, order_method = parse_ordering(request.order_by_field, request.order_by_method)
        return JobQuery(
            config_types=config_types,
            scopes=scopes,
            workspace_ids=workspace_ids,
            statuses=frozenset(statuses) if statuses is not None else None,
            created_at_start=request.created_at_start,
            created_at_end=request.created_at_end,
            updated_at_start=request.updated_at_start,
            updated_at_end=request.updated_at_end,
            order_by=order_by,
            order_method=order_method,
        )

    def _resolve_page(
        self,
        request: schemas.JobListFilter,
        including_job_id: Optional[int],
    ) -> PageRequest:
        pagination = request.pagination
        page_size = self._default_page_size
        row_offset = 0
        if pagination is not None:
            if pagination.page_size is not None:
                page_size = pagination.page_size
            if pagination.row_offset is not None:
                row_offset = pagination.row_offset

        if page_size < 1:
            raise InvalidArgumentException("pageSize must be at least 1.")
        if self._max_page_size is not None and page_size > self._max_page_size:
            raise InvalidArgumentException(f"pageSize cannot exceed {self._max_page_size}.")
        if row_offset < 0:
            raise InvalidArgumentException("rowOffset cannot be negative.")

        # The cursor form wins over an offset when both are given
        if including_job_id is not None:
            return IncludingJobPage(including_job_id=including_job_id, page_size=page_size)
        return OffsetPage(page_size=page_size, row_offset=row_offset)

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_jobs(self, request: schemas.JobListRequest) -> JobPage:
        """Page of jobs plus the total count under the same filter."""
        plan = self.plan_list(request)
        jobs = await self.fetch_page(plan)
        total = await self._job_repo.count_jobs(plan.query)
        return JobPage(jobs=jobs, total_count=total)

    async def list_jobs_for_workspaces(
        self, request: schemas.JobListForWorkspacesRequest
    ) -> JobPage:
        """Page of jobs across workspaces; no separate count query is issued."""
        plan = self.plan_workspace_list(request)
        jobs = await self.fetch_page(plan)
        return JobPage(jobs=jobs, total_count=len(jobs))

    async def fetch_page(self, plan: JobQueryPlan) -> List[schemas.Job]:
        """Run a plan's page query."""
        logger.debug(f"Running job query {plan.query} with page {plan.page}")
        if isinstance(plan.page, IncludingJobPage):
            return await self._fetch_page_including(plan.query, plan.page)
        return await self._job_repo.list_jobs(
            plan.query, limit=plan.page.page_size, offset=plan.page.row_offset
        )

    async def _fetch_page_including(
        self, query: JobQuery, page: IncludingJobPage
    ) -> List[schemas.Job]:
        """First pages, in whole page multiples, down to and including the target job.

        The window filters by config type and scope only, so status and time
        filters never push the target out of its own page. Ordering is forced
        to creation time descending so that every job created at or after the
        target precedes it.
        """
        window = JobQuery(
            config_types=query.config_types,
            scopes=query.scopes,
            order_by=OrderByField.CREATED_AT,
            order_method=OrderByMethod.DESC,
        )
        target = await self._job_repo.get_job(page.including_job_id)
        if target is None or not window.matches(target):
            logger.info(
                f"Job {page.including_job_id} is outside the listed config types or scope, "
                "returning an empty page"
            )
            return []

        jobs_up_to_target = await self._job_repo.count_jobs(
            window.replace(created_at_start=target.created_at)
        )
        pages = max(1, math.ceil(jobs_up_to_target / page.page_size))
        return await self._job_repo.list_jobs(window, limit=pages * page.page_size, offset=0)

    # ------------------------------------------------------------------
    # Single job and per-connection lookups
    # ------------------------------------------------------------------

    async def get_job(self, job_id: int) -> schemas.Job:
        """Get a job by id or raise JobNotFoundException."""
        job = await self._job_repo.get_job(job_id)
        if job is None:
            raise JobNotFoundException(job_id)
        return job

    async def attempt_normalization_statuses(
        self, job_id: int
    ) -> List[schemas.AttemptNormalizationStatus]:
        """Normalization status of each attempt of an existing job."""
        await self.get_job(job_id)
        return await self._job_repo.get_attempt_normalization_statuses(job_id)

    async def latest_non_terminal_sync_job(self, connection_id: UUID) -> Optional[schemas.Job]:
        """Most recently created pending/running/incomplete sync job of a connection."""
        jobs = await self._job_repo.list_jobs(
            JobQuery(
                config_types=SYNC_REPLICATION_TYPES,
                scopes=_connection_scopes([connection_id]),
                statuses=NON_TERMINAL_STATUSES,
            )
        )
        if len(jobs) > 1:
            # At most one non-terminal job per connection is expected; the newest wins
            logger.warning(
                f"Connection {connection_id} has {len(jobs)} non-terminal sync jobs, "
                f"using the most recent ({jobs[0].id})"
            )
        return jobs[0] if jobs else None

    async def latest_sync_job(self, connection_id: UUID) -> Optional[schemas.Job]:
        """Most recently created sync job of a connection in any status."""
        return await self._latest_job(connection_id, SYNC_REPLICATION_TYPES)

    async def latest_replication_job(self, connection_id: UUID) -> Optional[schemas.Job]:
        """Most recently created replication job (sync, reset, refresh, clear)."""
        return await self._latest_job(connection_id, REPLICATION_TYPES)

    async def _latest_job(
        self, connection_id: UUID, config_types: frozenset
    ) -> Optional[schemas.Job]:
        jobs = await self._job_repo.list_jobs(
            JobQuery(config_types=config_types, scopes=_connection_scopes([connection_id])),
            limit=1,
        )
        return jobs[0] if jobs else None

    async def latest_sync_jobs_for_connections(
        self, connection_ids: List[UUID]
    ) -> List[schemas.JobStatusSummary]:
        """Latest sync job status per connection, in a single query."""
        if not connection_ids:
            return []
        return await self._job_repo.get_last_job_per_scope(
            JobQuery(config_types=SYNC_REPLICATION_TYPES, scopes=_connection_scopes(connection_ids))
        )

    async def running_sync_jobs_for_connections(
        self, connection_ids: List[UUID]
    ) -> List[schemas.Job]:
        """Every non-terminal sync job across the connections, newest first."""
        if not connection_ids:
            return []
        return await self._job_repo.list_jobs(
            JobQuery(
                config_types=SYNC_REPLICATION_TYPES,
                scopes=_connection_scopes(connection_ids),
                statuses=NON_TERMINAL_STATUSES,
            )
        )

    async def recent_terminal_sync_jobs(
        self, connection_id: UUID, limit: int
    ) -> List[schemas.Job]:
        """The connection's most recent finished sync jobs, newest first."""
        if limit < 1:
            raise InvalidArgumentException("jobCount must be at least 1.")
        return await self._job_repo.list_jobs(
            JobQuery(
                config_types=SYNC_REPLICATION_TYPES,
                scopes=_connection_scopes([connection_id]),
                statuses=TERMINAL_STATUSES,
            ),
            limit=limit,
        )
