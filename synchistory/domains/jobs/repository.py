"""Job repository backed by the SQL job store."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from synchistory import schemas
from synchistory.core.exceptions import TransientIOException
from synchistory.core.logging import logger
from synchistory.core.shared_models import OrderByField, OrderByMethod
from synchistory.db.session import read_only_session
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.types import JobQuery
from synchistory.models.attempt import Attempt
from synchistory.models.job import Job
from synchistory.models.stream_stats import StreamStats


class JobQueryBuilder:
    """Translates a JobQuery into SQL statements over the jobs table."""

    def __init__(self, query: JobQuery, statement: Optional[Select] = None):
        """Initialize query builder."""
        self.job_query = query
        self.statement = statement if statement is not None else select(Job)

    def with_config_types(self) -> "JobQueryBuilder":
        """Filter by config type."""
        values = sorted(t.value for t in self.job_query.config_types)
        self.statement = self.statement.where(Job.config_type.in_(values))
        return self

    def with_scopes(self) -> "JobQueryBuilder":
        """Filter by scope (connection id)."""
        if self.job_query.scopes is not None:
            self.statement = self.statement.where(Job.scope.in_(sorted(self.job_query.scopes)))
        return self

    def with_workspaces(self) -> "JobQueryBuilder":
        """Filter by owning workspace."""
        if self.job_query.workspace_ids is not None:
            self.statement = self.statement.where(
                Job.workspace_id.in_(sorted(self.job_query.workspace_ids))
            )
        return self

    def with_statuses(self) -> "JobQueryBuilder":
        """Filter by job status."""
        if self.job_query.statuses is not None:
            values = sorted(s.value for s in self.job_query.statuses)
            self.statement = self.statement.where(Job.status.in_(values))
        return self

    def with_time_ranges(self) -> "JobQueryBuilder":
        """Filter by inclusive created/updated ranges."""
        q = self.job_query
        if q.created_at_start is not None:
            self.statement = self.statement.where(Job.created_at >= q.created_at_start)
        if q.created_at_end is not None:
            self.statement = self.statement.where(Job.created_at <= q.created_at_end)
        if q.updated_at_start is not None:
            self.statement = self.statement.where(Job.updated_at >= q.updated_at_start)
        if q.updated_at_end is not None:
            self.statement = self.statement.where(Job.updated_at <= q.updated_at_end)
        return self

    def with_filters(self) -> "JobQueryBuilder":
        """Apply every filter predicate of the query."""
        return (
            self.with_config_types()
            .with_scopes()
            .with_workspaces()
            .with_statuses()
            .with_time_ranges()
        )

    def with_ordering(self) -> "JobQueryBuilder":
        """Order by the query's field, ties broken by id in the same direction."""
        column = Job.created_at
        if self.job_query.order_by == OrderByField.UPDATED_AT:
            column = Job.updated_at
        if self.job_query.order_method == OrderByMethod.ASC:
            self.statement = self.statement.order_by(column.asc(), Job.id.asc())
        else:
            self.statement = self.statement.order_by(column.desc(), Job.id.desc())
        return self

    def with_window(self, limit: Optional[int], offset: int) -> "JobQueryBuilder":
        """Add pagination."""
        if offset:
            self.statement = self.statement.offset(offset)
        if limit is not None:
            self.statement = self.statement.limit(limit)
        return self

    def build(self) -> Select:
        """Return the final statement."""
        return self.statement

    @classmethod
    def page(cls, query: JobQuery, limit: Optional[int] = None, offset: int = 0) -> Select:
        """Filtered, ordered and windowed job statement."""
        return cls(query).with_filters().with_ordering().with_window(limit, offset).build()

    @classmethod
    def count(cls, query: JobQuery) -> Select:
        """Count statement over the same predicate, without ordering or window."""
        filtered = cls(query, select(Job.id)).with_filters().build().subquery()
        return select(func.count()).select_from(filtered)

    @classmethod
    def last_per_scope(cls, query: JobQuery) -> Select:
        """Newest matching job of each scope (DISTINCT ON scope)."""
        statement = select(Job.id, Job.scope, Job.status)
        return (
            cls(query, statement)
            .with_filters()
            .build()
            .order_by(Job.scope, Job.created_at.desc(), Job.id.desc())
            .distinct(Job.scope)
        )


def attempt_stats_statement(job_id: int, attempt_number: Optional[int] = None) -> Select:
    """Per-stream rows of a job's attempts, in attempt then insertion order."""
    statement = (
        select(Attempt.attempt_number, StreamStats)
        .join(StreamStats, StreamStats.attempt_id == Attempt.id)
        .where(Attempt.job_id == job_id)
    )
    if attempt_number is not None:
        statement = statement.where(Attempt.attempt_number == attempt_number)
    return statement.order_by(Attempt.attempt_number, StreamStats.id)


def attempt_normalization_statement(job_id: int) -> Select:
    """Attempt numbers and outputs of a job, in attempt order."""
    return (
        select(Attempt.attempt_number, Attempt.output)
        .where(Attempt.job_id == job_id)
        .order_by(Attempt.attempt_number)
    )


def to_normalization_status(
    attempt_number: int, output: Optional[dict]
) -> schemas.AttemptNormalizationStatus:
    """Read the committed-record total and normalization failures from an attempt output.

    The output holds a ``sync`` section with ``total_stats.records_committed``
    and ``normalization_summary.failures``; any missing part reads as absent.
    """
    sync = (output or {}).get("sync") or {}
    records_committed = (sync.get("total_stats") or {}).get("records_committed")
    failures = (sync.get("normalization_summary") or {}).get("failures")
    return schemas.AttemptNormalizationStatus(
        attempt_number=attempt_number,
        records_committed=records_committed,
        normalization_failed=bool(failures),
    )


def _to_stream_sync_stats(row: StreamStats) -> schemas.StreamSyncStats:
    return schemas.StreamSyncStats(
        stream_name=row.stream_name,
        stream_namespace=row.stream_namespace,
        stats=schemas.SyncStats(
            records_emitted=row.records_emitted or 0,
            bytes_emitted=row.bytes_emitted or 0,
            records_committed=row.records_committed or 0,
            bytes_committed=row.bytes_committed or 0,
        ),
    )


class JobRepository(JobRepositoryProtocol):
    """Reads jobs, attempts and stream statistics from the SQL job store.

    Each call opens its own session, so concurrent calls (e.g. the stats
    fan-out during hydration) never share one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize with a session factory."""
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with read_only_session(self._session_factory) as db:
                yield db
        except (DBAPIError, PoolTimeoutError, TimeoutError, OSError) as e:
            logger.error(f"Job store query failed: {e}")
            raise TransientIOException("job_store", str(e)) from e

    async def get_job(self, job_id: int) -> Optional[schemas.Job]:
        """Get a job with its attempts by id."""
        async with self._session() as db:
            job = await db.get(Job, job_id)
            if job is None:
                return None
            return schemas.Job.model_validate(job, from_attributes=True)

    async def list_jobs(
        self, query: JobQuery, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Job]:
        """List jobs matching the query."""
        async with self._session() as db:
            result = await db.execute(JobQueryBuilder.page(query, limit, offset))
            return [
                schemas.Job.model_validate(job, from_attributes=True)
                for job in result.scalars().all()
            ]

    async def count_jobs(self, query: JobQuery) -> int:
        """Count jobs matching the query."""
        async with self._session() as db:
            result = await db.execute(JobQueryBuilder.count(query))
            return int(result.scalar_one())

    async def get_last_job_per_scope(self, query: JobQuery) -> List[schemas.JobStatusSummary]:
        """Newest matching job of each scope."""
        async with self._session() as db:
            result = await db.execute(JobQueryBuilder.last_per_scope(query))
            return [
                schemas.JobStatusSummary(job_id=row.id, scope=row.scope, status=row.status)
                for row in result
            ]

    async def get_attempt_stats(self, job_id: int, attempt_number: int) -> schemas.AttemptStats:
        """Per-stream statistics for one attempt."""
        async with self._session() as db:
            result = await db.execute(attempt_stats_statement(job_id, attempt_number))
            return schemas.AttemptStats(
                per_stream_stats=[_to_stream_sync_stats(row) for _, row in result]
            )

    async def get_attempt_stats_for_job(self, job_id: int) -> Dict[int, schemas.AttemptStats]:
        """Per-stream statistics for every attempt of a job."""
        async with self._session() as db:
            result = await db.execute(attempt_stats_statement(job_id))
            stats: Dict[int, schemas.AttemptStats] = {}
            for attempt_number, row in result:
                stats.setdefault(attempt_number, schemas.AttemptStats()).per_stream_stats.append(
                    _to_stream_sync_stats(row)
                )
            return stats

    async def get_attempt_normalization_statuses(
        self, job_id: int
    ) -> List[schemas.AttemptNormalizationStatus]:
        """Normalization status of every attempt of a job."""
        async with self._session() as db:
            result = await db.execute(attempt_normalization_statement(job_id))
            return [to_normalization_status(number, output) for number, output in result]
