"""Fake job repository for testing."""

from typing import Dict, List, Optional, Tuple

from synchistory import schemas
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.types import JobQuery


class FakeJobRepository(JobRepositoryProtocol):
    """In-memory fake for JobRepositoryProtocol.

    Filtering and ordering go through ``JobQuery.matches`` and
    ``JobQuery.order``, the same predicate the SQL builder mirrors.
    """

    def __init__(self) -> None:
        self._jobs: Dict[int, schemas.Job] = {}
        self._attempt_stats: Dict[Tuple[int, int], schemas.AttemptStats] = {}
        self._normalization_statuses: Dict[Tuple[int, int], schemas.AttemptNormalizationStatus] = {}
        self._calls: list[tuple] = []
        self._should_raise: Optional[Exception] = None

    def seed(self, *jobs: schemas.Job) -> None:
        for job in jobs:
            self._jobs[job.id] = job

    def seed_attempt_stats(
        self, job_id: int, attempt_number: int, stats: schemas.AttemptStats
    ) -> None:
        self._attempt_stats[(job_id, attempt_number)] = stats

    def seed_normalization_status(
        self, job_id: int, status: schemas.AttemptNormalizationStatus
    ) -> None:
        self._normalization_statuses[(job_id, status.attempt_number)] = status

    def set_error(self, error: Exception) -> None:
        """Make all subsequent calls raise this error."""
        self._should_raise = error

    def _record(self, *call) -> None:
        self._calls.append(call)
        if self._should_raise:
            raise self._should_raise

    def _matching(self, query: JobQuery) -> List[schemas.Job]:
        return query.order([job for job in self._jobs.values() if query.matches(job)])

    async def get_job(self, job_id: int) -> Optional[schemas.Job]:
        self._record("get_job", job_id)
        return self._jobs.get(job_id)

    async def list_jobs(
        self, query: JobQuery, limit: Optional[int] = None, offset: int = 0
    ) -> List[schemas.Job]:
        self._record("list_jobs", query, limit, offset)
        jobs = self._matching(query)[offset:]
        return jobs[:limit] if limit is not None else jobs

    async def count_jobs(self, query: JobQuery) -> int:
        self._record("count_jobs", query)
        return len(self._matching(query))

    async def get_last_job_per_scope(self, query: JobQuery) -> List[schemas.JobStatusSummary]:
        self._record("get_last_job_per_scope", query)
        latest: Dict[str, schemas.Job] = {}
        for job in self._jobs.values():
            if not query.matches(job):
                continue
            current = latest.get(job.scope)
            if current is None or (job.created_at, job.id) > (current.created_at, current.id):
                latest[job.scope] = job
        return [
            schemas.JobStatusSummary(job_id=job.id, scope=job.scope, status=job.status)
            for _, job in sorted(latest.items())
        ]

    async def get_attempt_stats(self, job_id: int, attempt_number: int) -> schemas.AttemptStats:
        self._record("get_attempt_stats", job_id, attempt_number)
        return self._attempt_stats.get((job_id, attempt_number), schemas.AttemptStats())

    async def get_attempt_stats_for_job(self, job_id: int) -> Dict[int, schemas.AttemptStats]:
        self._record("get_attempt_stats_for_job", job_id)
        return {
            attempt_number: stats
            for (stats_job_id, attempt_number), stats in sorted(self._attempt_stats.items())
            if stats_job_id == job_id
        }

    async def get_attempt_normalization_statuses(
        self, job_id: int
    ) -> List[schemas.AttemptNormalizationStatus]:
        self._record("get_attempt_normalization_statuses", job_id)
        return [
            status
            for (status_job_id, _), status in sorted(self._normalization_statuses.items())
            if status_job_id == job_id
        ]
