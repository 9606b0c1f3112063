"""Value objects for the jobs domain."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import FrozenSet, List, NamedTuple, Optional, Union
from uuid import UUID

from synchistory import schemas
from synchistory.core.shared_models import ConfigType, JobStatus, OrderByField, OrderByMethod


class StreamKey(NamedTuple):
    """Identity of a stream within a connection's catalog."""

    name: str
    namespace: Optional[str]


@dataclass(frozen=True)
class JobQuery:
    """Filter predicate and ordering for a job listing.

    The same instance drives both the page query and the count query, so a
    page and its total always agree. ``scopes`` and ``workspace_ids`` are
    ``None`` when unscoped. Time ranges are inclusive on both ends.
    """

    config_types: FrozenSet[ConfigType]
    scopes: Optional[FrozenSet[str]] = None
    workspace_ids: Optional[FrozenSet[UUID]] = None
    statuses: Optional[FrozenSet[JobStatus]] = None
    created_at_start: Optional[datetime] = None
    created_at_end: Optional[datetime] = None
    updated_at_start: Optional[datetime] = None
    updated_at_end: Optional[datetime] = None
    order_by: OrderByField = OrderByField.CREATED_AT
    order_method: OrderByMethod = OrderByMethod.DESC

    def replace(self, **changes) -> "JobQuery":
        """Copy of this query with some fields changed."""
        return replace(self, **changes)

    def matches(self, job: schemas.Job) -> bool:
        """Evaluate the filter predicate against one job."""
        if job.config_type not in self.config_types:
            return False
        if self.scopes is not None and job.scope not in self.scopes:
            return False
        if self.workspace_ids is not None and job.workspace_id not in self.workspace_ids:
            return False
        if self.statuses is not None and job.status not in self.statuses:
            return False
        return _in_range(job.created_at, self.created_at_start, self.created_at_end) and _in_range(
            job.updated_at, self.updated_at_start, self.updated_at_end
        )

    def order(self, jobs: List[schemas.Job]) -> List[schemas.Job]:
        """Sort jobs by the order field, ties broken by id in the same direction."""
        attr = "updated_at" if self.order_by == OrderByField.UPDATED_AT else "created_at"
        return sorted(
            jobs,
            key=lambda job: (getattr(job, attr), job.id),
            reverse=self.order_method == OrderByMethod.DESC,
        )


def _in_range(value: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


@dataclass(frozen=True)
class OffsetPage:
    """Fixed window: skip ``row_offset`` jobs, return up to ``page_size``."""

    page_size: int
    row_offset: int = 0


@dataclass(frozen=True)
class IncludingJobPage:
    """Window from the first job up to a whole number of pages covering a given job."""

    including_job_id: int
    page_size: int


PageRequest = Union[OffsetPage, IncludingJobPage]


@dataclass(frozen=True)
class JobQueryPlan:
    """A validated listing request."""

    query: JobQuery
    page: PageRequest


@dataclass
class JobPage:
    """A page of jobs plus the count of every job matching the same filter."""

    jobs: List[schemas.Job] = field(default_factory=list)
    total_count: int = 0
