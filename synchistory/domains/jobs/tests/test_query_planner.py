"""Tests for JobQueryPlanner: validation, paging and the latest-job lookups."""

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional
from uuid import uuid4

import pytest

from synchistory import schemas
from synchistory.core.exceptions import (
    InvalidArgumentException,
    JobNotFoundException,
    UnrecognizedStatusException,
)
from synchistory.core.shared_models import ConfigType, JobStatus, OrderByField, OrderByMethod
from synchistory.domains.jobs.fakes.builders import BASE_TIME, make_job
from synchistory.domains.jobs.fakes.repository import FakeJobRepository
from synchistory.domains.jobs.query import JobQueryPlanner, parse_ordering
from synchistory.domains.jobs.types import IncludingJobPage, OffsetPage

CONNECTION_A = uuid4()
CONNECTION_B = uuid4()
SCOPE_A = str(CONNECTION_A)
SCOPE_B = str(CONNECTION_B)


@pytest.fixture
def repo() -> FakeJobRepository:
    repo = FakeJobRepository()
    # Five syncs on A (ids 1..5, created one minute apart), one on B, one reset on A
    repo.seed(*(make_job(i, SCOPE_A) for i in range(1, 6)))
    repo.seed(make_job(6, SCOPE_B))
    repo.seed(make_job(7, SCOPE_A, config_type=ConfigType.RESET_CONNECTION))
    return repo


@pytest.fixture
def planner(repo: FakeJobRepository) -> JobQueryPlanner:
    return JobQueryPlanner(repo, default_page_size=200, max_page_size=50)


def _request(**overrides) -> schemas.JobListRequest:
    fields = {"config_types": [ConfigType.SYNC], "config_id": SCOPE_A}
    fields.update(overrides)
    return schemas.JobListRequest(**fields)


def _ids(jobs: List[schemas.Job]) -> List[int]:
    return [job.id for job in jobs]


# ---------------------------------------------------------------------------
# list_jobs paging
# ---------------------------------------------------------------------------


@dataclass
class PageCase:
    name: str
    page_size: Optional[int] = None
    row_offset: Optional[int] = None
    including_job_id: Optional[int] = None
    expected_ids: List[int] = field(default_factory=list)


PAGE_CASES = [
    PageCase(name="default_page", expected_ids=[5, 4, 3, 2, 1]),
    PageCase(name="first_page", page_size=2, expected_ids=[5, 4]),
    PageCase(name="second_page", page_size=2, row_offset=2, expected_ids=[3, 2]),
    PageCase(name="past_the_end", page_size=2, row_offset=10, expected_ids=[]),
    PageCase(name="including_newest", page_size=2, including_job_id=5, expected_ids=[5, 4]),
    PageCase(
        name="including_spans_two_pages",
        page_size=2,
        including_job_id=2,
        expected_ids=[5, 4, 3, 2],
    ),
    PageCase(
        name="including_ignores_offset",
        page_size=2,
        row_offset=4,
        including_job_id=3,
        expected_ids=[5, 4, 3, 2],
    ),
    PageCase(name="including_unknown_job", page_size=2, including_job_id=99, expected_ids=[]),
    PageCase(name="including_other_scope", page_size=2, including_job_id=6, expected_ids=[]),
    PageCase(
        name="including_other_config_type", page_size=2, including_job_id=7, expected_ids=[]
    ),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("case", PAGE_CASES, ids=lambda c: c.name)
async def test_list_jobs_paging(planner: JobQueryPlanner, case: PageCase):
    pagination = None
    if case.page_size is not None or case.row_offset is not None:
        pagination = schemas.Pagination(page_size=case.page_size, row_offset=case.row_offset)

    page = await planner.list_jobs(
        _request(pagination=pagination, including_job_id=case.including_job_id)
    )

    assert _ids(page.jobs) == case.expected_ids
    # The total never depends on the window
    assert page.total_count == 5


@pytest.mark.asyncio
async def test_including_job_id_is_always_in_page(planner: JobQueryPlanner):
    for job_id in range(1, 6):
        page = await planner.list_jobs(
            _request(
                pagination=schemas.Pagination(page_size=3, row_offset=3),
                including_job_id=job_id,
            )
        )
        assert job_id in _ids(page.jobs)
        assert len(page.jobs) % 3 == 0 or len(page.jobs) == 5


@pytest.mark.asyncio
async def test_including_job_ignores_status_filter(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    repo.seed(make_job(2, SCOPE_A, status=JobStatus.FAILED))

    page = await planner.list_jobs(
        _request(
            statuses=["succeeded"],
            pagination=schemas.Pagination(page_size=1, row_offset=5),
            including_job_id=2,
        )
    )

    assert _ids(page.jobs) == [5, 4, 3, 2]
    # The total keeps the status filter
    assert page.total_count == 4


@pytest.mark.asyncio
async def test_including_job_ignores_time_filter(planner: JobQueryPlanner):
    page = await planner.list_jobs(
        _request(
            created_at_start=BASE_TIME + timedelta(minutes=4),
            pagination=schemas.Pagination(page_size=2),
            including_job_id=1,
        )
    )

    assert 1 in _ids(page.jobs)
    assert page.total_count == 2


@pytest.mark.asyncio
async def test_unscoped_listing_spans_connections(planner: JobQueryPlanner):
    page = await planner.list_jobs(_request(config_id=None))

    assert _ids(page.jobs) == [6, 5, 4, 3, 2, 1]
    assert page.total_count == 6


@pytest.mark.asyncio
async def test_status_filter(planner: JobQueryPlanner, repo: FakeJobRepository):
    repo.seed(make_job(8, SCOPE_A, status=JobStatus.FAILED))

    page = await planner.list_jobs(_request(statuses=["FAILED"]))

    assert _ids(page.jobs) == [8]
    assert page.total_count == 1


@pytest.mark.asyncio
async def test_time_range_filter_is_inclusive(planner: JobQueryPlanner):
    page = await planner.list_jobs(
        _request(
            created_at_start=BASE_TIME + timedelta(minutes=2),
            created_at_end=BASE_TIME + timedelta(minutes=4),
        )
    )

    assert _ids(page.jobs) == [4, 3, 2]


@pytest.mark.asyncio
async def test_order_by_updated_at_ascending(planner: JobQueryPlanner, repo: FakeJobRepository):
    # Job 1 was updated last
    repo.seed(make_job(1, SCOPE_A, updated_at=BASE_TIME + timedelta(hours=1)))

    page = await planner.list_jobs(_request(order_by_field="updatedAt", order_by_method="asc"))

    assert _ids(page.jobs) == [2, 3, 4, 5, 1]


# ---------------------------------------------------------------------------
# Validation: fails before any storage access
# ---------------------------------------------------------------------------


@dataclass
class InvalidCase:
    name: str
    overrides: dict
    error: type = InvalidArgumentException


INVALID_CASES = [
    InvalidCase(name="empty_config_types", overrides={"config_types": []}),
    InvalidCase(name="missing_config_types", overrides={"config_types": None}),
    InvalidCase(name="zero_page_size", overrides={"pagination": schemas.Pagination(page_size=0)}),
    InvalidCase(
        name="page_size_over_max", overrides={"pagination": schemas.Pagination(page_size=51)}
    ),
    InvalidCase(
        name="negative_offset", overrides={"pagination": schemas.Pagination(row_offset=-1)}
    ),
    InvalidCase(name="unknown_order_field", overrides={"order_by_field": "id"}),
    InvalidCase(name="unknown_order_method", overrides={"order_by_method": "sideways"}),
    InvalidCase(
        name="unknown_status",
        overrides={"statuses": ["running", "paused"]},
        error=UnrecognizedStatusException,
    ),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("case", INVALID_CASES, ids=lambda c: c.name)
async def test_invalid_request_performs_no_storage_call(
    planner: JobQueryPlanner, repo: FakeJobRepository, case: InvalidCase
):
    with pytest.raises(case.error):
        await planner.list_jobs(_request(**case.overrides))

    assert repo._calls == []


@pytest.mark.asyncio
async def test_workspace_listing_rejects_empty_config_types(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    with pytest.raises(InvalidArgumentException):
        await planner.list_jobs_for_workspaces(
            schemas.JobListForWorkspacesRequest(config_types=[], workspace_ids=[uuid4()])
        )
    assert repo._calls == []


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------


def test_plan_defaults(planner: JobQueryPlanner):
    plan = planner.plan_list(_request())

    assert plan.page == OffsetPage(page_size=200, row_offset=0)
    assert plan.query.scopes == frozenset({SCOPE_A})
    assert plan.query.statuses is None
    assert plan.query.order_by == OrderByField.CREATED_AT
    assert plan.query.order_method == OrderByMethod.DESC


def test_plan_prefers_including_job_over_offset(planner: JobQueryPlanner):
    plan = planner.plan_list(
        _request(pagination=schemas.Pagination(page_size=10, row_offset=30), including_job_id=3)
    )

    assert plan.page == IncludingJobPage(including_job_id=3, page_size=10)


@pytest.mark.parametrize(
    "field_token,method_token,expected",
    [
        (None, None, (OrderByField.CREATED_AT, OrderByMethod.DESC)),
        ("createdAt", "ASC", (OrderByField.CREATED_AT, OrderByMethod.ASC)),
        ("UPDATED_AT", "desc", (OrderByField.UPDATED_AT, OrderByMethod.DESC)),
        ("updatedat", None, (OrderByField.UPDATED_AT, OrderByMethod.DESC)),
    ],
)
def test_parse_ordering(field_token, method_token, expected):
    assert parse_ordering(field_token, method_token) == expected


# ---------------------------------------------------------------------------
# Workspace listing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_workspace_listing_total_is_page_length():
    workspace_id = uuid4()
    repo = FakeJobRepository()
    repo.seed(*(make_job(i, SCOPE_A, workspace_id=workspace_id) for i in range(1, 5)))
    repo.seed(make_job(5, SCOPE_B, workspace_id=uuid4()))
    planner = JobQueryPlanner(repo)

    page = await planner.list_jobs_for_workspaces(
        schemas.JobListForWorkspacesRequest(
            config_types=[ConfigType.SYNC],
            workspace_ids=[workspace_id],
            pagination=schemas.Pagination(page_size=3),
        )
    )

    assert _ids(page.jobs) == [4, 3, 2]
    assert page.total_count == 3
    assert not any(call[0] == "count_jobs" for call in repo._calls)


# ---------------------------------------------------------------------------
# Single job and per-connection lookups
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_job_not_found(planner: JobQueryPlanner):
    with pytest.raises(JobNotFoundException) as exc_info:
        await planner.get_job(404)
    assert exc_info.value.job_id == 404


@pytest.mark.asyncio
async def test_latest_non_terminal_sync_job_prefers_newest(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    repo.seed(make_job(10, SCOPE_A, status=JobStatus.RUNNING))
    repo.seed(make_job(11, SCOPE_A, status=JobStatus.PENDING))

    job = await planner.latest_non_terminal_sync_job(CONNECTION_A)

    assert job.id == 11


@pytest.mark.asyncio
async def test_latest_non_terminal_sync_job_none(planner: JobQueryPlanner):
    assert await planner.latest_non_terminal_sync_job(CONNECTION_A) is None


@pytest.mark.asyncio
async def test_latest_sync_job_ignores_resets(planner: JobQueryPlanner):
    job = await planner.latest_sync_job(CONNECTION_A)
    assert job.id == 5


@pytest.mark.asyncio
async def test_latest_replication_job_includes_resets(planner: JobQueryPlanner):
    job = await planner.latest_replication_job(CONNECTION_A)
    assert job.id == 7


@pytest.mark.asyncio
async def test_latest_replication_job_none_for_unknown_connection(planner: JobQueryPlanner):
    assert await planner.latest_replication_job(uuid4()) is None


@pytest.mark.asyncio
async def test_latest_sync_jobs_for_connections(planner: JobQueryPlanner):
    summaries = await planner.latest_sync_jobs_for_connections([CONNECTION_A, CONNECTION_B])

    by_scope = {summary.scope: summary for summary in summaries}
    assert by_scope[SCOPE_A].job_id == 5
    assert by_scope[SCOPE_B].job_id == 6
    assert by_scope[SCOPE_B].status == JobStatus.SUCCEEDED


@pytest.mark.asyncio
async def test_bulk_lookups_with_no_connections_skip_storage(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    assert await planner.latest_sync_jobs_for_connections([]) == []
    assert await planner.running_sync_jobs_for_connections([]) == []
    assert repo._calls == []


@pytest.mark.asyncio
async def test_running_sync_jobs_for_connections(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    repo.seed(make_job(10, SCOPE_A, status=JobStatus.RUNNING))
    repo.seed(make_job(11, SCOPE_B, status=JobStatus.INCOMPLETE))
    repo.seed(make_job(12, SCOPE_B, status=JobStatus.RUNNING, config_type=ConfigType.CLEAR))

    jobs = await planner.running_sync_jobs_for_connections([CONNECTION_A, CONNECTION_B])

    assert _ids(jobs) == [11, 10]


@pytest.mark.asyncio
async def test_recent_terminal_sync_jobs(planner: JobQueryPlanner, repo: FakeJobRepository):
    repo.seed(make_job(10, SCOPE_A, status=JobStatus.RUNNING))

    jobs = await planner.recent_terminal_sync_jobs(CONNECTION_A, limit=3)

    assert _ids(jobs) == [5, 4, 3]


@pytest.mark.asyncio
async def test_recent_terminal_sync_jobs_rejects_zero_limit(
    planner: JobQueryPlanner, repo: FakeJobRepository
):
    with pytest.raises(InvalidArgumentException):
        await planner.recent_terminal_sync_jobs(CONNECTION_A, limit=0)
    assert repo._calls == []
