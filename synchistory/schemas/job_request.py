"""Request schemas for job listings.

Fields that carry a fixed vocabulary (statuses, ordering) are kept as raw
tokens here and validated by the query planner, so an unknown value
surfaces as an ``InvalidArgumentException`` rather than a parse error.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from synchistory.core.shared_models import ConfigType


class Pagination(BaseModel):
    """Offset pagination window."""

    page_size: Optional[int] = Field(None, description="Number of jobs per page")
    row_offset: Optional[int] = Field(None, description="Number of jobs to skip")


class JobListFilter(BaseModel):
    """Filter fields shared by all job listings."""

    config_types: Optional[List[ConfigType]] = Field(
        None, description="Job config types to include; required and non-empty"
    )
    statuses: Optional[List[str]] = None
    created_at_start: Optional[datetime] = None
    created_at_end: Optional[datetime] = None
    updated_at_start: Optional[datetime] = None
    updated_at_end: Optional[datetime] = None
    order_by_field: Optional[str] = None
    order_by_method: Optional[str] = None
    pagination: Optional[Pagination] = None


class JobListRequest(JobListFilter):
    """List jobs of one scope (connection) or of every scope."""

    config_id: Optional[str] = None
    including_job_id: Optional[int] = Field(
        None, description="Return the first pages up to and including this job"
    )


class JobListForWorkspacesRequest(JobListFilter):
    """List jobs across a set of workspaces."""

    workspace_ids: List[UUID] = Field(default_factory=list)
