"""Schemas for the sync history service."""

from .connection import (
    ConnectionRead,
    DestinationDefinitionRead,
    DestinationRead,
    SourceDefinitionRead,
    SourceRead,
)
from .job import (
    Attempt,
    AttemptNormalizationStatus,
    AttemptStats,
    ConfiguredStream,
    Job,
    JobConfig,
    JobStatusSummary,
    StreamSyncStats,
    SyncStats,
)
from .job_read import (
    AttemptInfoRead,
    AttemptNormalizationStatusRead,
    AttemptRead,
    ConnectionDataHistoryReadItem,
    ConnectionSyncProgressReadItem,
    JobDebugInfoRead,
    JobDebugRead,
    JobInfoLightRead,
    JobInfoRead,
    JobOptionalRead,
    JobRead,
    JobReadList,
    JobWithAttemptsRead,
    LogRead,
    StreamStatsRead,
    SyncStatsRead,
)
from .job_request import JobListFilter, JobListForWorkspacesRequest, JobListRequest, Pagination
from .workflow import WorkflowStateRead
