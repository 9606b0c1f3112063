"""View records returned by the job history services."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from synchistory.core.shared_models import AttemptStatus, ConfigType, JobStatus, SyncMode
from synchistory.schemas.connection import (
    ConnectionRead,
    DestinationDefinitionRead,
    DestinationRead,
    SourceDefinitionRead,
    SourceRead,
)
from synchistory.schemas.workflow import WorkflowStateRead


class SyncStatsRead(BaseModel):
    """Aggregated counters."""

    records_emitted: int = 0
    bytes_emitted: int = 0
    records_committed: int = 0
    bytes_committed: int = 0


class StreamStatsRead(BaseModel):
    """Counters for one stream, per attempt or merged across a job's attempts."""

    stream_name: str
    stream_namespace: Optional[str] = None
    records_emitted: int = 0
    bytes_emitted: int = 0
    records_committed: int = 0
    bytes_committed: int = 0
    sync_mode: Optional[SyncMode] = None


class AttemptRead(BaseModel):
    """An attempt as shown to API consumers."""

    id: int = Field(..., description="Attempt number within the job")
    status: AttemptStatus
    created_at: datetime
    updated_at: datetime
    ended_at: Optional[datetime] = None
    records_synced: Optional[int] = None
    bytes_synced: Optional[int] = None
    total_stats: Optional[SyncStatsRead] = None
    stream_stats: Optional[List[StreamStatsRead]] = None


class JobRead(BaseModel):
    """A job as shown to API consumers."""

    id: int
    config_type: ConfigType
    config_id: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime
    started_at: Optional[datetime] = None
    aggregated_stats: Optional[SyncStatsRead] = None
    stream_aggregated_stats: Optional[List[StreamStatsRead]] = None


class JobWithAttemptsRead(BaseModel):
    """A job with its attempts."""

    job: JobRead
    attempts: List[AttemptRead] = Field(default_factory=list)


class JobReadList(BaseModel):
    """A page of jobs plus the unpaginated count for the same filter."""

    jobs: List[JobWithAttemptsRead]
    total_job_count: int


class LogRead(BaseModel):
    """Tail of an attempt's log."""

    log_lines: List[str] = Field(default_factory=list)


class AttemptInfoRead(BaseModel):
    """An attempt together with its logs."""

    attempt: AttemptRead
    logs: LogRead = Field(default_factory=LogRead)


class JobInfoRead(BaseModel):
    """A job with attempt infos."""

    job: JobRead
    attempts: List[AttemptInfoRead] = Field(default_factory=list)


class JobInfoLightRead(BaseModel):
    """Minimal job projection."""

    job: JobRead


class JobOptionalRead(BaseModel):
    """A job, or an explicit absence."""

    job: Optional[JobRead] = None


class ConnectionSyncProgressReadItem(BaseModel):
    """Live progress of one stream of a running sync."""

    job_id: int
    stream_name: str
    stream_namespace: Optional[str] = None
    records_extracted: int = 0
    records_loaded: int = 0
    bytes_extracted: int = 0
    bytes_loaded: int = 0
    sync_started_at: Optional[datetime] = None


class AttemptNormalizationStatusRead(BaseModel):
    """Normalization outcome of one attempt."""

    attempt_number: int
    has_records_committed: bool
    records_committed: int = 0
    has_normalization_failed: bool


class ConnectionDataHistoryReadItem(BaseModel):
    """Data moved by one finished sync job."""

    job_id: int
    job_created_at: datetime
    job_updated_at: datetime
    records_emitted: int = 0
    bytes_emitted: int = 0
    records_committed: int = 0
    bytes_committed: int = 0


class JobDebugRead(BaseModel):
    """Job header of a debug record."""

    id: int
    config_type: ConfigType
    config_id: str
    status: JobStatus
    platform_version: str
    source_definition: SourceDefinitionRead
    destination_definition: DestinationDefinitionRead


class JobDebugInfoRead(BaseModel):
    """Everything needed to diagnose a job."""

    job: JobDebugRead
    attempts: List[AttemptInfoRead] = Field(default_factory=list)
    connection: ConnectionRead
    source: SourceRead
    destination: DestinationRead
    workflow_state: Optional[WorkflowStateRead] = None
