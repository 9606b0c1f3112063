"""Job and attempt records as read from the job store."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from synchistory.core.shared_models import AttemptStatus, ConfigType, JobStatus, SyncMode


class ConfiguredStream(BaseModel):
    """A stream selected for sync in a job's catalog."""

    name: str
    namespace: Optional[str] = None
    sync_mode: SyncMode = SyncMode.FULL_REFRESH


class JobConfig(BaseModel):
    """Configuration snapshot a job was created with."""

    config_type: ConfigType
    configured_catalog: Optional[List[ConfiguredStream]] = None


class SyncStats(BaseModel):
    """Record and byte counters for a sync or a single stream."""

    records_emitted: int = 0
    bytes_emitted: int = 0
    records_committed: int = 0
    bytes_committed: int = 0

    def __add__(self, other: "SyncStats") -> "SyncStats":
        return SyncStats(
            records_emitted=self.records_emitted + other.records_emitted,
            bytes_emitted=self.bytes_emitted + other.bytes_emitted,
            records_committed=self.records_committed + other.records_committed,
            bytes_committed=self.bytes_committed + other.bytes_committed,
        )


class StreamSyncStats(BaseModel):
    """Counters for one stream within one attempt."""

    stream_name: str
    stream_namespace: Optional[str] = None
    stats: SyncStats = Field(default_factory=SyncStats)


class AttemptStats(BaseModel):
    """Per-stream counters recorded for one attempt."""

    per_stream_stats: List[StreamSyncStats] = Field(default_factory=list)

    @property
    def combined_stats(self) -> SyncStats:
        """Attempt totals: the sum over its streams."""
        total = SyncStats()
        for stream in self.per_stream_stats:
            total = total + stream.stats
        return total


class Attempt(BaseModel):
    """One execution of a job."""

    attempt_number: int
    job_id: int
    status: AttemptStatus
    log_path: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    ended_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Job(BaseModel):
    """A job with its attempts, ordered by attempt number."""

    id: int
    config_type: ConfigType
    scope: str
    workspace_id: Optional[UUID] = None
    config: JobConfig
    status: JobStatus
    created_at: datetime
    updated_at: datetime
    started_at: Optional[datetime] = None
    attempts: List[Attempt] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def connection_id(self) -> Optional[UUID]:
        """The scope parsed as a connection id, if it is one."""
        try:
            return UUID(self.scope)
        except ValueError:
            return None


class JobStatusSummary(BaseModel):
    """Latest-job projection used by bulk per-connection queries."""

    job_id: int
    scope: str
    status: JobStatus

    model_config = ConfigDict(from_attributes=True)


class AttemptNormalizationStatus(BaseModel):
    """Committed-record total and normalization outcome recorded in an attempt's output."""

    attempt_number: int
    records_committed: Optional[int] = None
    normalization_failed: bool = False
