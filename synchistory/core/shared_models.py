"""Shared models for the sync history service."""

from enum import Enum


class JobStatus(str, Enum):
    """Internal job status enum."""

    PENDING = "pending"
    RUNNING = "running"
    INCOMPLETE = "incomplete"
    FAILED = "failed"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"


class ApiJobStatus(str, Enum):
    """Job status vocabulary accepted from API consumers."""

    PENDING = "pending"
    RUNNING = "running"
    INCOMPLETE = "incomplete"
    FAILED = "failed"
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"


class AttemptStatus(str, Enum):
    """Attempt status enum."""

    RUNNING = "running"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


class ConfigType(str, Enum):
    """Kind of operation a job executes."""

    CHECK_CONNECTION_SOURCE = "check_connection_source"
    CHECK_CONNECTION_DESTINATION = "check_connection_destination"
    DISCOVER_SCHEMA = "discover_schema"
    GET_SPEC = "get_spec"
    SYNC = "sync"
    RESET_CONNECTION = "reset_connection"
    REFRESH = "refresh"
    CLEAR = "clear"


class SyncMode(str, Enum):
    """How a configured stream is read from the source."""

    FULL_REFRESH = "full_refresh"
    INCREMENTAL = "incremental"


class OrderByField(str, Enum):
    """Fields a job listing may be ordered by."""

    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class OrderByMethod(str, Enum):
    """Sort direction for a job listing."""

    ASC = "ASC"
    DESC = "DESC"


class FeatureFlag(str, Enum):
    """Feature flags evaluated per request context."""

    HYDRATE_AGGREGATED_STATS = "hydrate_aggregated_stats"


class ConfigKind(str, Enum):
    """Entities resolved while assembling a debug record."""

    CONNECTION = "connection"
    SOURCE = "source"
    DESTINATION = "destination"
    SOURCE_DEFINITION = "source_definition"
    DESTINATION_DEFINITION = "destination_definition"


NON_TERMINAL_STATUSES = frozenset({JobStatus.PENDING, JobStatus.RUNNING, JobStatus.INCOMPLETE})
TERMINAL_STATUSES = frozenset(set(JobStatus) - NON_TERMINAL_STATUSES)

# "sync-type" jobs; resets and clears only move data out of the destination
SYNC_REPLICATION_TYPES = frozenset({ConfigType.SYNC, ConfigType.REFRESH})
REPLICATION_TYPES = frozenset(
    {ConfigType.SYNC, ConfigType.RESET_CONNECTION, ConfigType.REFRESH, ConfigType.CLEAR}
)
