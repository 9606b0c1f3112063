"""Pure conversions from job store records to view records."""

from typing import List, Optional

from synchistory import schemas


def to_sync_stats_read(stats: schemas.SyncStats) -> schemas.SyncStatsRead:
    """Counters to their view form."""
    return schemas.SyncStatsRead(**stats.model_dump())


def to_job_read(job: schemas.Job) -> schemas.JobRead:
    """Job header without statistics."""
    return schemas.JobRead(
        id=job.id,
        config_type=job.config_type,
        config_id=job.scope,
        status=job.status,
        created_at=job.created_at,
        updated_at=job.updated_at,
        started_at=job.started_at,
    )


def to_attempt_read(attempt: schemas.Attempt) -> schemas.AttemptRead:
    """Attempt header without statistics."""
    return schemas.AttemptRead(
        id=attempt.attempt_number,
        status=attempt.status,
        created_at=attempt.created_at,
        updated_at=attempt.updated_at,
        ended_at=attempt.ended_at,
    )


def to_job_with_attempts_read(job: schemas.Job) -> schemas.JobWithAttemptsRead:
    """Job with its attempts, in attempt order."""
    return schemas.JobWithAttemptsRead(
        job=to_job_read(job),
        attempts=[to_attempt_read(attempt) for attempt in job.attempts],
    )


def to_attempt_info_read(
    attempt: schemas.AttemptRead, log_lines: Optional[List[str]] = None
) -> schemas.AttemptInfoRead:
    """Attempt view paired with its log tail."""
    return schemas.AttemptInfoRead(
        attempt=attempt, logs=schemas.LogRead(log_lines=list(log_lines or []))
    )


def to_job_info_light_read(job: schemas.Job) -> schemas.JobInfoLightRead:
    return schemas.JobInfoLightRead(job=to_job_read(job))


def to_job_optional_read(job: Optional[schemas.Job]) -> schemas.JobOptionalRead:
    return schemas.JobOptionalRead(job=to_job_read(job) if job is not None else None)


def to_job_debug_read(
    job: schemas.JobRead,
    source_definition: schemas.SourceDefinitionRead,
    destination_definition: schemas.DestinationDefinitionRead,
    platform_version: str,
) -> schemas.JobDebugRead:
    """Debug header for a job and the connector definitions it ran with."""
    return schemas.JobDebugRead(
        id=job.id,
        config_type=job.config_type,
        config_id=job.config_id,
        status=job.status,
        platform_version=platform_version,
        source_definition=source_definition,
        destination_definition=destination_definition,
    )


def to_data_history_item(
    job_read: schemas.JobWithAttemptsRead,
) -> schemas.ConnectionDataHistoryReadItem:
    """Totals moved by one hydrated job."""
    totals = job_read.job.aggregated_stats or schemas.SyncStatsRead()
    return schemas.ConnectionDataHistoryReadItem(
        job_id=job_read.job.id,
        job_created_at=job_read.job.created_at,
        job_updated_at=job_read.job.updated_at,
        records_emitted=totals.records_emitted,
        bytes_emitted=totals.bytes_emitted,
        records_committed=totals.records_committed,
        bytes_committed=totals.bytes_committed,
    )


def to_attempt_normalization_status_read(
    status: schemas.AttemptNormalizationStatus,
) -> schemas.AttemptNormalizationStatusRead:
    return schemas.AttemptNormalizationStatusRead(
        attempt_number=status.attempt_number,
        has_records_committed=status.records_committed is not None,
        records_committed=status.records_committed or 0,
        has_normalization_failed=status.normalization_failed,
    )
