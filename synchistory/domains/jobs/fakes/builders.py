"""Builders for job records used by fakes and tests."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from synchistory import schemas
from synchistory.core.shared_models import AttemptStatus, ConfigType, JobStatus, SyncMode

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_attempt(
    job_id: int,
    attempt_number: int,
    status: AttemptStatus = AttemptStatus.SUCCEEDED,
    log_path: Optional[str] = None,
    created_at: datetime = BASE_TIME,
) -> schemas.Attempt:
    return schemas.Attempt(
        attempt_number=attempt_number,
        job_id=job_id,
        status=status,
        log_path=log_path,
        created_at=created_at,
        updated_at=created_at,
    )


def make_job(
    job_id: int,
    scope: str,
    config_type: ConfigType = ConfigType.SYNC,
    status: JobStatus = JobStatus.SUCCEEDED,
    created_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
    attempt_count: int = 0,
    streams: Iterable[Tuple[str, Optional[str], SyncMode]] = (),
    workspace_id=None,
) -> schemas.Job:
    """A job created ``job_id`` minutes after BASE_TIME unless told otherwise."""
    created_at = created_at or BASE_TIME + timedelta(minutes=job_id)
    catalog = [
        schemas.ConfiguredStream(name=name, namespace=namespace, sync_mode=sync_mode)
        for name, namespace, sync_mode in streams
    ]
    return schemas.Job(
        id=job_id,
        config_type=config_type,
        scope=scope,
        workspace_id=workspace_id,
        config=schemas.JobConfig(config_type=config_type, configured_catalog=catalog or None),
        status=status,
        created_at=created_at,
        updated_at=updated_at or created_at,
        started_at=created_at,
        attempts=[make_attempt(job_id, n, created_at=created_at) for n in range(attempt_count)],
    )


def make_attempt_stats(
    *streams: Tuple[str, Optional[str], int, int],
) -> schemas.AttemptStats:
    """Stats from (name, namespace, records emitted, records committed) tuples.

    Bytes are recorded as ten times the record counts.
    """
    per_stream: List[schemas.StreamSyncStats] = [
        schemas.StreamSyncStats(
            stream_name=name,
            stream_namespace=namespace,
            stats=schemas.SyncStats(
                records_emitted=emitted,
                bytes_emitted=emitted * 10,
                records_committed=committed,
                bytes_committed=committed * 10,
            ),
        )
        for name, namespace, emitted, committed in streams
    ]
    return schemas.AttemptStats(per_stream_stats=per_stream)
