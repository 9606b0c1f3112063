"""Job info views: a job with its attempts and their log tails."""

import asyncio
from typing import Optional

from synchistory import schemas
from synchistory.domains.jobs.converters import (
    to_attempt_info_read,
    to_attempt_read,
    to_job_read,
)
from synchistory.domains.logs.protocols import LogReaderProtocol


async def build_job_info_read(
    job: schemas.Job,
    log_reader: LogReaderProtocol,
    job_read: Optional[schemas.JobRead] = None,
) -> schemas.JobInfoRead:
    """Pair every attempt with its log tail.

    Log files are read concurrently; attempt order is preserved.

    Args:
        job: Job with its attempts
        log_reader: Where attempt logs are read from
        job_read: Already built job view to reuse (e.g. a hydrated one)
    """
    log_tails = await asyncio.gather(
        *(log_reader.tail(attempt.log_path) for attempt in job.attempts)
    )
    return schemas.JobInfoRead(
        job=job_read or to_job_read(job),
        attempts=[
            to_attempt_info_read(to_attempt_read(attempt), lines)
            for attempt, lines in zip(job.attempts, log_tails)
        ],
    )


def build_job_info_without_logs(
    job_with_attempts: schemas.JobWithAttemptsRead,
) -> schemas.JobInfoRead:
    """Attempt infos with empty logs, keeping any stats already on the views."""
    return schemas.JobInfoRead(
        job=job_with_attempts.job,
        attempts=[to_attempt_info_read(attempt) for attempt in job_with_attempts.attempts],
    )
