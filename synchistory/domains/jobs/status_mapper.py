"""Translation between the API job status vocabulary and internal statuses."""

from typing import Iterable, List, Optional, Union

from synchistory.core.exceptions import UnrecognizedStatusException
from synchistory.core.shared_models import ApiJobStatus, JobStatus

STATUS_MAPPING: dict[ApiJobStatus, JobStatus] = {
    ApiJobStatus.PENDING: JobStatus.PENDING,
    ApiJobStatus.RUNNING: JobStatus.RUNNING,
    ApiJobStatus.INCOMPLETE: JobStatus.INCOMPLETE,
    ApiJobStatus.FAILED: JobStatus.FAILED,
    ApiJobStatus.SUCCEEDED: JobStatus.SUCCEEDED,
    ApiJobStatus.CANCELLED: JobStatus.CANCELLED,
}


def parse_api_status(token: Union[str, ApiJobStatus]) -> ApiJobStatus:
    """Resolve a status token by case-insensitive exact name match."""
    if isinstance(token, ApiJobStatus):
        return token
    if not isinstance(token, str):
        raise UnrecognizedStatusException(token)
    member = ApiJobStatus.__members__.get(token.strip().upper())
    if member is None:
        raise UnrecognizedStatusException(token)
    return member


def to_job_status(token: Union[str, ApiJobStatus]) -> JobStatus:
    """Map an API status token to the internal status."""
    api_status = parse_api_status(token)
    try:
        return STATUS_MAPPING[api_status]
    except KeyError:
        raise UnrecognizedStatusException(token) from None


def to_job_statuses(
    tokens: Optional[Iterable[Union[str, ApiJobStatus]]],
) -> Optional[List[JobStatus]]:
    """Map a list of API status tokens; None stays None (no status filter)."""
    if tokens is None:
        return None
    return [to_job_status(token) for token in tokens]
