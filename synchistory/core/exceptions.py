"""Shared exceptions module.

Every collaborator adapter translates its native failures into one of
these kinds before they cross into the job history services.
"""

from typing import Any, Optional

from pydantic import ValidationError


class SyncHistoryException(Exception):
    """Base exception for sync history services."""

    pass


class InvalidArgumentException(SyncHistoryException):
    """Exception raised when a required request field is missing or malformed."""

    def __init__(self, message: Optional[str] = "Invalid argument"):
        """Create a new InvalidArgumentException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class UnrecognizedStatusException(InvalidArgumentException):
    """Raised when a status token is not part of the job status vocabulary."""

    def __init__(self, token: Any):
        self.token = token
        super().__init__(f"Unrecognized job status: {token!r}")


class NotFoundException(SyncHistoryException):
    """Exception raised when an object is not found."""

    def __init__(self, message: Optional[str] = "Object not found"):
        """Create a new NotFoundException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class JobNotFoundException(NotFoundException):
    """Raised when a job is not found."""

    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class ConfigNotFoundException(NotFoundException):
    """Raised when a connection, source, destination or definition is not found."""

    def __init__(self, config_type: str, config_id: Any):
        self.config_type = config_type
        self.config_id = str(config_id)
        super().__init__(f"{config_type} not found: {config_id}")


class ValidationFailureException(SyncHistoryException):
    """Raised when a resolved entity's persisted configuration fails validation."""

    def __init__(self, entity: str, errors: Optional[dict] = None):
        """Create a new ValidationFailureException instance.

        Args:
        ----
            entity (str): Identifies the offending entity, e.g. ``source:<id>``.
            errors (dict, optional): Unpacked validation errors.

        """
        self.entity = entity
        self.errors = errors or {"errors": []}
        super().__init__(f"Validation failed for {entity}")


class TransientIOException(SyncHistoryException):
    """Raised when the job store or a downstream collaborator is unreachable."""

    def __init__(self, service_name: str, message: Optional[str] = "Service unavailable"):
        """Create a new TransientIOException instance.

        Args:
        ----
            service_name (str): The name of the unreachable service.
            message (str, optional): The error message. Has default message.

        """
        self.service_name = service_name
        self.message = message
        super().__init__(f"{service_name}: {message}")


class ExternalServiceError(SyncHistoryException):
    """Exception raised when an external service fails in a non-transient way."""

    def __init__(self, service_name: str, message: Optional[str] = "External service failed"):
        """Create a new ExternalServiceError instance.

        Args:
        ----
            service_name (str): The name of the external service.
            message (str, optional): The error message. Has default message.

        """
        self.service_name = service_name
        self.message = message
        super().__init__(f"{service_name}: {message}")


def unpack_validation_error(exc: ValidationError) -> dict:
    """Unpack a Pydantic validation error into a dictionary.

    Args:
    ----
        exc (ValidationError): The Pydantic validation error.

    Returns:
    -------
        dict: The dictionary representation of the validation error.

    """
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"]
        error_messages.append({field: message})

    return {"errors": error_messages}
