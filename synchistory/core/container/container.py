"""Dependency Injection Container.

The container is an immutable dataclass holding protocol implementations.
Construction belongs in the factory.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from synchistory.domains.connections.protocols import ConnectionContextClientProtocol
from synchistory.domains.jobs.protocols import JobHistoryServiceProtocol, JobRepositoryProtocol
from synchistory.domains.logs.protocols import LogReaderProtocol
from synchistory.domains.temporal.protocols import WorkflowStateReaderProtocol


@dataclass(frozen=True)
class Container:
    """Immutable container holding all protocol implementations.

    Usage:
        # Production: use the global container built by the factory
        from synchistory.core.container import container
        jobs = await container.job_history_service.list_jobs(request, ctx)

        # Testing: construct directly with fakes (see conftest.py)
        test_container = Container(job_repo=FakeJobRepository(), ...)
    """

    # Job store access
    job_repo: JobRepositoryProtocol

    # Connection, source, destination and definition lookups
    connection_client: ConnectionContextClientProtocol

    # Attempt log tails
    log_reader: LogReaderProtocol

    # API-facing job history operations
    job_history_service: JobHistoryServiceProtocol

    # Optional: None when Temporal is disabled
    workflow_state_reader: Optional[WorkflowStateReaderProtocol] = None

    def replace(self, **changes: Any) -> "Container":
        """Create a new container with some dependencies replaced.

        Args:
            **changes: Dependency name -> new implementation

        Returns:
            New Container with specified dependencies replaced
        """
        return replace(self, **changes)
