"""Debug info assembly.

Resolves everything needed to diagnose a job: the job and its attempts
(each with its own stream stats and log tail), the owning connection,
its source and destination, their connector definitions and, when an
orchestrator is configured, the connection's workflow state.

Each step feeds the next (job -> connection -> source/destination ->
definitions), so the lookups run one after another.
"""

from typing import Optional
from uuid import UUID

from synchistory import schemas
from synchistory.core.exceptions import ConfigNotFoundException
from synchistory.core.logging import logger
from synchistory.core.shared_models import ConfigKind
from synchistory.domains.connections.protocols import ConnectionContextClientProtocol
from synchistory.domains.jobs.converters import to_job_debug_read
from synchistory.domains.jobs.job_info import build_job_info_read
from synchistory.domains.jobs.protocols import JobRepositoryProtocol
from synchistory.domains.jobs.query import JobQueryPlanner
from synchistory.domains.jobs.stats_hydration import hydrate_attempt
from synchistory.domains.logs.protocols import LogReaderProtocol
from synchistory.domains.temporal.protocols import WorkflowStateReaderProtocol


class JobDebugInfoAssembler:
    """Builds the consolidated debug record of a job."""

    def __init__(
        self,
        planner: JobQueryPlanner,
        job_repo: JobRepositoryProtocol,
        connection_client: ConnectionContextClientProtocol,
        log_reader: LogReaderProtocol,
        workflow_state_reader: Optional[WorkflowStateReaderProtocol] = None,
        platform_version: str = "dev",
    ) -> None:
        """Initialize with injected collaborators.

        Args:
            planner: Job lookups
            job_repo: Per-attempt stats lookups
            connection_client: Connection, source, destination and definition lookups
            log_reader: Attempt log tails
            workflow_state_reader: Orchestrator state, None when not configured
            platform_version: Reported in the debug header
        """
        self._planner = planner
        self._job_repo = job_repo
        self._connection_client = connection_client
        self._log_reader = log_reader
        self._workflow_state_reader = workflow_state_reader
        self._platform_version = platform_version

    async def get_job_debug_info(self, job_id: int) -> schemas.JobDebugInfoRead:
        """Assemble the debug record.

        Raises:
            JobNotFoundException: The job does not exist.
            ConfigNotFoundException: The connection, source, destination or
                one of their definitions does not exist.
            ValidationFailureException: A resolved entity failed validation.
            TransientIOException: A collaborator is unreachable.
        """
        job = await self._planner.get_job(job_id)
        job_info = await build_job_info_read(job, self._log_reader)

        for attempt_info in job_info.attempts:
            attempt_stats = await self._job_repo.get_attempt_stats(
                job.id, attempt_info.attempt.id
            )
            hydrate_attempt(attempt_info.attempt, attempt_stats)

        connection_id = self._connection_id(job)
        connection = await self._connection_client.get_connection(connection_id)
        source = await self._connection_client.get_source(connection.source_id)
        destination = await self._connection_client.get_destination(connection.destination_id)
        source_definition = await self._connection_client.get_source_definition(
            source.source_definition_id
        )
        destination_definition = await self._connection_client.get_destination_definition(
            destination.destination_definition_id
        )

        workflow_state = None
        if self._workflow_state_reader is not None:
            workflow_state = await self._workflow_state_reader.get_workflow_state(connection_id)
            if workflow_state is None:
                logger.warning(f"No workflow state found for connection {connection_id}")

        return schemas.JobDebugInfoRead(
            job=to_job_debug_read(
                job_info.job, source_definition, destination_definition, self._platform_version
            ),
            attempts=job_info.attempts,
            connection=connection,
            source=source,
            destination=destination,
            workflow_state=workflow_state,
        )

    @staticmethod
    def _connection_id(job: schemas.Job) -> UUID:
        # Only connection-scoped jobs have a connection to resolve
        connection_id = job.connection_id
        if connection_id is None:
            raise ConfigNotFoundException(ConfigKind.CONNECTION.value, job.scope)
        return connection_id
