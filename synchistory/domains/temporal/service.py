"""Workflow state reader backed by Temporal.

Each connection is driven by one long-lived manager workflow whose id is
derived from the connection id.
"""

from typing import Optional
from uuid import UUID

from temporalio.client import WorkflowExecutionStatus
from temporalio.service import RPCError, RPCStatusCode

from synchistory import schemas
from synchistory.core.exceptions import TransientIOException
from synchistory.core.logging import logger
from synchistory.domains.temporal.protocols import WorkflowStateReaderProtocol
from synchistory.platform.temporal.client import temporal_client

DEFAULT_WORKFLOW_ID_TEMPLATE = "connection_manager_{connection_id}"


class TemporalWorkflowStateReader(WorkflowStateReaderProtocol):
    """Describes a connection's manager workflow through the Temporal client."""

    def __init__(self, workflow_id_template: str = DEFAULT_WORKFLOW_ID_TEMPLATE) -> None:
        self._workflow_id_template = workflow_id_template

    def workflow_id(self, connection_id: UUID) -> str:
        """Build the manager workflow id for a connection."""
        return self._workflow_id_template.format(connection_id=connection_id)

    async def get_workflow_state(self, connection_id: UUID) -> Optional[schemas.WorkflowStateRead]:
        """Describe the connection's workflow.

        Returns:
            The workflow state, or None if Temporal has no such workflow.

        Raises:
            TransientIOException: Temporal is unreachable or returned an error.
        """
        workflow_id = self.workflow_id(connection_id)
        try:
            client = await temporal_client.get_client()
            handle = client.get_workflow_handle(workflow_id)
            description = await handle.describe()
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                logger.info(f"Workflow {workflow_id} not found in Temporal")
                return None
            logger.error(f"Failed to describe workflow {workflow_id}: {e}")
            raise TransientIOException("temporal", str(e)) from e
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to reach Temporal for workflow {workflow_id}: {e}")
            raise TransientIOException("temporal", str(e)) from e

        return schemas.WorkflowStateRead(
            running=description.status == WorkflowExecutionStatus.RUNNING
        )
