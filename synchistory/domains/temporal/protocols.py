"""Protocols for workflow state lookups."""

from typing import Optional, Protocol
from uuid import UUID

from synchistory import schemas


class WorkflowStateReaderProtocol(Protocol):
    """Reads the runtime state of a connection's orchestration workflow."""

    async def get_workflow_state(self, connection_id: UUID) -> Optional[schemas.WorkflowStateRead]:
        """Get the workflow state, or None when no workflow exists for the connection."""
        ...
