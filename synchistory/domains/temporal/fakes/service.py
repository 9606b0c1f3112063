"""Fake workflow state reader for testing."""

from typing import Dict, Optional
from uuid import UUID

from synchistory import schemas
from synchistory.domains.temporal.protocols import WorkflowStateReaderProtocol


class FakeWorkflowStateReader(WorkflowStateReaderProtocol):
    """In-memory fake for WorkflowStateReaderProtocol."""

    def __init__(self) -> None:
        self._states: Dict[UUID, schemas.WorkflowStateRead] = {}
        self._calls: list[tuple] = []
        self._should_raise: Optional[Exception] = None

    def seed(self, connection_id: UUID, running: bool) -> None:
        self._states[connection_id] = schemas.WorkflowStateRead(running=running)

    def set_error(self, error: Exception) -> None:
        """Make all subsequent calls raise this error."""
        self._should_raise = error

    async def get_workflow_state(self, connection_id: UUID) -> Optional[schemas.WorkflowStateRead]:
        self._calls.append(("get_workflow_state", connection_id))
        if self._should_raise:
            raise self._should_raise
        return self._states.get(connection_id)
