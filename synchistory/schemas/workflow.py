"""Workflow runtime state schemas."""

from pydantic import BaseModel


class WorkflowStateRead(BaseModel):
    """Runtime state of a connection's orchestration workflow."""

    running: bool
