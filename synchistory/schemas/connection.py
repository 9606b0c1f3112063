"""Connection context records resolved for debug assembly."""

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ConnectionRead(BaseModel):
    """A configured pairing of a source and a destination."""

    connection_id: UUID
    name: str
    source_id: UUID
    destination_id: UUID
    status: str
    workspace_id: Optional[UUID] = None


class SourceRead(BaseModel):
    """A configured source."""

    source_id: UUID
    name: str
    source_definition_id: UUID
    workspace_id: Optional[UUID] = None
    connection_configuration: Dict[str, Any] = Field(default_factory=dict)


class DestinationRead(BaseModel):
    """A configured destination."""

    destination_id: UUID
    name: str
    destination_definition_id: UUID
    workspace_id: Optional[UUID] = None
    connection_configuration: Dict[str, Any] = Field(default_factory=dict)


class SourceDefinitionRead(BaseModel):
    """Connector definition a source is built from."""

    source_definition_id: UUID
    name: str
    docker_repository: str
    docker_image_tag: str


class DestinationDefinitionRead(BaseModel):
    """Connector definition a destination is built from."""

    destination_definition_id: UUID
    name: str
    docker_repository: str
    docker_image_tag: str
