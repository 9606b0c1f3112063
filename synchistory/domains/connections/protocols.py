"""Protocols for connection context lookups."""

from typing import Protocol
from uuid import UUID

from synchistory import schemas


class ConnectionContextClientProtocol(Protocol):
    """Resolves connections, their source/destination and connector definitions.

    Implementations raise only this service's error kinds:
    ConfigNotFoundException, ValidationFailureException,
    TransientIOException or ExternalServiceError.
    Results are never cached; every call reads fresh state.
    """

    async def get_connection(self, connection_id: UUID) -> schemas.ConnectionRead:
        """Get a connection by id."""
        ...

    async def get_source(self, source_id: UUID) -> schemas.SourceRead:
        """Get a source by id."""
        ...

    async def get_destination(self, destination_id: UUID) -> schemas.DestinationRead:
        """Get a destination by id."""
        ...

    async def get_source_definition(
        self, source_definition_id: UUID
    ) -> schemas.SourceDefinitionRead:
        """Get a source definition by id."""
        ...

    async def get_destination_definition(
        self, destination_definition_id: UUID
    ) -> schemas.DestinationDefinitionRead:
        """Get a destination definition by id."""
        ...
