"""Fake connection context client for testing."""

from typing import Any, Dict, Optional
from uuid import UUID

from synchistory import schemas
from synchistory.core.exceptions import ConfigNotFoundException
from synchistory.core.shared_models import ConfigKind
from synchistory.domains.connections.protocols import ConnectionContextClientProtocol


class FakeConnectionContextClient(ConnectionContextClientProtocol):
    """In-memory fake for ConnectionContextClientProtocol."""

    def __init__(self) -> None:
        self._store: Dict[ConfigKind, Dict[UUID, Any]] = {kind: {} for kind in ConfigKind}
        self._calls: list[tuple] = []
        self._errors: Dict[ConfigKind, Exception] = {}

    def seed_connection(self, connection: schemas.ConnectionRead) -> None:
        self._store[ConfigKind.CONNECTION][connection.connection_id] = connection

    def seed_source(self, source: schemas.SourceRead) -> None:
        self._store[ConfigKind.SOURCE][source.source_id] = source

    def seed_destination(self, destination: schemas.DestinationRead) -> None:
        self._store[ConfigKind.DESTINATION][destination.destination_id] = destination

    def seed_source_definition(self, definition: schemas.SourceDefinitionRead) -> None:
        self._store[ConfigKind.SOURCE_DEFINITION][definition.source_definition_id] = definition

    def seed_destination_definition(self, definition: schemas.DestinationDefinitionRead) -> None:
        self._store[ConfigKind.DESTINATION_DEFINITION][
            definition.destination_definition_id
        ] = definition

    def set_error(self, error: Exception, kind: Optional[ConfigKind] = None) -> None:
        """Make lookups of one kind (or every kind) raise this error."""
        for k in [kind] if kind else list(ConfigKind):
            self._errors[k] = error

    def _lookup(self, kind: ConfigKind, config_id: UUID) -> Any:
        self._calls.append((f"get_{kind.value}", config_id))
        if kind in self._errors:
            raise self._errors[kind]
        found = self._store[kind].get(config_id)
        if found is None:
            raise ConfigNotFoundException(kind.value, config_id)
        return found

    async def get_connection(self, connection_id: UUID) -> schemas.ConnectionRead:
        return self._lookup(ConfigKind.CONNECTION, connection_id)

    async def get_source(self, source_id: UUID) -> schemas.SourceRead:
        return self._lookup(ConfigKind.SOURCE, source_id)

    async def get_destination(self, destination_id: UUID) -> schemas.DestinationRead:
        return self._lookup(ConfigKind.DESTINATION, destination_id)

    async def get_source_definition(
        self, source_definition_id: UUID
    ) -> schemas.SourceDefinitionRead:
        return self._lookup(ConfigKind.SOURCE_DEFINITION, source_definition_id)

    async def get_destination_definition(
        self, destination_definition_id: UUID
    ) -> schemas.DestinationDefinitionRead:
        return self._lookup(ConfigKind.DESTINATION_DEFINITION, destination_definition_id)
