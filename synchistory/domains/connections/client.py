"""HTTP client for the configuration API.

Every httpx failure is translated here; no httpx exception type leaves
this module.
"""

from typing import Optional, Type, TypeVar
from uuid import UUID

import httpx
from pydantic import BaseModel, ValidationError

from synchistory import schemas
from synchistory.core.exceptions import (
    ConfigNotFoundException,
    ExternalServiceError,
    TransientIOException,
    ValidationFailureException,
    unpack_validation_error,
)
from synchistory.core.logging import logger
from synchistory.core.shared_models import ConfigKind
from synchistory.domains.connections.protocols import ConnectionContextClientProtocol

SERVICE_NAME = "config_api"

ModelT = TypeVar("ModelT", bound=BaseModel)

_PATHS = {
    ConfigKind.CONNECTION: "/v1/connections/{id}",
    ConfigKind.SOURCE: "/v1/sources/{id}",
    ConfigKind.DESTINATION: "/v1/destinations/{id}",
    ConfigKind.SOURCE_DEFINITION: "/v1/source_definitions/{id}",
    ConfigKind.DESTINATION_DEFINITION: "/v1/destination_definitions/{id}",
}


class HttpConnectionContextClient(ConnectionContextClientProtocol):
    """Looks up connection context over the configuration API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Root URL of the configuration API
            timeout_seconds: Per-request timeout
            http_client: Pre-built client (tests pass one with a MockTransport)
        """
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _fetch(self, kind: ConfigKind, config_id: UUID, model: Type[ModelT]) -> ModelT:
        path = _PATHS[kind].format(id=config_id)
        try:
            response = await self._client.get(path)
        except httpx.TimeoutException as e:
            raise TransientIOException(SERVICE_NAME, f"Timed out fetching {kind.value}") from e
        except httpx.TransportError as e:
            raise TransientIOException(SERVICE_NAME, f"Failed to fetch {kind.value}: {e}") from e

        if response.status_code == 404:
            raise ConfigNotFoundException(kind.value, config_id)
        if response.status_code == 422:
            raise ValidationFailureException(f"{kind.value}:{config_id}", _error_body(response))
        if response.status_code >= 500:
            raise TransientIOException(
                SERVICE_NAME, f"{kind.value} lookup failed with HTTP {response.status_code}"
            )
        if response.status_code != 200:
            raise ExternalServiceError(
                SERVICE_NAME, f"{kind.value} lookup failed with HTTP {response.status_code}"
            )

        try:
            return model.model_validate(response.json())
        except ValidationError as e:
            logger.error(f"Invalid {kind.value} {config_id} returned by the configuration API")
            raise ValidationFailureException(
                f"{kind.value}:{config_id}", unpack_validation_error(e)
            ) from e
        except ValueError as e:
            raise ValidationFailureException(
                f"{kind.value}:{config_id}", {"errors": [{"body": str(e)}]}
            ) from e

    async def get_connection(self, connection_id: UUID) -> schemas.ConnectionRead:
        """Get a connection by id."""
        return await self._fetch(ConfigKind.CONNECTION, connection_id, schemas.ConnectionRead)

    async def get_source(self, source_id: UUID) -> schemas.SourceRead:
        """Get a source by id."""
        return await self._fetch(ConfigKind.SOURCE, source_id, schemas.SourceRead)

    async def get_destination(self, destination_id: UUID) -> schemas.DestinationRead:
        """Get a destination by id."""
        return await self._fetch(ConfigKind.DESTINATION, destination_id, schemas.DestinationRead)

    async def get_source_definition(
        self, source_definition_id: UUID
    ) -> schemas.SourceDefinitionRead:
        """Get a source definition by id."""
        return await self._fetch(
            ConfigKind.SOURCE_DEFINITION, source_definition_id, schemas.SourceDefinitionRead
        )

    async def get_destination_definition(
        self, destination_definition_id: UUID
    ) -> schemas.DestinationDefinitionRead:
        """Get a destination definition by id."""
        return await self._fetch(
            ConfigKind.DESTINATION_DEFINITION,
            destination_definition_id,
            schemas.DestinationDefinitionRead,
        )


def _error_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {"errors": [{"body": response.text}]}
    if isinstance(body, dict) and "errors" in body:
        return body
    return {"errors": [body]}
