"""Table-driven tests for HttpConnectionContextClient over httpx.MockTransport."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from uuid import uuid4

import httpx
import pytest

from synchistory.core.exceptions import (
    ConfigNotFoundException,
    ExternalServiceError,
    TransientIOException,
    ValidationFailureException,
)
from synchistory.core.shared_models import ConfigKind
from synchistory.domains.connections.client import HttpConnectionContextClient

BASE_URL = "http://config-api.test/api"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> HttpConnectionContextClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpConnectionContextClient(BASE_URL, http_client=http_client)


def _connection_payload(connection_id) -> dict:
    return {
        "connection_id": str(connection_id),
        "name": "pg -> wh",
        "source_id": str(uuid4()),
        "destination_id": str(uuid4()),
        "status": "active",
    }


@pytest.mark.asyncio
async def test_get_connection_success():
    connection_id = uuid4()
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=_connection_payload(connection_id))

    connection = await _client(handler).get_connection(connection_id)

    assert connection.connection_id == connection_id
    assert seen == [f"/api/v1/connections/{connection_id}"]


@pytest.mark.asyncio
async def test_each_lookup_hits_its_own_path():
    ids = {kind: uuid4() for kind in ConfigKind}
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(404)

    client = _client(handler)
    lookups = [
        (client.get_source, ConfigKind.SOURCE),
        (client.get_destination, ConfigKind.DESTINATION),
        (client.get_source_definition, ConfigKind.SOURCE_DEFINITION),
        (client.get_destination_definition, ConfigKind.DESTINATION_DEFINITION),
    ]
    for lookup, kind in lookups:
        with pytest.raises(ConfigNotFoundException) as exc_info:
            await lookup(ids[kind])
        assert exc_info.value.config_type == kind.value

    assert seen == [
        f"/api/v1/sources/{ids[ConfigKind.SOURCE]}",
        f"/api/v1/destinations/{ids[ConfigKind.DESTINATION]}",
        f"/api/v1/source_definitions/{ids[ConfigKind.SOURCE_DEFINITION]}",
        f"/api/v1/destination_definitions/{ids[ConfigKind.DESTINATION_DEFINITION]}",
    ]


@dataclass
class FailureCase:
    name: str
    expected: type
    status: Optional[int] = None
    body: Any = None
    raise_error: Optional[Exception] = None
    error_fields: list = field(default_factory=list)


FAILURE_CASES = [
    FailureCase(name="not_found", status=404, expected=ConfigNotFoundException),
    FailureCase(
        name="unprocessable",
        status=422,
        body={"errors": [{"connection_configuration": "bad"}]},
        expected=ValidationFailureException,
    ),
    FailureCase(
        name="invalid_payload",
        status=200,
        body={"connection_id": "not-a-uuid"},
        expected=ValidationFailureException,
        error_fields=["connection_id", "name", "source_id", "destination_id", "status"],
    ),
    FailureCase(
        name="non_json_payload", status=200, body="oops", expected=ValidationFailureException
    ),
    FailureCase(name="server_error", status=503, expected=TransientIOException),
    FailureCase(name="forbidden", status=403, expected=ExternalServiceError),
    FailureCase(
        name="connect_error",
        raise_error=httpx.ConnectError("connection refused"),
        expected=TransientIOException,
    ),
    FailureCase(
        name="timeout",
        raise_error=httpx.ReadTimeout("read timed out"),
        expected=TransientIOException,
    ),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("case", FAILURE_CASES, ids=lambda c: c.name)
async def test_failures_are_translated(case: FailureCase):
    def handler(request: httpx.Request) -> httpx.Response:
        if case.raise_error is not None:
            raise case.raise_error
        if isinstance(case.body, str):
            return httpx.Response(case.status, text=case.body)
        return httpx.Response(case.status, json=case.body)

    connection_id = uuid4()
    with pytest.raises(case.expected) as exc_info:
        await _client(handler).get_connection(connection_id)

    error = exc_info.value
    if isinstance(error, ValidationFailureException):
        assert error.entity == f"connection:{connection_id}"
        reported = {key for entry in error.errors["errors"] for key in entry}
        assert set(case.error_fields) <= reported
    if isinstance(error, TransientIOException):
        assert error.service_name == "config_api"
    # No httpx exception type leaks through
    assert not isinstance(error, httpx.HTTPError)


@pytest.mark.asyncio
async def test_close_closes_http_client():
    http_client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(lambda r: httpx.Response(200))
    )
    client = HttpConnectionContextClient(BASE_URL, http_client=http_client)

    await client.close()

    assert http_client.is_closed
