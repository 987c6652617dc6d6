from __future__ import annotations

from typing import Any

import pytest
import requests

from setae.client.client import SetaeClient
from setae.client.transport import Transport
from setae.errors import BackendError, ConflictError, NotFoundError, TransportError
from tests.fakes.fake_http import FakeResponse, FakeSession


def _client(*responses: Any) -> tuple[SetaeClient, FakeSession]:
    session = FakeSession(*responses)
    transport = Transport("https://backend.example/", "secret", session=session)  # type: ignore[arg-type]
    return SetaeClient(transport), session


def test_transport_sets_bearer_headers_and_strips_slash() -> None:
    client, session = _client(FakeResponse(200, {"endpoints": []}))

    client.list_endpoints()

    assert session.headers["Authorization"] == "Bearer secret"
    assert session.headers["Content-Type"] == "application/json"
    assert session.calls[0]["url"] == "https://backend.example/endpoints"


def test_artifact_paths_are_encoded() -> None:
    artifact = {"id": "a b:c/d", "type": "yes_no", "status": "pending", "payload": {}}
    client, session = _client(FakeResponse(200, artifact))

    fetched = client.get_artifact("a b", "c/d")

    assert session.calls[0]["url"] == "https://backend.example/artifacts/a%20b/c%2Fd"
    assert fetched.type == "yes_no"


def test_put_artifact_sends_body() -> None:
    body = {"type": "yes_no", "title": "Ship it?", "status": "pending", "payload": {"type": "yes_no"}}
    client, session = _client(FakeResponse(200, {"id": "ops:ship", **body}))

    created = client.put_artifact("ops", "ship", body)

    assert session.calls[0]["method"] == "PUT"
    assert session.calls[0]["json"] == body
    assert created.id == "ops:ship"


def test_poll_encodes_cursor() -> None:
    client, session = _client(FakeResponse(200, {"updates": [], "serverTime": "2026-01-01T00:00:02Z"}))

    response = client.poll("2026-01-01T00:00:00+00:00")

    assert session.calls[0]["url"].endswith("/poll?since=2026-01-01T00%3A00%3A00%2B00%3A00")
    assert response.server_time == "2026-01-01T00:00:02Z"


def test_list_artifacts_filters_by_status() -> None:
    client, session = _client(FakeResponse(200, {"artifacts": [{"id": "a:b", "type": "ranking"}]}))

    artifacts = client.list_artifacts("pending")

    assert session.calls[0]["url"].endswith("/artifacts?status=pending")
    assert [artifact.name for artifact in artifacts] == ["b"]


@pytest.mark.parametrize(
    ("status", "error_type"),
    [(404, NotFoundError), (409, ConflictError), (500, BackendError), (503, BackendError)],
)
def test_error_statuses_map_to_typed_errors(status: int, error_type: type) -> None:
    client, _ = _client(FakeResponse(status, {"error": "nope"}))

    with pytest.raises(error_type) as excinfo:
        client.get_artifact("ops", "ship")

    assert excinfo.value.status_code == status
    assert str(excinfo.value) == "nope"


def test_error_without_json_body_uses_status_line() -> None:
    client, _ = _client(FakeResponse(400, text="<html>"))

    with pytest.raises(TransportError) as excinfo:
        client.delete_artifact("ops", "ship")

    assert type(excinfo.value) is TransportError
    assert str(excinfo.value) == "HTTP 400"


def test_connection_failure_has_no_status() -> None:
    client, _ = _client(requests.ConnectionError("refused"))

    with pytest.raises(TransportError) as excinfo:
        client.list_endpoints()

    assert excinfo.value.status_code is None


def test_rejected_artifact_response_becomes_transport_error() -> None:
    client, _ = _client(FakeResponse(200, {"id": "ops:ship", "type": "yes_no", "status": ["bad"]}))

    with pytest.raises(TransportError) as excinfo:
        client.get_artifact("ops", "ship")

    message = str(excinfo.value)
    assert message.startswith("Invalid response from /artifacts/ops/ship: status:")
    assert "\n" not in message


def test_poll_response_without_server_time_becomes_transport_error() -> None:
    client, _ = _client(FakeResponse(200, {"updates": []}))

    with pytest.raises(TransportError) as excinfo:
        client.poll("cursor-0")

    assert "serverTime" in str(excinfo.value) or "server_time" in str(excinfo.value)


def test_null_completion_defaults_to_submit() -> None:
    artifact = {"id": "ops:ship", "type": "yes_no", "status": "pending", "completion": None, "payload": {}}
    client, _ = _client(FakeResponse(200, artifact))

    assert client.get_artifact("ops", "ship").completion == "submit"
