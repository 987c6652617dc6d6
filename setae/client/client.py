from __future__ import annotations

from typing import Any, Mapping, Optional, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from setae.artifacts.models import Artifact, describe_validation_error
from setae.client.models import (
    ArtifactsResponse,
    EndpointMetaResponse,
    EndpointsResponse,
    MessagesResponse,
    PollResponse,
    PostResponse,
)
from setae.client.transport import Transport
from setae.config.store import BackendConfig
from setae.errors import TransportError

NEW_THREAD_NAME = "__new__"

ModelT = TypeVar("ModelT", bound=BaseModel)


class SetaeClient:
    """Typed wrapper over the backend's thread, poll and artifact endpoints."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    @classmethod
    def from_backend(cls, backend: BackendConfig, **transport_kwargs: Any) -> "SetaeClient":
        return cls(Transport(backend.url, backend.token, **transport_kwargs))

    def _fetch(self, model: type[ModelT], path: str, method: str = "GET", body: Any = None) -> ModelT:
        data = self.transport.request(path, method, body)
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise TransportError(f"Invalid response from {path}: {describe_validation_error(exc)}") from exc

    # Threads

    def list_endpoints(self) -> EndpointsResponse:
        return self._fetch(EndpointsResponse, "/endpoints")

    def read_messages(self, category: str, name: str) -> MessagesResponse:
        return self._fetch(MessagesResponse, f"{_endpoint_path(category, name)}/messages")

    def post_message(self, category: str, name: str, text: str) -> PostResponse:
        return self._fetch(PostResponse, _endpoint_path(category, name), "POST", {"text": text})

    def create_thread(self, category: str, text: str) -> PostResponse:
        return self.post_message(category, NEW_THREAD_NAME, text)

    def update_endpoint_meta(
        self,
        category: str,
        name: str,
        *,
        display_name: Optional[str] = None,
        note: Optional[str] = None,
    ) -> EndpointMetaResponse:
        updates: dict[str, str] = {}
        if display_name:
            updates["displayName"] = display_name
        if note:
            updates["note"] = note
        return self._fetch(EndpointMetaResponse, f"{_endpoint_path(category, name)}/meta", "PATCH", updates)

    def poll(self, since: str) -> PollResponse:
        return self._fetch(PollResponse, f"/poll?since={quote(since, safe='')}")

    # Artifacts

    def list_artifacts(self, status: Optional[str] = None) -> list[Artifact]:
        query = f"?status={quote(status, safe='')}" if status else ""
        return self._fetch(ArtifactsResponse, f"/artifacts{query}").artifacts

    def get_artifact(self, category: str, name: str) -> Artifact:
        return self._fetch(Artifact, _artifact_path(category, name))

    def put_artifact(self, category: str, name: str, artifact: Mapping[str, Any] | Artifact) -> Artifact:
        body = artifact.to_wire() if isinstance(artifact, Artifact) else dict(artifact)
        return self._fetch(Artifact, _artifact_path(category, name), "PUT", body)

    def delete_artifact(self, category: str, name: str) -> bool:
        data = self.transport.request(_artifact_path(category, name), "DELETE")
        return isinstance(data, Mapping) and bool(data.get("ok", False))

    def close(self) -> None:
        self.transport.close()


def _endpoint_path(category: str, name: str) -> str:
    return f"/endpoints/{quote(category, safe='')}/{quote(name, safe='')}"


def _artifact_path(category: str, name: str) -> str:
    return f"/artifacts/{quote(category, safe='')}/{quote(name, safe='')}"
