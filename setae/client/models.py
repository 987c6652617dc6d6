from __future__ import annotations

from typing import Any, Optional

from pydantic import Field

from setae.artifacts.models import Artifact, WireModel


class ProtocolEndpoint(WireModel):
    category: str
    name: str
    display_name: Optional[str] = None
    last_activity: Optional[str] = None
    preview: Optional[str] = None


class ProtocolMessage(WireModel):
    author: str = ""
    text: str = ""
    timestamp: str
    is_me: bool = False


class ProtocolUpdate(WireModel):
    category: str
    name: str
    latest_timestamp: Optional[str] = None
    preview: Optional[str] = None


class EndpointsResponse(WireModel):
    backend_id: Optional[str] = None
    capabilities: dict[str, bool] = Field(default_factory=dict)
    endpoints: list[ProtocolEndpoint] = Field(default_factory=list)


class MessagesResponse(WireModel):
    messages: list[ProtocolMessage] = Field(default_factory=list)


class EndpointRef(WireModel):
    category: str
    name: str


class PostResponse(WireModel):
    ok: bool = True
    message: Optional[str] = None
    endpoint: EndpointRef


class EndpointMeta(WireModel):
    display_name: Optional[str] = None
    note: Optional[str] = None


class EndpointMetaResponse(WireModel):
    ok: bool = True
    meta: EndpointMeta = Field(default_factory=EndpointMeta)


class ArtifactsResponse(WireModel):
    artifacts: list[Artifact] = Field(default_factory=list)


class PollResponse(WireModel):
    updates: list[ProtocolUpdate] = Field(default_factory=list)
    server_time: str

    def find(self, category: str, name: str) -> Optional[ProtocolUpdate]:
        for update in self.updates:
            if update.category == category and update.name == name:
                return update
        return None


def dump_models(models: list[Any]) -> list[dict[str, Any]]:
    return [model.to_wire() for model in models]
