from setae.client.client import NEW_THREAD_NAME, SetaeClient
from setae.client.models import (
    ArtifactsResponse,
    EndpointMetaResponse,
    EndpointsResponse,
    MessagesResponse,
    PollResponse,
    PostResponse,
    ProtocolEndpoint,
    ProtocolMessage,
    ProtocolUpdate,
)
from setae.client.transport import Transport

__all__ = [
    "NEW_THREAD_NAME",
    "SetaeClient",
    "ArtifactsResponse",
    "EndpointMetaResponse",
    "EndpointsResponse",
    "MessagesResponse",
    "PollResponse",
    "PostResponse",
    "ProtocolEndpoint",
    "ProtocolMessage",
    "ProtocolUpdate",
    "Transport",
]
