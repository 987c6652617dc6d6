"""
Client for typed decision artifacts hosted by a setae backend.

This package provides:
- The artifact type model and payload builders (artifacts/)
- Completion evaluation, polling waiters and the merge-updater (artifacts/)
- The bearer-token HTTP client (client/)
- Backend credential storage and resolution (config/)
- Text and JSON renderers (render/)
"""

from setae.artifacts import (
    Artifact,
    ArtifactDraft,
    ArtifactStatus,
    ArtifactType,
    ArtifactWaiter,
    MessageWaiter,
    build_artifact_body,
    build_payload,
    is_complete,
    merge_artifact,
    update_artifact,
)
from setae.client import SetaeClient, Transport
from setae.config import BackendConfig, ConfigStore, resolve_backend
from setae.errors import (
    BackendError,
    ConfigError,
    ConflictError,
    NotFoundError,
    ParseError,
    PayloadValidationError,
    SetaeError,
    TransportError,
    WaitTimeoutError,
)
from setae.render import format_artifact, format_artifacts, render_detail

__version__ = "0.1.0"

__all__ = [
    "Artifact",
    "ArtifactDraft",
    "ArtifactStatus",
    "ArtifactType",
    "ArtifactWaiter",
    "MessageWaiter",
    "build_artifact_body",
    "build_payload",
    "is_complete",
    "merge_artifact",
    "update_artifact",
    "SetaeClient",
    "Transport",
    "BackendConfig",
    "ConfigStore",
    "resolve_backend",
    "BackendError",
    "ConfigError",
    "ConflictError",
    "NotFoundError",
    "ParseError",
    "PayloadValidationError",
    "SetaeError",
    "TransportError",
    "WaitTimeoutError",
    "format_artifact",
    "format_artifacts",
    "render_detail",
]
