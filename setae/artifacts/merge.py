from __future__ import annotations

from typing import Any, Mapping, Protocol

from loguru import logger

from setae.artifacts.models import Artifact, parse_payload
from setae.errors import ConflictError, PayloadValidationError


class ArtifactStore(Protocol):
    def get_artifact(self, category: str, name: str) -> Artifact:
        ...

    def put_artifact(self, category: str, name: str, artifact: Artifact) -> Artifact:
        ...


def merge_artifact(existing: Artifact, update: Mapping[str, Any]) -> Artifact:
    """Return a copy of ``existing`` whose payload is shallow-merged with ``update``.

    Keys in ``update`` replace the stored value wholesale; lists are not
    concatenated and nested objects are not merged. Nothing outside the
    payload changes.
    """
    if not isinstance(update, Mapping):
        raise PayloadValidationError("Payload update must be a JSON object")

    update_type = update.get("type")
    if update_type is not None and update_type != existing.type:
        raise PayloadValidationError(
            f"Payload update cannot change artifact type {existing.type!r} to {update_type!r}"
        )

    if existing.artifact_type is not None:
        # Only the incoming keys are checked; stored fields pass through as the backend wrote them.
        parse_payload(existing.type, update)
    payload = {**existing.payload, **update}
    return existing.model_copy(update={"payload": payload})


def update_artifact(
    store: ArtifactStore,
    category: str,
    name: str,
    update: Mapping[str, Any],
) -> Artifact:
    existing = store.get_artifact(category, name)
    if existing.is_terminal:
        raise ConflictError("Artifact has been submitted and cannot be modified", 409)
    merged = merge_artifact(existing, update)
    logger.debug(f"Replacing {category}/{name} with keys {sorted(update)} updated")
    return store.put_artifact(category, name, merged)
