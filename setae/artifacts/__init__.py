"""Artifact type model, payload construction, completion and merge logic."""

from setae.artifacts.builder import (
    ArtifactDraft,
    build_artifact_body,
    build_payload,
    completion_rule_for,
    split_paragraphs,
)
from setae.artifacts.completion import artifact_is_complete, is_complete
from setae.artifacts.grammar import (
    CategorizeItemSpec,
    ItemSpec,
    parse_categorize_item_spec,
    parse_conversation_link,
    parse_item_spec,
)
from setae.artifacts.merge import merge_artifact, update_artifact
from setae.artifacts.models import (
    TERMINAL_STATUSES,
    Artifact,
    ArtifactStatus,
    ArtifactType,
    CompletionCondition,
    ConversationLink,
    parse_payload,
)
from setae.artifacts.waiter import ArtifactWaiter, MessageWaiter, WaitState

__all__ = [
    "ArtifactDraft",
    "build_artifact_body",
    "build_payload",
    "completion_rule_for",
    "split_paragraphs",
    "artifact_is_complete",
    "is_complete",
    "CategorizeItemSpec",
    "ItemSpec",
    "parse_categorize_item_spec",
    "parse_conversation_link",
    "parse_item_spec",
    "merge_artifact",
    "update_artifact",
    "TERMINAL_STATUSES",
    "Artifact",
    "ArtifactStatus",
    "ArtifactType",
    "CompletionCondition",
    "ConversationLink",
    "parse_payload",
    "ArtifactWaiter",
    "MessageWaiter",
    "WaitState",
]
