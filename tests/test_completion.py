from __future__ import annotations

import pytest

from setae.artifacts.completion import artifact_is_complete, is_complete
from setae.artifacts.models import Artifact, CompletionCondition

ALL_ANSWERED = {"field": "items", "condition": "all_answered"}


def test_submit_rule_pending_is_not_complete() -> None:
    assert is_complete("pending", "submit", {}) is False
    assert is_complete("in_progress", "submit", {}) is False


@pytest.mark.parametrize("status", ["submitted", "returned", "dismissed"])
@pytest.mark.parametrize("completion", ["submit", ALL_ANSWERED, None])
def test_terminal_status_is_complete_regardless_of_rule(status: str, completion) -> None:
    assert is_complete(status, completion, {"items": [{"id": "a"}]}) is True


def test_all_answered_counts_false_decisions() -> None:
    payload = {"items": [{"id": "a", "decision": True}, {"id": "b", "decision": False}]}

    assert is_complete("pending", ALL_ANSWERED, payload) is True


def test_all_answered_pending_while_any_item_undecided() -> None:
    payload = {"items": [{"id": "a", "decision": True}, {"id": "b"}]}

    assert is_complete("pending", ALL_ANSWERED, payload) is False


def test_all_answered_accepts_model_rule() -> None:
    rule = CompletionCondition(field="items", condition="all_answered")
    payload = {"items": [{"id": "a", "decision": False}]}

    assert is_complete("in_progress", rule, payload) is True


def test_all_answered_empty_collection_is_complete() -> None:
    assert is_complete("pending", ALL_ANSWERED, {"items": []}) is True


def test_all_answered_missing_collection_is_pending() -> None:
    assert is_complete("pending", ALL_ANSWERED, {}) is False
    assert is_complete("pending", ALL_ANSWERED, {"items": "nope"}) is False


def test_all_answered_uses_named_field() -> None:
    rule = {"field": "options", "condition": "all_answered"}
    payload = {"items": [], "options": [{"id": "x"}]}

    assert is_complete("pending", rule, payload) is False


def test_unknown_condition_is_pending() -> None:
    assert is_complete("pending", {"field": "items", "condition": "majority"}, {"items": []}) is False


def test_artifact_is_complete_uses_artifact_rule() -> None:
    artifact = Artifact.model_validate(
        {
            "id": "ops:release",
            "type": "checklist",
            "status": "pending",
            "completion": ALL_ANSWERED,
            "payload": {"items": [{"id": "a", "label": "A", "decision": True}]},
        }
    )

    assert isinstance(artifact.completion, CompletionCondition)
    assert artifact_is_complete(artifact) is True
    assert artifact_is_complete(artifact, "submit") is False
