from __future__ import annotations

from typing import Any, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from setae.artifacts.models import (
    ALL_ANSWERED,
    SUBMIT,
    TERMINAL_STATUSES,
    Artifact,
    CompletionCondition,
    CompletionRule,
    enum_value,
)


def is_complete(
    status: Any,
    completion: Optional[CompletionRule],
    payload: Optional[Mapping[str, Any]],
) -> bool:
    """Decide whether an artifact in this state satisfies its completion rule.

    A terminal status always completes. ``"submit"`` completes only through a
    status transition. ``all_answered`` completes once every element of the
    named payload collection carries a ``decision`` key; an empty collection
    counts as answered.
    """
    if enum_value(status) in TERMINAL_STATUSES:
        return True
    if completion is None or completion == SUBMIT:
        return False

    condition = _coerce_condition(completion)
    if condition is None:
        logger.debug(f"Unsupported completion rule {completion!r}; treating as pending")
        return False
    if condition.condition != ALL_ANSWERED:
        logger.debug(f"Unsupported completion condition {condition.condition!r}; treating as pending")
        return False

    collection = (payload or {}).get(condition.field)
    if not isinstance(collection, list):
        return False
    return all(isinstance(element, Mapping) and "decision" in element for element in collection)


def artifact_is_complete(artifact: Artifact, completion: Optional[CompletionRule] = None) -> bool:
    rule = completion if completion is not None else artifact.completion
    return is_complete(artifact.status, rule, artifact.payload)


def _coerce_condition(completion: Any) -> Optional[CompletionCondition]:
    if isinstance(completion, CompletionCondition):
        return completion
    if isinstance(completion, Mapping):
        try:
            return CompletionCondition.model_validate(dict(completion))
        except ValidationError:
            return None
    return None
