from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from loguru import logger

from setae.artifacts.grammar import parse_categorize_item_spec, parse_conversation_link, parse_item_spec
from setae.artifacts.models import (
    ALL_ANSWERED,
    SUBMIT,
    VARIANT_TYPES,
    ArtifactStatus,
    CategorizePayload,
    ChecklistItem,
    ChecklistPayload,
    ChoiceOption,
    CompletionCondition,
    CompletionRule,
    DocumentReviewPayload,
    Heading,
    ItemRecord,
    MultipleChoicePayload,
    Paragraph,
    RankingPayload,
    YesNoPayload,
    enum_value,
)
from setae.errors import PayloadValidationError

_BLANK_LINE = re.compile(r"\n\s*\n")


@dataclass
class ArtifactDraft:
    """Raw construction inputs for a new artifact payload."""

    type: str
    title: str
    prompt: Optional[str] = None
    options: list[str] = field(default_factory=list)
    items: list[str] = field(default_factory=list)
    headings: list[str] = field(default_factory=list)
    multi_select: bool = False
    document: Optional[str] = None

    @property
    def resolved_prompt(self) -> str:
        return self.prompt if self.prompt is not None else self.title


def build_payload(draft: ArtifactDraft) -> Any:
    type_value = enum_value(draft.type)
    builder = _BUILDERS.get(type_value)
    if builder is None:
        raise PayloadValidationError(
            f"Unknown artifact type {type_value!r}. Valid types: {', '.join(VARIANT_TYPES)}"
        )
    payload = builder(draft)
    logger.debug(f"Built {type_value} payload")
    return payload


def split_paragraphs(document: str) -> list[Paragraph]:
    blocks = [block.strip() for block in _BLANK_LINE.split(document)]
    return [
        Paragraph(id=f"p{index}", markdown=block)
        for index, block in enumerate((block for block in blocks if block), start=1)
    ]


def completion_rule_for(mode: str) -> CompletionRule:
    if mode == ALL_ANSWERED:
        return CompletionCondition(field="items", condition=ALL_ANSWERED)
    if mode == SUBMIT:
        return SUBMIT
    raise PayloadValidationError(f"Unknown completion mode {mode!r}. Expected {SUBMIT} or {ALL_ANSWERED}")


def build_artifact_body(
    draft: ArtifactDraft,
    *,
    description: Optional[str] = None,
    conversation: Optional[str] = None,
    completion: CompletionRule = SUBMIT,
) -> dict[str, Any]:
    """Assemble the create body sent to the backend for a new artifact."""
    payload = build_payload(draft)
    body: dict[str, Any] = {
        "type": enum_value(draft.type),
        "title": draft.title,
        "status": ArtifactStatus.PENDING.value,
        "completion": completion.to_wire() if isinstance(completion, CompletionCondition) else completion,
        "payload": payload.to_wire(),
    }
    if description:
        body["description"] = description
    if conversation:
        body["conversationLink"] = parse_conversation_link(conversation).to_wire()
    return body


def _build_yes_no(draft: ArtifactDraft) -> YesNoPayload:
    return YesNoPayload(prompt=draft.resolved_prompt)


def _build_multiple_choice(draft: ArtifactDraft) -> MultipleChoicePayload:
    options = []
    for spec in draft.options:
        parsed = parse_item_spec(spec)
        options.append(
            ChoiceOption(id=parsed.id, label=parsed.label, description=parsed.description, selected=False)
        )
    return MultipleChoicePayload(
        prompt=draft.resolved_prompt,
        multi_select=bool(draft.multi_select),
        options=options,
    )


def _build_checklist(draft: ArtifactDraft) -> ChecklistPayload:
    return ChecklistPayload(
        prompt=draft.resolved_prompt,
        items=[ChecklistItem(**_item_fields(spec)) for spec in draft.items],
    )


def _build_ranking(draft: ArtifactDraft) -> RankingPayload:
    return RankingPayload(
        prompt=draft.resolved_prompt,
        items=[ItemRecord(**_item_fields(spec)) for spec in draft.items],
    )


def _build_categorize(draft: ArtifactDraft) -> CategorizePayload:
    headings: list[Heading] = []
    for spec in draft.headings:
        parsed = parse_item_spec(spec)
        headings.append(Heading(id=parsed.id, label=parsed.label))

    buckets: dict[str, list[str]] = {heading.id: [] for heading in headings}
    items: list[ItemRecord] = []
    for spec in draft.items:
        parsed = parse_categorize_item_spec(spec)
        if parsed.heading_id not in buckets:
            raise PayloadValidationError(
                f'Unknown heading "{parsed.heading_id}" in item "{spec}". '
                f"Valid headings: {', '.join(buckets)}"
            )
        buckets[parsed.heading_id].append(parsed.id)
        items.append(ItemRecord(id=parsed.id, label=parsed.label, description=parsed.description))

    return CategorizePayload(
        prompt=draft.resolved_prompt,
        headings=headings,
        items=items,
        buckets=buckets,
    )


def _build_document_review(draft: ArtifactDraft) -> DocumentReviewPayload:
    document = draft.document or ""
    return DocumentReviewPayload(
        prompt=draft.resolved_prompt,
        document=document,
        paragraphs=split_paragraphs(document),
        annotations=[],
    )


def _item_fields(spec: str) -> dict[str, Any]:
    parsed = parse_item_spec(spec)
    return {"id": parsed.id, "label": parsed.label, "description": parsed.description}


_BUILDERS: dict[str, Callable[[ArtifactDraft], Any]] = {
    "yes_no": _build_yes_no,
    "multiple_choice": _build_multiple_choice,
    "checklist": _build_checklist,
    "ranking": _build_ranking,
    "categorize": _build_categorize,
    "document_review": _build_document_review,
}
