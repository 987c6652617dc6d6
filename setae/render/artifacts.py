from __future__ import annotations

import json
from typing import Any, Callable, Optional

from setae.artifacts.models import (
    Artifact,
    CategorizePayload,
    ChecklistPayload,
    DocumentReviewPayload,
    ItemRecord,
    MultipleChoicePayload,
    RankingPayload,
    YesNoPayload,
)
from setae.errors import PayloadValidationError
from setae.render.threads import pad_end, relative_time

PREVIEW_CHARS = 50

_STATUS_ICONS = {
    "pending": "⏳",
    "in_progress": "🔄",
    "submitted": "✓",
    "returned": "↩",
}


def status_icon(status: str) -> str:
    return _STATUS_ICONS.get(status, "?")


def _find_label(items: list[ItemRecord], item_id: str) -> str:
    item = _find_item(items, item_id)
    return item.label if item is not None else item_id


def _find_item(items: list[Any], item_id: str) -> Optional[Any]:
    for item in items:
        if item.id == item_id:
            return item
    return None


def _render_yes_no(artifact: Artifact, payload: YesNoPayload) -> str:
    if payload.answer is True:
        return f"{artifact.title} — Yes ✓"
    if payload.answer is False:
        return f"{artifact.title} — No ✗"
    return f"{artifact.title} — Pending"


def _render_multiple_choice(artifact: Artifact, payload: MultipleChoicePayload) -> str:
    if payload.selected:
        labels = ", ".join(_find_label(payload.options, option_id) for option_id in payload.selected)
        return f"{artifact.title} — Selected: {labels}"
    return f"{artifact.title} — {len(payload.options)} options, awaiting selection"


def _render_checklist(artifact: Artifact, payload: ChecklistPayload) -> str:
    approved = sum(1 for item in payload.items if item.decision is True)
    rejected = sum(1 for item in payload.items if item.decision is False)

    if approved or rejected:
        lines = [f"{artifact.title} — {approved} approved, {rejected} rejected"]
    else:
        lines = [f"{artifact.title} — {len(payload.items)} items, awaiting decisions"]
    lines.append("")
    for item in payload.items:
        if item.decision is True:
            lines.append(f"  ✓ {item.label}")
        elif item.decision is False:
            lines.append(f"  ✗ {item.label}")
        else:
            lines.append(f"  - {item.label} (no decision)")
        if item.comment:
            lines.append(f'    Comment: "{item.comment}"')
    return "\n".join(lines)


def _render_ranking(artifact: Artifact, payload: RankingPayload) -> str:
    if not payload.ranking:
        return f"{artifact.title} — {len(payload.items)} items, awaiting ranking"
    lines = [f"{artifact.title} — Ranked:", ""]
    for position, item_id in enumerate(payload.ranking, start=1):
        lines.append(f"  {position}. {_find_label(payload.items, item_id)}")
    return "\n".join(lines)


def _render_categorize(artifact: Artifact, payload: CategorizePayload) -> str:
    arrangement = payload.arrangement
    lines = [f"{artifact.title} — Categorize:", ""]
    for heading in payload.headings:
        item_ids = arrangement.get(heading.id) or []
        lines.append(f"  [{heading.label}] ({len(item_ids)} items)")
        for item_id in item_ids:
            item = _find_item(payload.items, item_id)
            label = item.label if item is not None else item_id
            description = f" — {item.description}" if item is not None and item.description else ""
            lines.append(f"    • {label}{description}")
    return "\n".join(lines)


def _render_document_review(artifact: Artifact, payload: DocumentReviewPayload) -> str:
    lines = [f"{artifact.title} — {len(payload.annotations)} annotations"]
    if payload.annotations:
        lines.append("")
    for annotation in payload.annotations:
        paragraph = _find_item(payload.paragraphs, annotation.paragraph_id)
        text = paragraph.body if paragraph is not None else ""
        if text:
            preview = text[:PREVIEW_CHARS] + ("..." if len(text) > PREVIEW_CHARS else "")
        else:
            preview = annotation.paragraph_id
        lines.append(f"  {annotation.paragraph_id} ({preview}):")
        comment = annotation.comment or ""
        lines.append(f'     "{comment}"')
    return "\n".join(lines)


def _render_default(artifact: Artifact) -> str:
    return f"{artifact.title} ({artifact.type}) — {artifact.status}"


_RENDERERS: dict[str, Callable[[Artifact, Any], str]] = {
    "yes_no": _render_yes_no,
    "multiple_choice": _render_multiple_choice,
    "checklist": _render_checklist,
    "ranking": _render_ranking,
    "categorize": _render_categorize,
    "document_review": _render_document_review,
}


def render_detail(artifact: Artifact) -> str:
    """Human-readable projection of the artifact's payload, chosen by type."""
    renderer = _RENDERERS.get(artifact.type)
    if renderer is None:
        return _render_default(artifact)
    try:
        payload = artifact.typed_payload()
    except PayloadValidationError:
        return _render_default(artifact)
    return renderer(artifact, payload)


def format_artifact(artifact: Artifact, as_json: bool = False) -> str:
    if as_json:
        return json.dumps(artifact.to_wire(), indent=2, ensure_ascii=False)

    meta = [
        f"ID: {artifact.id}",
        f"Status: {status_icon(artifact.status)} {artifact.status}",
        f"Created: {artifact.created_at}",
        f"Updated: {artifact.updated_at}",
    ]
    if artifact.description:
        meta.append(f"Description: {artifact.description}")
    if artifact.conversation_link is not None:
        link = artifact.conversation_link
        meta.append(f"Conversation: {link.category}/{link.name}")
    return "\n".join([*meta, "", render_detail(artifact)])


def format_artifacts(artifacts: list[Artifact], as_json: bool = False) -> str:
    if as_json:
        return json.dumps([artifact.to_wire() for artifact in artifacts], indent=2, ensure_ascii=False)
    if not artifacts:
        return "No artifacts found."

    header = (
        f"{pad_end('STATUS', 14)}{pad_end('TYPE', 20)}"
        f"{pad_end('CATEGORY/NAME', 30)}{pad_end('TITLE', 30)}UPDATED"
    )
    rows = [header]
    for artifact in artifacts:
        status = f"{status_icon(artifact.status)} {artifact.status}"
        display_id = f"{artifact.category}/{artifact.name}" if artifact.name else artifact.id
        updated = relative_time(artifact.updated_at) if artifact.updated_at else "-"
        rows.append(
            f"{pad_end(status, 14)}{pad_end(artifact.type, 20)}"
            f"{pad_end(display_id, 30)}{pad_end(artifact.title, 30)}{updated}"
        )
    return "\n".join(rows)
