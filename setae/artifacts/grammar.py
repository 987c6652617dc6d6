"""
Parsers for the compact textual specs accepted on the command line.

- ``id:label[:description]`` for options, items and headings
- ``heading_id/id:label[:description]`` for categorize items
- ``category:name`` for conversation links
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from setae.artifacts.models import ConversationLink
from setae.errors import ParseError


@dataclass(frozen=True)
class ItemSpec:
    id: str
    label: str
    description: Optional[str] = None


@dataclass(frozen=True)
class CategorizeItemSpec:
    heading_id: str
    id: str
    label: str
    description: Optional[str] = None


def parse_item_spec(spec: str) -> ItemSpec:
    """Parse ``id:label`` or ``id:label:description``.

    Only the first two colons are structural; the description keeps any
    further colons verbatim.
    """
    parts = spec.split(":", 2)
    if len(parts) < 2:
        raise ParseError(
            f'Invalid format "{spec}". Expected id:label or id:label:description',
            spec,
        )
    description = parts[2] if len(parts) > 2 else None
    return ItemSpec(id=parts[0], label=parts[1], description=description)


def parse_categorize_item_spec(spec: str) -> CategorizeItemSpec:
    heading_id, slash, rest = spec.partition("/")
    if not slash:
        raise ParseError(
            f'Invalid categorize item format "{spec}". Expected heading_id/id:label[:description]',
            spec,
        )
    try:
        item = parse_item_spec(rest)
    except ParseError as exc:
        raise ParseError(exc.message, spec) from exc
    return CategorizeItemSpec(
        heading_id=heading_id,
        id=item.id,
        label=item.label,
        description=item.description,
    )


def parse_conversation_link(value: str) -> ConversationLink:
    category, colon, name = value.partition(":")
    if not colon:
        raise ParseError(f'Invalid conversation link "{value}". Expected category:name', value)
    return ConversationLink(category=category, name=name)
