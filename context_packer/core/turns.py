"""Normalization of raw source content and grouping into conversation turns."""

import json
from typing import Any, List, Mapping, Optional

from .items import ContextItem, Priority


DEFAULT_INITIATOR_ROLE = "user"


def to_text(raw: Any) -> str:
    """Text used for measurement: strings as-is, anything else JSON-encoded."""
    if isinstance(raw, str):
        return raw
    return json.dumps(raw, separators=(",", ":"), ensure_ascii=False, default=str)


def derive_item_id(source: str, raw: Any, index: int) -> str:
    """Readable id from a ``name`` (or ``id``) field, else the position."""
    if isinstance(raw, Mapping):
        name = raw.get("name")
        if name is None:
            name = raw.get("id")
        if isinstance(name, (str, int, float)) and not isinstance(name, bool):
            return f"{source}_{name}"
    return f"{source}_{index}"


def extract_role(raw: Any) -> Optional[str]:
    if isinstance(raw, Mapping) and isinstance(raw.get("role"), str):
        return raw["role"]
    return None


def normalize_content(source: str,
                      content: Any,
                      tokenizer,
                      priority: Priority,
                      position: Optional[str] = None) -> List[ContextItem]:
    """
    Turn raw content into measured items.

    Lists and tuples yield one item per element; anything else yields a
    single item. Tokens are measured here, once.

    Args:
        source: Source name the items belong to
        content: String, mapping, or a list/tuple of either
        tokenizer: Object exposing ``count(text) -> int``
        priority: Priority assigned to every item
        position: Optional pinned position

    Returns:
        Items in their original order
    """
    entries = list(content) if isinstance(content, (list, tuple)) else [content]

    items = []
    for index, raw in enumerate(entries):
        text = to_text(raw)
        items.append(ContextItem(
            id=derive_item_id(source, raw, index),
            source=source,
            content=text,
            value=raw,
            tokens=tokenizer.count(text),
            priority=priority,
            index=index,
            position=position,
            role=extract_role(raw),
        ))
    return items


def group_into_turns(source: str,
                     items: List[ContextItem],
                     initiator_role: str = DEFAULT_INITIATOR_ROLE) -> List[ContextItem]:
    """
    Merge role-tagged messages into atomic conversation turns.

    A turn opens at every ``initiator_role`` message and absorbs everything
    up to the next one. Messages before the first initiator form turn 0.
    When no item carries a role the input list is returned unchanged.
    """
    if not any(item.role is not None for item in items):
        return items

    turns: List[List[ContextItem]] = []
    current: List[ContextItem] = []
    for item in items:
        if item.role == initiator_role and current:
            turns.append(current)
            current = []
        current.append(item)
    if current:
        turns.append(current)

    grouped = []
    for turn_index, members in enumerate(turns):
        first = members[0]
        grouped.append(ContextItem(
            id=f"{source}_turn_{turn_index}",
            source=source,
            content="\n".join(m.content for m in members),
            value=[m.value for m in members],
            tokens=sum(m.tokens for m in members),
            priority=first.priority,
            index=turn_index,
            position=first.position,
        ))
    return grouped


def promote_last(items: List[ContextItem], keep_last: Optional[int]) -> List[ContextItem]:
    """Mark the last ``keep_last`` units as required."""
    if keep_last:
        for item in items[max(0, len(items) - keep_last):]:
            item.priority = Priority.REQUIRED
    return items
