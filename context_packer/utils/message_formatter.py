"""
Message formatter for converting pack results to LLM chat message lists.
"""

from typing import List, Dict, Any, Mapping, Optional, Tuple

from ..core.items import PackedItem, PLACEMENT_BEGINNING, QUERY_SOURCE
from ..core.optimizer import PackResult


class MessageFormatter:
    """Converts PackResult items to chat message formats."""

    def __init__(self, default_role: str = "system"):
        """
        Initialize message formatter.

        Args:
            default_role: Role for items whose payload carries none
        """
        self.default_role = default_role

    def to_messages(
        self,
        result: PackResult,
        role_mapping: Optional[Dict[str, str]] = None,
        include_placement: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Convert a pack result to OpenAI-style messages in placement order.

        Turn items are expanded back into their member messages, payloads
        shaped like ``{"role", "content"}`` are emitted as-is, and the query
        becomes the final user message.

        Args:
            result: Result of ContextOptimizer.pack
            role_mapping: Source name to role overrides for plain items
            include_placement: Prefix plain content with its placement zone

        Returns:
            List of message dicts
        """
        mapping = role_mapping or {}
        messages = []

        for item in result.items:
            for message in self._expand(item):
                if message is None:
                    content = item.content
                    if include_placement:
                        content = f"[{item.placement}] {content}"
                    role = mapping.get(item.source, self.default_role)
                    messages.append({"role": role, "content": content})
                else:
                    messages.append(dict(message))

        return messages

    def to_anthropic_messages(
        self,
        result: PackResult,
        role_mapping: Optional[Dict[str, str]] = None
    ) -> Tuple[str, List[Dict[str, Any]]]:
        """
        Split a pack result into an Anthropic system prompt and message list.

        Plain items pinned at the beginning of the window go into the system
        prompt; everything else is emitted as messages, with system-role
        content folded into user messages.

        Returns:
            Tuple of (system prompt, messages)
        """
        mapping = role_mapping or {}
        system_parts = []
        messages = []

        for item in result.items:
            expanded = list(self._expand(item))
            plain = expanded == [None]
            role = mapping.get(item.source, self.default_role)

            if plain and item.placement == PLACEMENT_BEGINNING and role == "system":
                system_parts.append(item.content)
                continue

            for message in expanded:
                if message is None:
                    message = {"role": role, "content": item.content}
                message = dict(message)
                if message.get("role") not in ("user", "assistant"):
                    message["role"] = "user"
                messages.append(message)

        return "\n\n".join(system_parts), messages

    def get_placement_summary(self, result: PackResult) -> Dict[str, Any]:
        """
        Summarize where each source's items landed.

        Returns:
            Counts per placement zone plus per-item details
        """
        summary = {
            "total_items": len(result.items),
            "placement_distribution": {},
            "item_details": []
        }

        zone_counts: Dict[str, int] = {}
        for item in result.items:
            zone_counts[item.placement] = zone_counts.get(item.placement, 0) + 1
            summary["item_details"].append({
                "id": item.id,
                "source": item.source,
                "placement": item.placement,
                "tokens": item.tokens,
                "role": item.role
            })

        summary["placement_distribution"] = zone_counts
        return summary

    def _expand(self, item: PackedItem):
        """Yield member messages of an item, or None for plain content."""
        if item.source == QUERY_SOURCE:
            yield {"role": "user", "content": item.content}
            return

        payloads = item.value if isinstance(item.value, list) and item.role is None else [item.value]
        if not payloads or not all(self._is_message(p) for p in payloads):
            yield None
            return
        for payload in payloads:
            yield payload

    @staticmethod
    def _is_message(payload: Any) -> bool:
        return isinstance(payload, Mapping) and isinstance(payload.get("role"), str) and "content" in payload
