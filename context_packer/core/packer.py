"""Greedy budget-constrained packing."""

import logging
from typing import List, NamedTuple

from .items import ContextItem, DroppedItem, REASON_BUDGET

logger = logging.getLogger(__name__)


class PackOutcome(NamedTuple):
    """Result of a greedy packing pass."""
    included: List[ContextItem]
    dropped: List[DroppedItem]
    total_tokens: int


def greedy_pack(items: List[ContextItem], budget: int) -> PackOutcome:
    """
    Select items for inclusion within a token budget.

    Required items are always included, even past the budget. The remaining
    items are taken by score (highest first, fewer tokens on ties) while
    they fit; an item that does not fit is skipped and the scan goes on.

    Args:
        items: Scored candidate items
        budget: Token capacity

    Returns:
        PackOutcome with included items, dropped items and the token total
    """
    required = [item for item in items if item.is_required]
    optional = [item for item in items if not item.is_required]

    included = list(required)
    total_tokens = sum(item.tokens for item in required)
    remaining = max(0, budget - total_tokens)

    dropped = []
    for item in sorted(optional, key=lambda i: (-i.score, i.tokens)):
        if item.tokens <= remaining:
            included.append(item)
            remaining -= item.tokens
            total_tokens += item.tokens
        else:
            dropped.append(DroppedItem(
                id=item.id,
                source=item.source,
                tokens=item.tokens,
                score=item.score,
                reason=REASON_BUDGET,
            ))

    logger.debug("Packed %d of %d items (%d tokens, budget %d)",
                 len(included), len(items), total_tokens, budget)
    return PackOutcome(included, dropped, total_tokens)
