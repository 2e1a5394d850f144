"""Priority scoring and recency decay."""

import math
from typing import List, Union

from .items import ContextItem, Priority


# Each tier is 100x the next, so a tier decayed to 10% still outranks
# every undecayed item of the tier below it.
PRIORITY_SCORES = {
    Priority.REQUIRED: math.inf,
    Priority.HIGH: 10000.0,
    Priority.MEDIUM: 100.0,
    Priority.LOW: 1.0,
}

RECENCY_FLOOR = 0.1


def score_priority(priority: Union[Priority, str]) -> float:
    """Map a priority tier to its base score."""
    return PRIORITY_SCORES[Priority(priority)]


def apply_recency_bias(items: List[ContextItem]) -> List[ContextItem]:
    """
    Decay scores so older items rank below newer ones.

    Items are ranked by ``index`` (oldest first). The oldest non-required
    item keeps 10% of its score, the newest keeps all of it, and the rest
    are interpolated linearly. Required items are left alone.

    Args:
        items: Items from a single source; scores are modified in place

    Returns:
        The same list
    """
    count = len(items)
    if count <= 1:
        return items

    for rank, item in enumerate(sorted(items, key=lambda i: i.index)):
        if item.is_required:
            continue
        factor = RECENCY_FLOOR + (1.0 - RECENCY_FLOOR) * rank / (count - 1)
        item.score *= factor

    return items
