"""Classification of pack results against fixed thresholds."""

import math
from typing import Iterable, List, Optional
from dataclasses import dataclass
from enum import Enum

from ..core.items import (
    Constraint,
    DroppedItem,
    PackedItem,
    Priority,
    PLACEMENT_MIDDLE,
)
from ..core.scoring import score_priority


TOOLS_SOURCE = "tools"
MAX_TOOLS = 10
HIGH_DROP_RATE = 0.5
LOW_UTILIZATION = 0.1


class WarningType(Enum):
    """Kinds of warnings a pack result can raise."""
    BUDGET_EXCEEDED = "budget-exceeded"
    TOOL_OVERLOAD = "tool-overload"
    LOST_IN_MIDDLE = "lost-in-middle"
    HIGH_DROP_RATE = "high-drop-rate"
    LOW_UTILIZATION = "low-utilization"
    UNRESOLVED_CONSTRAINT = "unresolved-constraint"


@dataclass
class PackWarning:
    """An informational finding about a pack result."""
    type: str
    message: str
    source: Optional[str] = None


def detect_warnings(placed: List[PackedItem],
                    dropped: List[DroppedItem],
                    budget: int,
                    unresolved: Iterable[Constraint] = ()) -> List[PackWarning]:
    """
    Inspect a pack result and report conditions worth tuning.

    Args:
        placed: Items in final order
        dropped: Items left out
        budget: Token capacity
        unresolved: Constraints left unmet because their trigger is required

    Returns:
        Warnings in a fixed order of checks
    """
    warnings = []
    total_tokens = sum(item.tokens for item in placed)

    if total_tokens > budget:
        warnings.append(PackWarning(
            type=WarningType.BUDGET_EXCEEDED.value,
            message=f"Required items use {total_tokens} tokens, exceeding the budget of {budget}"
        ))

    tool_count = sum(1 for item in placed if item.source == TOOLS_SOURCE)
    if tool_count > MAX_TOOLS:
        warnings.append(PackWarning(
            type=WarningType.TOOL_OVERLOAD.value,
            message=f"{tool_count} tools included; more than {MAX_TOOLS} degrades tool selection",
            source=TOOLS_SOURCE
        ))

    high_score = score_priority(Priority.HIGH)
    for item in placed:
        if item.placement != PLACEMENT_MIDDLE:
            continue
        if math.isinf(item.score) or item.score < high_score:
            continue
        warnings.append(PackWarning(
            type=WarningType.LOST_IN_MIDDLE.value,
            message=f"High-relevance item '{item.id}' sits in the middle of the context",
            source=item.source
        ))

    candidates = len(placed) + len(dropped)
    if candidates and len(dropped) / candidates > HIGH_DROP_RATE:
        warnings.append(PackWarning(
            type=WarningType.HIGH_DROP_RATE.value,
            message=f"{len(dropped)} of {candidates} items were dropped"
        ))

    if budget > 0 and not dropped and total_tokens / budget < LOW_UTILIZATION:
        warnings.append(PackWarning(
            type=WarningType.LOW_UTILIZATION.value,
            message=f"Only {total_tokens} of {budget} budget tokens used"
        ))

    for trigger, dependency in unresolved:
        warnings.append(PackWarning(
            type=WarningType.UNRESOLVED_CONSTRAINT.value,
            message=f"Required item '{trigger}' is included without its dependency '{dependency}'"
        ))

    return warnings
