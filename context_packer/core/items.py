"""Item records flowing through the packing pipeline."""

from typing import Any, NamedTuple, Optional
from dataclasses import dataclass, replace
from enum import Enum


class Priority(Enum):
    """Priority tiers for context items."""
    REQUIRED = "required"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Pinned positions a source may request
POSITION_BEGINNING = "beginning"
POSITION_END = "end"
POSITIONS = (POSITION_BEGINNING, POSITION_END)

# Placement zones assigned after packing
PLACEMENT_BEGINNING = "beginning"
PLACEMENT_MIDDLE = "middle"
PLACEMENT_END = "end"

DROP_OLDEST = "oldest"
DROP_NONE = "none"
DROP_STRATEGIES = (DROP_OLDEST, DROP_NONE)

GROUP_BY_TURN = "turn"

QUERY_SOURCE = "query"

REASON_BUDGET = "budget exhausted"
REASON_CONSTRAINT = "constraint dependency unavailable"


@dataclass
class ContextItem:
    """A single scored unit of content competing for budget."""
    id: str
    source: str
    content: str
    value: Any
    tokens: int
    priority: Priority
    score: float = 0.0
    index: int = 0
    position: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_required(self) -> bool:
        return self.priority is Priority.REQUIRED

    def clone(self) -> "ContextItem":
        """Shallow copy; the payload in ``value`` is shared, never mutated."""
        return replace(self)


@dataclass
class PackedItem:
    """An included item with its final placement zone."""
    id: str
    source: str
    content: str
    value: Any
    tokens: int
    score: float
    placement: str
    role: Optional[str] = None


@dataclass
class DroppedItem:
    """An item left out of the packed context, for reporting."""
    id: str
    source: str
    tokens: int
    score: float
    reason: str


class Constraint(NamedTuple):
    """If ``if_included`` is packed, ``then_require`` must be packed too."""
    if_included: str
    then_require: str
