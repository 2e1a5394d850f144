"""Dependency constraint enforcement over a packed item set."""

import logging
from typing import Dict, Iterable, List, NamedTuple, Set

from .items import Constraint, ContextItem

logger = logging.getLogger(__name__)


class ConstraintOutcome(NamedTuple):
    """Result of constraint enforcement."""
    included: List[ContextItem]
    added: List[ContextItem]
    removed: List[ContextItem]
    unresolved: List[Constraint]


def enforce_constraints(included: List[ContextItem],
                        available: Iterable[ContextItem],
                        constraints: List[Constraint],
                        budget: int) -> ConstraintOutcome:
    """
    Make every included trigger bring its dependency along.

    A missing dependency is pulled from ``available`` when it fits in the
    budget. When it cannot be found or does not fit, the dependency is
    marked failed and the trigger is removed instead, unless the trigger is
    required. Passes repeat until nothing changes, so chains such as
    A -> B -> C resolve transitively. ``failed_deps`` only grows, which
    bounds the number of passes.

    Args:
        included: Packed items; mutated in place
        available: Items the packer dropped, candidates to pull back in
        constraints: Pooled constraints from all sources
        budget: Token capacity

    Returns:
        ConstraintOutcome with the (same) included list, the items added and
        removed, and constraints left unmet because their trigger is required
    """
    if not constraints:
        return ConstraintOutcome(included, [], [], [])

    constraints = [Constraint(*constraint) for constraint in constraints]
    included_ids: Set[str] = {item.id for item in included}
    available_map: Dict[str, ContextItem] = {item.id: item for item in available}
    added: List[ContextItem] = []
    removed: List[ContextItem] = []
    failed_deps: Set[str] = set()

    current_tokens = sum(item.tokens for item in included)

    def remove_trigger(trigger_id: str) -> bool:
        nonlocal current_tokens
        for position, item in enumerate(included):
            if item.id == trigger_id:
                if item.is_required:
                    return False
                del included[position]
                included_ids.discard(trigger_id)
                current_tokens -= item.tokens
                removed.append(item)
                logger.debug("Removed %s: dependency unavailable", trigger_id)
                return True
        return False

    changed = True
    while changed:
        changed = False

        for constraint in constraints:
            trigger_id, dep_id = constraint
            if trigger_id not in included_ids or dep_id in included_ids:
                continue

            if dep_id in failed_deps:
                if remove_trigger(trigger_id):
                    changed = True
                continue

            dep = available_map.get(dep_id)
            if dep is None:
                failed_deps.add(dep_id)
                changed = True
                continue

            if current_tokens + dep.tokens <= budget:
                included.append(dep)
                included_ids.add(dep_id)
                del available_map[dep_id]
                current_tokens += dep.tokens
                added.append(dep)
                logger.debug("Added %s required by %s", dep_id, trigger_id)
            else:
                failed_deps.add(dep_id)
                remove_trigger(trigger_id)
            changed = True

    unresolved = []
    for constraint in constraints:
        if (constraint.if_included in included_ids
                and constraint.then_require not in included_ids
                and constraint not in unresolved):
            unresolved.append(constraint)
            logger.warning("Required item %s kept without its dependency %s",
                           constraint.if_included, constraint.then_require)

    return ConstraintOutcome(included, added, removed, unresolved)
