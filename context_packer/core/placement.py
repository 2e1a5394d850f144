"""Position-aware placement to avoid the "Lost in the Middle" effect."""

from typing import List

from .items import (
    ContextItem,
    PackedItem,
    PLACEMENT_BEGINNING,
    PLACEMENT_END,
    PLACEMENT_MIDDLE,
    POSITION_BEGINNING,
    POSITION_END,
    QUERY_SOURCE,
)


def apply_placement(items: List[ContextItem]) -> List[PackedItem]:
    """
    Arrange included items to match the model's U-shaped attention.

    - ``position="beginning"`` items are pinned first, in source order.
    - ``position="end"`` items are pinned last, in source order, followed
      only by the query.
    - Floating items are ranked by score; even ranks follow the pinned start
      and odd ranks fill the middle in reverse, so the weakest items sit
      where attention is lowest.

    Args:
        items: Included items after packing and constraint enforcement

    Returns:
        Packed items in final order, each tagged with its placement zone
    """
    pin_start = []
    pin_end = []
    query = []
    floating = []

    for item in items:
        if item.source == QUERY_SOURCE:
            query.append(item)
        elif item.position == POSITION_BEGINNING:
            pin_start.append(item)
        elif item.position == POSITION_END:
            pin_end.append(item)
        else:
            floating.append(item)

    pin_start.sort(key=lambda i: i.index)
    pin_end.sort(key=lambda i: i.index)

    floating.sort(key=lambda i: i.score, reverse=True)
    lead_in = floating[0::2]
    middle = floating[1::2]
    middle.reverse()

    placed = []
    for group, placement in ((pin_start, PLACEMENT_BEGINNING),
                             (lead_in, PLACEMENT_BEGINNING),
                             (middle, PLACEMENT_MIDDLE),
                             (pin_end, PLACEMENT_END),
                             (query, PLACEMENT_END)):
        for item in group:
            placed.append(PackedItem(
                id=item.id,
                source=item.source,
                content=item.content,
                value=item.value,
                tokens=item.tokens,
                score=item.score,
                placement=placement,
                role=item.role,
            ))
    return placed
