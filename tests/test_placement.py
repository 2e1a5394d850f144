"""Tests for position-aware placement."""

import math

from context_packer.core.items import Priority
from context_packer.core.placement import apply_placement


class TestApplyPlacement:
    """Test cases for apply_placement."""

    def test_beginning_items_first(self, make_item):
        """Test pinned-beginning items precede floating items."""
        items = [
            make_item("rag", source="rag", score=500),
            make_item("sys", source="system", position="beginning", score=math.inf),
        ]
        placed = apply_placement(items)

        assert placed[0].id == "sys"
        assert placed[0].placement == "beginning"

    def test_query_last_after_pinned_end(self, make_item):
        """Test the query follows every pinned-end item."""
        items = [
            make_item("q", source="query", position="end", score=math.inf),
            make_item("recent", source="recent", position="end", score=100),
            make_item("tool", source="tools", score=100),
        ]
        placed = apply_placement(items)

        assert [p.id for p in placed][-2:] == ["recent", "q"]
        assert placed[-1].placement == "end"
        assert placed[-2].placement == "end"

    def test_pinned_items_keep_source_order(self, make_item):
        """Test pinned items are ordered by index, not score."""
        items = [
            make_item("h0", position="end", score=50, index=0),
            make_item("h2", position="end", score=90, index=2),
            make_item("h1", position="end", score=70, index=1),
        ]
        placed = apply_placement(items)

        assert [p.id for p in placed] == ["h0", "h1", "h2"]

    def test_floating_edges_first(self, make_item):
        """Test the highest floater leads and the rest fill toward the middle."""
        items = [
            make_item("mid", score=50),
            make_item("low", score=10),
            make_item("high", score=100),
        ]
        placed = apply_placement(items)

        assert placed[0].id == "high"
        assert placed[0].placement == "beginning"
        assert [p.id for p in placed] == ["high", "low", "mid"]
        assert [p.placement for p in placed] == ["beginning", "beginning", "middle"]

    def test_middle_group_reversed(self, make_item):
        """Test odd-ranked floaters are reversed so the weakest sit centrally."""
        items = [make_item(name, score=score) for name, score in
                 [("a", 50), ("b", 40), ("c", 30), ("d", 20), ("e", 10)]]
        placed = apply_placement(items)

        assert [p.id for p in placed] == ["a", "c", "e", "d", "b"]

    def test_full_order(self, make_item):
        """Test pinned start, lead-in, middle, pinned end, query."""
        items = [
            make_item("q", source="query", priority=Priority.REQUIRED, score=math.inf),
            make_item("end1", position="end", index=1),
            make_item("f1", score=90),
            make_item("start", position="beginning"),
            make_item("f2", score=80),
            make_item("end0", position="end", index=0),
        ]
        placed = apply_placement(items)

        assert [p.id for p in placed] == ["start", "f1", "f2", "end0", "end1", "q"]
        assert [p.placement for p in placed] == ["beginning", "beginning", "middle", "end", "end", "end"]

    def test_packed_item_fields(self, make_item):
        """Test packed items carry content, value, score and role."""
        items = [make_item("m", value={"role": "user", "content": "hi"}, role="user", tokens=7)]
        packed = apply_placement(items)[0]

        assert packed.value == {"role": "user", "content": "hi"}
        assert packed.role == "user"
        assert packed.tokens == 7
        assert packed.score == 50.0
        assert not hasattr(packed, "priority")

    def test_empty(self):
        """Test placing nothing."""
        assert apply_placement([]) == []
