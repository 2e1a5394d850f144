"""Tests for greedy packing."""

import math

from context_packer.core.items import Priority, REASON_BUDGET
from context_packer.core.packer import greedy_pack


def _required(make_item, id, tokens):
    return make_item(id, priority=Priority.REQUIRED, score=math.inf, tokens=tokens)


class TestGreedyPack:
    """Test cases for greedy_pack."""

    def test_required_included_past_budget(self, make_item):
        """Test required items are kept even when they exceed the budget."""
        result = greedy_pack([_required(make_item, "sys", 500)], 100)

        assert [i.id for i in result.included] == ["sys"]
        assert result.total_tokens == 500
        assert result.dropped == []

    def test_no_optional_items_after_overrun(self, make_item):
        """Test the remaining budget floors at zero."""
        items = [_required(make_item, "sys", 500), make_item("rag", tokens=1)]
        result = greedy_pack(items, 100)

        assert [d.id for d in result.dropped] == ["rag"]

    def test_drops_lowest_scored(self, make_item):
        """Test the lowest-scored item is dropped when budget is tight."""
        items = [
            make_item("a", score=80, tokens=100),
            make_item("b", score=50, tokens=100),
            make_item("c", score=20, tokens=100),
        ]
        result = greedy_pack(items, 200)

        assert {i.id for i in result.included} == {"a", "b"}
        assert [d.id for d in result.dropped] == ["c"]
        assert result.dropped[0].reason == REASON_BUDGET
        assert result.total_tokens == 200

    def test_ties_prefer_fewer_tokens(self, make_item):
        """Test equal scores favour the cheaper item."""
        items = [
            make_item("big", score=50, tokens=150),
            make_item("small", score=50, tokens=50),
        ]
        result = greedy_pack(items, 100)

        assert [i.id for i in result.included] == ["small"]

    def test_continues_past_items_that_dont_fit(self, make_item):
        """Test a large item failing to fit does not stop the scan."""
        items = [
            make_item("big", score=90, tokens=200),
            make_item("small", score=80, tokens=50),
        ]
        result = greedy_pack(items, 100)

        assert [i.id for i in result.included] == ["small"]
        assert [d.id for d in result.dropped] == ["big"]

    def test_required_counted_against_budget(self, make_item):
        """Test optional items only use what required items leave."""
        items = [
            _required(make_item, "sys", 60),
            make_item("a", score=90, tokens=50),
            make_item("b", score=10, tokens=40),
        ]
        result = greedy_pack(items, 100)

        assert [i.id for i in result.included] == ["sys", "b"]
        assert result.total_tokens == 100

    def test_empty_input(self):
        """Test packing nothing."""
        result = greedy_pack([], 100)
        assert result.included == []
        assert result.dropped == []
        assert result.total_tokens == 0
