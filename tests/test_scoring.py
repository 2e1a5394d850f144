"""Tests for priority scoring and recency bias."""

import math

import pytest
from context_packer.core.items import Priority
from context_packer.core.scoring import apply_recency_bias, score_priority


class TestScorePriority:
    """Test cases for score_priority."""

    def test_required_is_infinite(self):
        """Test required items score infinity."""
        assert score_priority(Priority.REQUIRED) == math.inf

    def test_tiers_are_ordered(self):
        """Test high > medium > low > 0."""
        assert score_priority(Priority.HIGH) > score_priority(Priority.MEDIUM)
        assert score_priority(Priority.MEDIUM) > score_priority(Priority.LOW)
        assert score_priority(Priority.LOW) > 0

    def test_accepts_string_values(self):
        """Test priorities can be given by name."""
        assert score_priority("high") == score_priority(Priority.HIGH)

    def test_unknown_priority_raises(self):
        """Test an unknown tier is rejected."""
        with pytest.raises(ValueError):
            score_priority("urgent")

    def test_priority_dominates_recency_decay(self):
        """Test a fully decayed tier still outranks the tier below."""
        assert score_priority(Priority.HIGH) * 0.1 > score_priority(Priority.MEDIUM)
        assert score_priority(Priority.MEDIUM) * 0.1 > score_priority(Priority.LOW)


class TestRecencyBias:
    """Test cases for apply_recency_bias."""

    def test_oldest_lowest_newest_unchanged(self, make_item):
        """Test scores increase with index from 10% to 100%."""
        items = [make_item(str(i), score=100.0, index=i) for i in range(3)]
        apply_recency_bias(items)

        assert items[0].score < items[1].score < items[2].score
        assert items[0].score == pytest.approx(10.0)
        assert items[1].score == pytest.approx(55.0)
        assert items[2].score == 100.0

    def test_ranks_by_index_not_list_order(self, make_item):
        """Test ranking follows the index field."""
        items = [
            make_item("new", score=100.0, index=5),
            make_item("old", score=100.0, index=1),
        ]
        apply_recency_bias(items)

        assert items[0].score == 100.0
        assert items[1].score == pytest.approx(10.0)

    def test_required_items_not_decayed(self, make_item):
        """Test required items keep an infinite score."""
        items = [
            make_item("0", priority=Priority.REQUIRED, score=math.inf, index=0),
            make_item("1", score=100.0, index=1),
        ]
        apply_recency_bias(items)

        assert items[0].score == math.inf
        assert items[1].score == 100.0

    def test_single_item_unchanged(self, make_item):
        """Test a lone item keeps its score."""
        items = [make_item("only", score=42.0)]
        apply_recency_bias(items)
        assert items[0].score == 42.0

    def test_empty_list(self):
        """Test empty input is returned as-is."""
        assert apply_recency_bias([]) == []
