"""Token usage statistics and cost estimates for pack results."""

from typing import Dict, List, Optional
from dataclasses import dataclass, field

from ..config.settings import OptimizerConfig, Pricing
from ..core.items import DroppedItem, PackedItem


@dataclass
class CostEstimate:
    """Estimated input cost, formatted in dollars."""
    input: str
    provider: str


@dataclass
class SourceBreakdown:
    """Per-source token usage."""
    tokens: int = 0
    items: int = 0
    dropped: int = 0
    reason: Optional[str] = None


@dataclass
class PackStats:
    """Summary of a pack result."""
    total_tokens: int
    budget: int
    utilization: float
    breakdown: Dict[str, SourceBreakdown] = field(default_factory=dict)
    estimated_cost: Optional[CostEstimate] = None


def estimate_cost(tokens: int, model: str, pricing: Optional[Pricing] = None) -> Optional[CostEstimate]:
    """
    Estimate input cost for a token count.

    Args:
        tokens: Input tokens
        model: Model name (informational; prices come from ``pricing``)
        pricing: Caller-supplied price table

    Returns:
        CostEstimate, or None when no pricing is configured
    """
    if pricing is None:
        return None
    cost = tokens / 1_000_000 * pricing.input_per_1m
    return CostEstimate(input=f"${cost:.4f}", provider=pricing.provider or "custom")


def build_stats(placed: List[PackedItem],
                dropped: List[DroppedItem],
                budget: int,
                config: OptimizerConfig) -> PackStats:
    """Collect totals, utilization and a per-source breakdown."""
    total_tokens = sum(item.tokens for item in placed)

    breakdown: Dict[str, SourceBreakdown] = {}
    for item in placed:
        entry = breakdown.setdefault(item.source, SourceBreakdown())
        entry.tokens += item.tokens
        entry.items += 1
    for item in dropped:
        entry = breakdown.setdefault(item.source, SourceBreakdown())
        entry.dropped += 1
        if entry.reason is None:
            entry.reason = item.reason

    return PackStats(
        total_tokens=total_tokens,
        budget=budget,
        utilization=total_tokens / budget if budget > 0 else 0.0,
        breakdown=breakdown,
        estimated_cost=estimate_cost(total_tokens, config.model, config.pricing)
    )
