"""Context optimizer: source registration and the pack pipeline."""

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional
from dataclasses import dataclass, field

from ..config.settings import AddOptions, OptimizerConfig
from ..services.reporter import PackStats, build_stats
from ..services.warning_detector import PackWarning, detect_warnings
from .constraints import enforce_constraints
from .items import (
    Constraint,
    ContextItem,
    DroppedItem,
    PackedItem,
    Priority,
    DROP_NONE,
    DROP_OLDEST,
    GROUP_BY_TURN,
    POSITION_END,
    QUERY_SOURCE,
    REASON_CONSTRAINT,
)
from .packer import greedy_pack
from .placement import apply_placement
from .scoring import apply_recency_bias, score_priority
from .tokenizer_service import TokenizerService
from .turns import group_into_turns, normalize_content, promote_last

logger = logging.getLogger(__name__)


class ContextSource(NamedTuple):
    """A registered source: its measured items and packing options."""
    name: str
    items: List[ContextItem]
    options: AddOptions


@dataclass
class PackResult:
    """Result of a pack call."""
    items: List[PackedItem]
    stats: PackStats
    warnings: List[PackWarning] = field(default_factory=list)
    dropped: List[DroppedItem] = field(default_factory=list)


class ContextOptimizer:
    """Selects, scores and arranges context items within a token budget."""

    def __init__(self, config: OptimizerConfig, tokenizer=None):
        """
        Initialize the optimizer.

        Args:
            config: Model window, output reserve and optional pricing
            tokenizer: Object exposing ``count(text) -> int``; defaults to
                the heuristic TokenizerService
        """
        self.config = config
        self.tokenizer = tokenizer or TokenizerService()
        self._sources: Dict[str, ContextSource] = {}

    @classmethod
    def from_config(cls, config: OptimizerConfig, tokenizer=None) -> 'ContextOptimizer':
        """Create an optimizer with the sources declared in ``config``."""
        optimizer = cls(config, tokenizer)
        for name, source in config.sources.items():
            optimizer.add(name, source.content, source.options)
        return optimizer

    @property
    def budget(self) -> int:
        return self.config.budget

    @property
    def sources(self) -> Mapping[str, ContextSource]:
        return dict(self._sources)

    def add(self, source: str, content: Any, options: Optional[AddOptions] = None, **kwargs) -> 'ContextOptimizer':
        """
        Register a context source, replacing any source with the same name.

        Args:
            source: Identifier for the source (e.g. 'system', 'tools', 'history')
            content: A string or mapping becomes one item; a list becomes one
                item per element. Non-string payloads are JSON-encoded for
                measurement and kept as-is in ``value``.
            options: AddOptions; alternatively pass its fields as keywords

        Returns:
            self, for chaining

        Raises:
            ValueError: If ``source`` is the name reserved for the query
        """
        if source == QUERY_SOURCE:
            raise ValueError(f"Source name '{QUERY_SOURCE}' is reserved for the pack query")
        if options is None:
            options = AddOptions(**kwargs)
        elif kwargs:
            raise ValueError("Pass either an AddOptions instance or keyword options, not both")

        items = normalize_content(source, content, self.tokenizer, options.priority, options.position)
        if options.group_by == GROUP_BY_TURN:
            items = group_into_turns(source, items, options.initiator_role)
        promote_last(items, options.keep_last)

        self._sources[source] = ContextSource(source, items, options)
        logger.debug("Registered source '%s' with %d item(s)", source, len(items))
        return self

    def remove(self, source: str) -> 'ContextOptimizer':
        """Remove a previously registered source."""
        self._sources.pop(source, None)
        return self

    def clear(self) -> 'ContextOptimizer':
        """Remove all registered sources."""
        self._sources.clear()
        return self

    def pack(self, query: Optional[str] = None) -> PackResult:
        """
        Pack the registered context into an optimized arrangement.

        Args:
            query: Optional user query. Passed to custom scorers and appended
                as a required item at the very end.

        Returns:
            PackResult with placed items, stats, warnings and dropped items
        """
        budget = self.budget
        all_items = self._collect_and_score(query)

        if query:
            all_items.append(ContextItem(
                id=f"{QUERY_SOURCE}_0",
                source=QUERY_SOURCE,
                content=query,
                value=query,
                tokens=self.tokenizer.count(query),
                priority=Priority.REQUIRED,
                score=score_priority(Priority.REQUIRED),
                position=POSITION_END,
            ))

        included, dropped, _ = greedy_pack(all_items, budget)

        dropped_ids = {d.id for d in dropped}
        outcome = enforce_constraints(
            included,
            [item for item in all_items if item.id in dropped_ids],
            self._collect_constraints(),
            budget,
        )

        added_ids = {item.id for item in outcome.added}
        final_dropped = [d for d in dropped if d.id not in added_ids]
        final_dropped.extend(
            DroppedItem(
                id=item.id,
                source=item.source,
                tokens=item.tokens,
                score=item.score,
                reason=REASON_CONSTRAINT,
            )
            for item in outcome.removed
        )

        placed = apply_placement(outcome.included)
        stats = build_stats(placed, final_dropped, budget, self.config)
        warnings = detect_warnings(placed, final_dropped, budget, outcome.unresolved)

        logger.debug("Packed %d item(s), dropped %d, %d/%d tokens",
                     len(placed), len(final_dropped), stats.total_tokens, budget)
        return PackResult(items=placed, stats=stats, warnings=warnings, dropped=final_dropped)

    def _collect_constraints(self) -> List[Constraint]:
        constraints = []
        for source in self._sources.values():
            for trigger, dependency in source.options.requires.items():
                constraints.append(Constraint(trigger, dependency))
        return constraints

    def _collect_and_score(self, query: Optional[str]) -> List[ContextItem]:
        """Clone registered items and score the clones for this call only."""
        all_items = []

        for source in self._sources.values():
            options = source.options
            cloned = [item.clone() for item in source.items]

            if options.drop_strategy == DROP_NONE:
                for item in cloned:
                    item.priority = Priority.REQUIRED

            for item in cloned:
                item.score = score_priority(item.priority)

            if options.drop_strategy == DROP_OLDEST:
                apply_recency_bias(cloned)

            if options.scorer and query:
                for item in cloned:
                    if not item.is_required:
                        item.score = float(options.scorer(item, query))

            all_items.extend(cloned)

        return all_items
