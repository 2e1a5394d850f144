"""
context-packer: budget-aware selection and arrangement of LLM context.

Register heterogeneous sources (system prompts, tools, conversation history,
retrieved documents) with priorities and constraints, then pack them into an
ordered sequence that fits the model's token budget and places the most
relevant content where the model attends most.
"""

__version__ = "0.1.0"

from .config.settings import AddOptions, OptimizerConfig, Pricing, SourceConfig
from .core.items import Constraint, ContextItem, DroppedItem, PackedItem, Priority
from .core.tokenizer_service import BaseTokenizer, HeuristicTokenizer, TokenizerService
from .core.scoring import apply_recency_bias, score_priority
from .core.turns import group_into_turns
from .core.packer import greedy_pack
from .core.constraints import enforce_constraints
from .core.placement import apply_placement
from .core.optimizer import ContextOptimizer, PackResult
from .services.reporter import CostEstimate, PackStats, estimate_cost
from .services.warning_detector import PackWarning, WarningType
from .utils.message_formatter import MessageFormatter

__all__ = [
    "AddOptions",
    "OptimizerConfig",
    "Pricing",
    "SourceConfig",
    "Constraint",
    "ContextItem",
    "DroppedItem",
    "PackedItem",
    "Priority",
    "BaseTokenizer",
    "HeuristicTokenizer",
    "TokenizerService",
    "apply_recency_bias",
    "score_priority",
    "group_into_turns",
    "greedy_pack",
    "enforce_constraints",
    "apply_placement",
    "ContextOptimizer",
    "PackResult",
    "CostEstimate",
    "PackStats",
    "estimate_cost",
    "PackWarning",
    "WarningType",
    "MessageFormatter",
]
