"""Reporting services for pack results."""

from .reporter import build_stats, estimate_cost
from .warning_detector import detect_warnings

__all__ = ["build_stats", "estimate_cost", "detect_warnings"]
