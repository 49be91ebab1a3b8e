"""
Preferences module: listener selections and their statistics.

- Comparison records and per-model counts (total and per audio file)
- Selection shares
- Preference report with overall and per-file chi-square tests
"""

from .comparisons import (
    Comparison,
    ModelStats,
    aggregate_model_stats,
    stats_to_frame,
    selection_shares,
)
from .report import PreferenceReport, analyze_preferences

__all__ = [
    "Comparison",
    "ModelStats",
    "aggregate_model_stats",
    "stats_to_frame",
    "selection_shares",
    "PreferenceReport",
    "analyze_preferences",
]
