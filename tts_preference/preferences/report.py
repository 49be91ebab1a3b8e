"""
Preference report: chi-square tests over model selection statistics.

Tests the overall selection totals and, separately, each audio file, with
Holm-Bonferroni correction across the per-file tests.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..analysis.chi_square import ChiSquareAnalyzer, ChiSquareResult
from ..analysis.statistical_utils import holm_bonferroni_correction
from ..config import AnalysisConfig, DEFAULT_CONFIG
from .comparisons import ModelStats, selection_shares

logger = logging.getLogger(__name__)


@dataclass
class PreferenceReport:
    """Container for the statistics shown to evaluators."""
    models: List[str]
    counts: Dict[str, int]
    shares: Dict[str, float]
    overall: Optional[ChiSquareResult] = None
    per_file: Dict[int, ChiSquareResult] = field(default_factory=dict)
    per_file_adjusted: Dict[int, Tuple[float, bool]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def approximate(self) -> bool:
        """True if any p-value in the report came from a truncated series."""
        results = list(self.per_file.values())
        if self.overall is not None:
            results.append(self.overall)
        return any(r.approximate for r in results)

    @property
    def preferred_model(self) -> Optional[str]:
        """Most selected model, if the overall test is significant."""
        if self.overall is None or not self.overall.is_significant:
            return None
        return max(self.models, key=lambda m: self.counts[m])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "models": list(self.models),
            "counts": dict(self.counts),
            "shares": dict(self.shares),
            "total": self.total,
            "overall": self.overall.to_dict() if self.overall is not None else None,
            "approximate": self.approximate,
            "perFile": {
                str(file_index): {
                    **result.to_dict(),
                    "adjustedPValue": self.per_file_adjusted[file_index][0],
                    "adjustedSignificant": self.per_file_adjusted[file_index][1],
                }
                for file_index, result in self.per_file.items()
            },
        }


def analyze_preferences(
    stats: Mapping[str, ModelStats],
    models: Optional[List[str]] = None,
    config: Optional[AnalysisConfig] = None,
) -> PreferenceReport:
    """
    Test whether listeners prefer some models over others.

    Args:
        stats: Per-model statistics from aggregate_model_stats
        models: Every model under test; models never selected count as 0.
            Defaults to the models present in stats.
        config: Analysis configuration

    Returns:
        PreferenceReport. `overall` is None when fewer than two models are known.
    """
    config = config or DEFAULT_CONFIG
    analyzer = ChiSquareAnalyzer(config)

    if models is None:
        models = list(stats.keys())
    else:
        models = list(dict.fromkeys(list(models) + [m for m in stats if m not in models]))

    counts = {m: stats[m].total if m in stats else 0 for m in models}
    report = PreferenceReport(
        models=models,
        counts=counts,
        shares=selection_shares(stats, models),
    )

    if len(models) < 2:
        logger.info("Skipping preference test: %d model(s) known", len(models))
        return report

    report.overall = analyzer.compute([counts[m] for m in models])

    file_indices = sorted({i for s in stats.values() for i in s.by_file})
    # Per-file counts are small by nature; only the overall test warns about them
    file_analyzer = ChiSquareAnalyzer(replace(config, min_expected_frequency=0.0))
    for file_index in file_indices:
        observed = [
            stats[m].by_file.get(file_index, 0) if m in stats else 0
            for m in models
        ]
        report.per_file[file_index] = file_analyzer.compute(observed)

    if report.per_file:
        adjusted = holm_bonferroni_correction(
            [r.p_value for r in report.per_file.values()],
            alpha=config.alpha,
        )
        for file_index, (adj_p, significant, _) in zip(report.per_file, adjusted):
            report.per_file_adjusted[file_index] = (adj_p, significant)

    logger.debug(
        "Preference report over %d models, %d files: %s",
        len(models), len(file_indices), report.overall,
    )
    return report
