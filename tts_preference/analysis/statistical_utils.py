"""
Statistical Utilities for Preference Reports.

Provides:
- Significance stars for p-values
- Bonferroni and Holm-Bonferroni correction for multiple comparisons
- Standardized result formatting
"""

from typing import List, Tuple

import numpy as np


def significance_stars(p_value: float) -> str:
    """
    Display tag for a p-value.

    - p < 0.001: "***"
    - p < 0.01: "**"
    - p < 0.05: "*"
    - otherwise: ""
    """
    if p_value < 0.001:
        return "***"
    elif p_value < 0.01:
        return "**"
    elif p_value < 0.05:
        return "*"
    return ""


def bonferroni_correction(
    p_values: List[float],
    alpha: float = 0.05,
) -> List[Tuple[float, bool]]:
    """
    Apply Bonferroni correction for multiple comparisons.

    Args:
        p_values: List of p-values
        alpha: Family-wise error rate

    Returns:
        List of (adjusted_p, significant) tuples
    """
    n = len(p_values)
    if n == 0:
        return []
    adjusted_alpha = alpha / n

    return [
        (min(p * n, 1.0), p < adjusted_alpha)
        for p in p_values
    ]


def holm_bonferroni_correction(
    p_values: List[float],
    alpha: float = 0.05,
) -> List[Tuple[float, bool, int]]:
    """
    Apply Holm-Bonferroni stepwise correction (more powerful than Bonferroni).

    Adjusted p-values are made monotone in rank, so a hypothesis is rejected
    exactly when its adjusted p-value is below alpha.

    Returns:
        List of (adjusted_p, significant, rank) tuples in input order
    """
    n = len(p_values)
    if n == 0:
        return []

    # Sort p-values with original indices
    sorted_indices = np.argsort(p_values, kind="stable")
    results = [None] * n
    running_max = 0.0

    for rank, idx in enumerate(sorted_indices):
        p = float(p_values[idx])
        adjusted_p = min(p * (n - rank), 1.0)
        running_max = max(running_max, adjusted_p)
        results[idx] = (running_max, running_max < alpha, rank + 1)

    return results


def format_chi_square(result, label: str = "") -> str:
    """One-line summary of a ChiSquareResult."""
    prefix = f"{label}: " if label else ""
    verdict = "significant" if result.is_significant else "not significant"
    line = (
        f"{prefix}χ²({result.degrees_of_freedom}) = {result.chi_square_value:.3f}, "
        f"p = {result.p_value:.4e}{result.significance_level} ({verdict})"
    )
    if result.approximate:
        line += " [approximate: p-value series did not converge, p is overstated]"
    return line


def format_preference_table(report, title: str = "Model Preference") -> str:
    """Format a PreferenceReport as ASCII table."""
    total = sum(report.counts.values())
    lines = [
        f"\n{title}",
        "=" * 60,
        f"{'Model':<30} | {'Selections':>12} | {'Share':>10}",
        "-" * 60,
    ]

    for model in report.models:
        lines.append(
            f"{model:<30} | {report.counts[model]:>12d} | {report.shares[model]:>9.1f}%"
        )

    lines.append("-" * 60)
    lines.append(f"{'Total':<30} | {total:>12d} |")
    lines.append("=" * 60)

    if report.overall is not None:
        lines.append(format_chi_square(report.overall, label="Overall"))
    else:
        lines.append("Overall: not tested (fewer than two models)")

    if report.per_file:
        lines.append("")
        lines.append(f"{'File':<10} | {'χ²':>10} | {'p':>10} | {'Holm p':>10}")
        lines.append("-" * 50)
        for file_index, result in report.per_file.items():
            adj_p, _ = report.per_file_adjusted[file_index]
            lines.append(
                f"{file_index:<10} | {result.chi_square_value:>10.3f} | "
                f"{result.p_value:>10.4e} | {adj_p:>10.4e}{significance_stars(adj_p)}"
                + (" ~" if result.approximate else "")
            )

    if any(r.approximate for r in report.per_file.values()):
        lines.append("~ approximate p-value (series did not converge)")
    lines.append("* p < 0.05, ** p < 0.01, *** p < 0.001")
    return "\n".join(lines)
