"""
Analysis module: Preference significance testing.

Core pieces:
- Chi-square goodness-of-fit test against uniform model preference
- Special functions backing the p-value (Lanczos gamma, incomplete gamma)
- Statistical utilities: significance stars, multiple-comparison correction
"""

from .chi_square import (
    ChiSquareAnalyzer,
    ChiSquareResult,
    chi_square_test,
)
from .special_functions import (
    gamma,
    log_gamma,
    regularized_lower_gamma,
    chi_square_survival,
    chi_square_p_value,
)
from .statistical_utils import (
    significance_stars,
    bonferroni_correction,
    holm_bonferroni_correction,
    format_chi_square,
    format_preference_table,
)

__all__ = [
    "ChiSquareAnalyzer",
    "ChiSquareResult",
    "chi_square_test",
    "gamma",
    "log_gamma",
    "regularized_lower_gamma",
    "chi_square_survival",
    "chi_square_p_value",
    "significance_stars",
    "bonferroni_correction",
    "holm_bonferroni_correction",
    "format_chi_square",
    "format_preference_table",
]
