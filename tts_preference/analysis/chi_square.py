"""
Chi-square goodness-of-fit test for model preference counts.

Tests whether the number of times each model was selected deviates from
the uniform expectation (every model equally preferred).
"""

import logging
import math
import warnings
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import AnalysisConfig, DEFAULT_CONFIG
from ..exceptions import InvalidInputError, LowExpectedFrequencyWarning
from .special_functions import chi_square_survival
from .statistical_utils import significance_stars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChiSquareResult:
    """Container for chi-square test results."""
    chi_square_value: float
    degrees_of_freedom: int
    p_value: float
    is_significant: bool
    approximate: bool = False  # p-value series ran out of iterations

    @property
    def significance_level(self) -> str:
        """Star tag for the p-value: "", "*", "**" or "***"."""
        return significance_stars(self.p_value)

    def to_dict(self) -> Dict[str, Union[float, int, bool]]:
        """Presentation-layer view with camelCase keys."""
        return {
            "chiSquareValue": self.chi_square_value,
            "pValue": self.p_value,
            "degreesOfFreedom": self.degrees_of_freedom,
            "isSignificant": self.is_significant,
            "approximate": self.approximate,
        }

    def __str__(self) -> str:
        return (
            f"χ²({self.degrees_of_freedom})={self.chi_square_value:.3f}, "
            f"p={self.p_value:.4e}{self.significance_level}"
            + (" (approximate)" if self.approximate else "")
        )


class ChiSquareAnalyzer:
    """
    Chi-square goodness-of-fit test against a uniform null hypothesis.

    Stateless apart from its configuration: every call to `compute` is
    independent, so one analyzer can be shared between threads.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def compute(self, observed: Sequence[float]) -> ChiSquareResult:
        """
        Run the test on a vector of observed counts.

        Args:
            observed: One non-negative count per category (at least two)

        Returns:
            ChiSquareResult

        Raises:
            InvalidInputError: Fewer than two categories, a negative or
                non-finite count, or counts whose sum overflows
        """
        counts, total = self._validate(observed)
        k = len(counts)

        expected = total / k

        if expected < self.config.min_expected_frequency:
            message = (
                "Chi-square test may be invalid: some expected frequencies are "
                f"less than {self.config.min_expected_frequency:g} (expected={expected:.3g})"
            )
            logger.warning(message)
            warnings.warn(message, LowExpectedFrequencyWarning, stacklevel=2)

        if total > 0:
            try:
                chi_square_value = math.fsum(
                    (o - expected) * (o - expected) / expected for o in counts
                )
            except OverflowError:
                chi_square_value = math.inf
        else:
            chi_square_value = 0.0

        degrees_of_freedom = k - 1
        p_value, approximate = chi_square_survival(
            chi_square_value,
            degrees_of_freedom,
            max_iterations=self.config.max_iterations,
            tolerance=self.config.tolerance,
        )

        result = ChiSquareResult(
            chi_square_value=chi_square_value,
            degrees_of_freedom=degrees_of_freedom,
            p_value=p_value,
            is_significant=p_value < self.config.alpha,
            approximate=approximate,
        )
        logger.debug("Chi-square test on %s: %s", counts, result)
        return result

    @staticmethod
    def _validate(observed: Sequence[float]) -> Tuple[list, float]:
        try:
            counts = np.asarray(observed, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Observed frequencies must be numeric: {e}") from e

        if counts.ndim != 1:
            raise InvalidInputError(
                f"Observed frequencies must be a flat sequence, got shape {counts.shape}"
            )
        if len(counts) < 2:
            raise InvalidInputError("At least two categories are required for chi-square test")
        if not np.all(np.isfinite(counts)):
            raise InvalidInputError("Observed frequencies must be finite")
        if np.any(counts < 0):
            raise InvalidInputError("Observed frequencies cannot be negative")

        counts = counts.tolist()
        try:
            total = math.fsum(counts)
        except OverflowError:
            total = math.inf
        if not math.isfinite(total):
            raise InvalidInputError("Sum of observed frequencies must be finite")

        return counts, total


def chi_square_test(
    observed: Sequence[float],
    config: Optional[AnalysisConfig] = None,
) -> ChiSquareResult:
    """Shorthand for ChiSquareAnalyzer(config).compute(observed)."""
    return ChiSquareAnalyzer(config).compute(observed)

