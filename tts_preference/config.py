"""
Analysis Configuration.

Central configuration for the preference statistics to ensure consistency.
"""

from dataclasses import dataclass

from .exceptions import InvalidInputError


@dataclass(frozen=True)
class AnalysisConfig:
    """Numeric settings shared by the chi-square analysis."""

    # Significance
    alpha: float = 0.05

    # Chi-square validity rule of thumb
    min_expected_frequency: float = 5.0

    # Incomplete gamma series
    max_iterations: int = 100
    tolerance: float = 1e-10

    def __post_init__(self):
        if not 0.0 < self.alpha < 1.0:
            raise InvalidInputError(f"alpha must be in (0, 1), got {self.alpha}")
        if self.max_iterations < 1:
            raise InvalidInputError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )
        if self.tolerance <= 0:
            raise InvalidInputError(f"tolerance must be positive, got {self.tolerance}")
        if self.min_expected_frequency < 0:
            raise InvalidInputError(
                f"min_expected_frequency cannot be negative, got {self.min_expected_frequency}"
            )


DEFAULT_CONFIG = AnalysisConfig()
