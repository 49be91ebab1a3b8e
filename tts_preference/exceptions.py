"""Errors and advisory warnings raised by the preference statistics."""


class InvalidInputError(ValueError):
    """Observations (or settings) for which the test is undefined."""


class LowExpectedFrequencyWarning(UserWarning):
    """Some expected frequency is below the chi-square validity threshold."""


class ConvergenceWarning(RuntimeWarning):
    """The incomplete gamma series ran out of iterations before converging."""
