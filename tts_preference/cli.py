"""
Command line preference test.

Example:
    tts-preference 90 10 --labels tacotron vits
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .analysis.statistical_utils import format_preference_table
from .config import AnalysisConfig
from .exceptions import InvalidInputError
from .preferences import ModelStats, analyze_preferences

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tts-preference",
        description="Chi-square test of TTS model selection counts against equal preference",
    )
    parser.add_argument("counts", type=int, nargs="+", help="Selection count per model")
    parser.add_argument("--labels", nargs="+", help="Model names, one per count")
    parser.add_argument("--alpha", type=float, default=0.05, help="Significance level")
    parser.add_argument("--plot", help="Save a pie chart of selection shares to this path")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(
    counts: List[int],
    labels: Optional[List[str]] = None,
    alpha: float = 0.05,
    plot: Optional[str] = None,
    as_json: bool = False,
) -> str:
    """
    Test the given counts and return the rendered report.

    Raises:
        InvalidInputError: Bad counts, labels or alpha
        ImportError: A plot was requested without matplotlib installed
    """
    config = AnalysisConfig(alpha=alpha)

    if labels is None:
        labels = [f"model_{i + 1}" for i in range(len(counts))]
    if len(labels) != len(counts):
        raise InvalidInputError(
            f"Got {len(labels)} labels for {len(counts)} counts"
        )
    if len(set(labels)) != len(labels):
        raise InvalidInputError(f"Model labels must be unique: {labels}")
    if len(counts) < 2:
        raise InvalidInputError("At least two categories are required for chi-square test")

    stats = {label: ModelStats(total=count) for label, count in zip(labels, counts)}
    report = analyze_preferences(stats, models=labels, config=config)

    if plot:
        from .analysis import figures

        if not figures.MATPLOTLIB_AVAILABLE:
            raise ImportError("--plot requires matplotlib: pip install tts-preference[viz]")
        figures.plt.switch_backend("Agg")

        fig = figures.plot_selection_shares(stats, models=labels)
        fig.savefig(plot, bbox_inches="tight")
        logger.info("Saved selection share chart to %s", plot)

    if as_json:
        return json.dumps(report.to_dict(), indent=2)
    return format_preference_table(report)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        output = run(
            args.counts,
            labels=args.labels,
            alpha=args.alpha,
            plot=args.plot,
            as_json=args.json,
        )
    except (InvalidInputError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
