"""
Selection share figures.

Note: Requires matplotlib to be installed:
    pip install tts-preference[viz]
"""

from typing import List, Mapping, Optional

from ..preferences.comparisons import ModelStats, selection_shares

try:
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False


COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042', '#8884d8']


def plot_selection_shares(
    stats: Mapping[str, ModelStats],
    models: Optional[List[str]] = None,
    ax=None,
    title: str = "Model Comparison Results",
):
    """
    Pie chart of how often each model was selected.

    Wedges are labelled "<model> (<share>%)"; models with no selections
    are left out of the pie.

    Returns:
        The matplotlib Figure containing the chart
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib required for plot_selection_shares")

    shares = selection_shares(stats, models)
    totals = {m: stats[m].total if m in stats else 0 for m in shares}
    names = [m for m in shares if totals[m] > 0]

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    total = sum(totals.values())
    ax.set_title(f"{title}\nTotal Comparisons: {total}")

    if names:
        ax.pie(
            [totals[m] for m in names],
            labels=[f"{m} ({shares[m]:.1f}%)" for m in names],
            colors=[COLORS[i % len(COLORS)] for i in range(len(names))],
            startangle=90,
        )
    ax.axis("equal")

    return fig
