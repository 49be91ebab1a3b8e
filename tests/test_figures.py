"""
Tests for the selection share pie chart.
"""
import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from tts_preference.analysis.figures import plot_selection_shares  # noqa: E402
from tts_preference.preferences import ModelStats  # noqa: E402


def test_pie_labels():
    stats = {"vits": ModelStats(total=4), "tacotron": ModelStats(total=3)}
    fig = plot_selection_shares(stats)
    ax = fig.axes[0]
    labels = [t.get_text() for t in ax.texts]
    assert "vits (57.1%)" in labels
    assert "tacotron (42.9%)" in labels
    assert "Total Comparisons: 7" in ax.get_title()


def test_unselected_models_left_out():
    stats = {"vits": ModelStats(total=5)}
    fig = plot_selection_shares(stats, models=["vits", "glow"])
    labels = [t.get_text() for t in fig.axes[0].texts]
    assert labels == ["vits (100.0%)"]


def test_draws_on_given_axes():
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    assert plot_selection_shares({"a": ModelStats(total=1), "b": ModelStats(total=1)}, ax=ax) is fig


def test_empty_stats():
    fig = plot_selection_shares({})
    assert len(fig.axes[0].texts) == 0
