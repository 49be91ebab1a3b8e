"""
Tests for comparison aggregation and preference reports.
"""
import json

import pytest

from tts_preference.analysis.statistical_utils import format_preference_table
from tts_preference.config import AnalysisConfig
from tts_preference.exceptions import (
    ConvergenceWarning,
    InvalidInputError,
    LowExpectedFrequencyWarning,
)
from tts_preference.preferences import (
    Comparison,
    ModelStats,
    aggregate_model_stats,
    analyze_preferences,
    selection_shares,
    stats_to_frame,
)


RECORDS = [
    {"userId": "alice", "fileIndex": 0, "selectedModel": "vits", "timestamp": "2024-05-01T10:00:00Z"},
    {"userId": "alice", "fileIndex": 1, "selectedModel": "vits"},
    {"userId": "alice", "fileIndex": 2, "selectedModel": "tacotron"},
    {"userId": "bob", "fileIndex": 0, "selectedModel": "vits"},
    {"userId": "bob", "fileIndex": 1, "selectedModel": "tacotron"},
    {"userId": "bob", "fileIndex": 2, "selectedModel": "tacotron"},
    {"userId": "carol", "fileIndex": 0, "selectedModel": "vits"},
]


@pytest.fixture
def stats():
    return aggregate_model_stats(Comparison.from_dict(r) for r in RECORDS)


class TestComparison:

    def test_from_camel_case(self):
        c = Comparison.from_dict(RECORDS[0])
        assert c == Comparison("alice", 0, "vits", "2024-05-01T10:00:00Z")

    def test_from_snake_case(self):
        c = Comparison.from_dict({"user_id": "dave", "file_index": "3", "selected_model": "glow"})
        assert c.user_id == "dave"
        assert c.file_index == 3
        assert c.selected_model == "glow"
        assert c.timestamp is None

    def test_missing_field(self):
        with pytest.raises(InvalidInputError, match="selectedModel"):
            Comparison.from_dict({"userId": "alice", "fileIndex": 0})

    def test_bad_file_index(self):
        with pytest.raises(InvalidInputError, match="fileIndex"):
            Comparison.from_dict({"userId": "alice", "fileIndex": "first", "selectedModel": "vits"})


class TestAggregation:

    def test_totals_and_by_file(self, stats):
        assert list(stats) == ["vits", "tacotron"]
        assert stats["vits"].total == 4
        assert stats["vits"].by_file == {0: 3, 1: 1}
        assert stats["tacotron"].total == 3
        assert stats["tacotron"].by_file == {1: 1, 2: 2}

    def test_accepts_plain_dicts(self, stats):
        assert aggregate_model_stats(RECORDS) == stats

    def test_single_user(self):
        alice = aggregate_model_stats(RECORDS, user_id="alice")
        assert alice["vits"].total == 2
        assert alice["vits"].by_file == {0: 1, 1: 1}
        assert alice["tacotron"].to_dict() == {"total": 1, "byFile": {2: 1}}

    def test_unknown_user(self):
        assert aggregate_model_stats(RECORDS, user_id="nobody") == {}

    def test_frame(self, stats):
        frame = stats_to_frame(stats)
        assert list(frame.index) == ["vits", "tacotron"]
        assert list(frame.columns) == [0, 1, 2]
        assert frame.loc["vits"].tolist() == [3, 1, 0]
        assert frame.loc["tacotron"].tolist() == [0, 1, 2]
        assert frame.values.sum() == 7

    def test_frame_without_selections(self):
        assert stats_to_frame({}).empty


class TestShares:

    def test_shares_sum_to_hundred(self, stats):
        shares = selection_shares(stats)
        assert shares["vits"] == pytest.approx(400 / 7)
        assert sum(shares.values()) == pytest.approx(100.0)

    def test_unseen_model(self, stats):
        shares = selection_shares(stats, ["vits", "tacotron", "fastspeech"])
        assert shares["fastspeech"] == 0.0

    def test_no_selections(self):
        assert selection_shares({}, ["a", "b"]) == {"a": 0.0, "b": 0.0}


class TestPreferenceReport:

    def test_zero_filled_models(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats, models=["vits", "tacotron", "fastspeech"])
        assert report.models == ["vits", "tacotron", "fastspeech"]
        assert report.counts == {"vits": 4, "tacotron": 3, "fastspeech": 0}
        assert report.total == 7
        assert report.overall.degrees_of_freedom == 2

    def test_models_missing_from_list_are_kept(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats, models=["tacotron"])
        assert report.models == ["tacotron", "vits"]

    def test_per_file_tests(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats)
        assert sorted(report.per_file) == [0, 1, 2]
        assert report.per_file[1].chi_square_value == 0.0
        assert report.per_file[1].p_value == 1.0
        for file_index, result in report.per_file.items():
            adj_p, _ = report.per_file_adjusted[file_index]
            assert result.p_value <= adj_p <= 1.0

    def test_fewer_than_two_models(self):
        report = analyze_preferences({"vits": ModelStats(total=5, by_file={0: 5})})
        assert report.overall is None
        assert report.per_file == {}
        assert report.preferred_model is None

    def test_no_selections_at_all(self):
        report = analyze_preferences({})
        assert report.overall is None
        assert report.total == 0

    def test_preferred_model(self):
        stats = {"vits": ModelStats(total=90), "tacotron": ModelStats(total=10)}
        report = analyze_preferences(stats)
        assert report.overall.is_significant
        assert report.preferred_model == "vits"

    def test_no_preferred_model_when_not_significant(self):
        stats = {"vits": ModelStats(total=51), "tacotron": ModelStats(total=49)}
        assert analyze_preferences(stats).preferred_model is None

    def test_alpha_from_config(self):
        stats = {"vits": ModelStats(total=60), "tacotron": ModelStats(total=40)}
        assert analyze_preferences(stats).overall.is_significant
        report = analyze_preferences(stats, config=AnalysisConfig(alpha=0.01))
        assert not report.overall.is_significant

    def test_to_dict_is_json_serializable(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats)
        data = json.loads(json.dumps(report.to_dict()))
        assert data["total"] == 7
        assert data["overall"]["degreesOfFreedom"] == 1
        assert set(data["perFile"]) == {"0", "1", "2"}
        assert "adjustedPValue" in data["perFile"]["0"]

    def test_table(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats)
        table = format_preference_table(report)
        assert "vits" in table
        assert "tacotron" in table
        assert "Overall: χ²(1)" in table
        assert "* p < 0.05, ** p < 0.01, *** p < 0.001" in table

    def test_table_without_test(self):
        report = analyze_preferences({"vits": ModelStats(total=3)})
        assert "not tested" in format_preference_table(report)

    def test_approximate_results_are_marked(self):
        stats = {
            "vits": ModelStats(total=900, by_file={0: 900}),
            "tacotron": ModelStats(total=100, by_file={0: 100}),
        }
        with pytest.warns(ConvergenceWarning):
            report = analyze_preferences(stats)
        assert report.approximate is True
        assert report.to_dict()["approximate"] is True
        table = format_preference_table(report)
        assert "[approximate" in table
        assert "~ approximate p-value" in table

    def test_exact_report_is_not_approximate(self, stats):
        with pytest.warns(LowExpectedFrequencyWarning):
            report = analyze_preferences(stats)
        assert report.approximate is False
        assert "approximate" not in format_preference_table(report)
