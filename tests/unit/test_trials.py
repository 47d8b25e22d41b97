"""Tests for repeated accuracy trials."""

from pathlib import Path

import pandas as pd
import pytest

from streamdistinct.analysis import TrialReport, plot_trials, run_trials
from streamdistinct.streams import distinct_stream


class TestTrialReport:
    """Tests for the derived statistics on TrialReport."""

    def test_failures_use_strict_epsilon_band(self):
        """A run exactly at epsilon is not a failure."""
        report = TrialReport(
            true_count=100, epsilon=0.1, delta=0.1, estimates=[90.0, 100.0, 120.0], seeds=[0, 1, 2]
        )

        assert report.trials == 3
        assert report.relative_errors == pytest.approx([0.1, 0.0, 0.2])
        assert report.failures == 1
        assert report.failure_fraction == pytest.approx(1 / 3)
        assert report.mean_estimate == pytest.approx(310 / 3)
        assert report.max_relative_error == pytest.approx(0.2)

    def test_empty_report(self):
        report = TrialReport(true_count=10, epsilon=0.1, delta=0.1)

        assert report.failure_fraction == 0.0
        assert report.mean_estimate == 0.0
        assert report.max_relative_error == 0.0

    def test_to_dict(self):
        report = TrialReport(
            true_count=100, epsilon=0.1, delta=0.1, estimates=[100.0, 104.0], seeds=[5, 6]
        )

        data = report.to_dict()
        assert data["trials"] == 2
        assert data["failures"] == 0
        assert data["mean_estimate"] == 102.0
        assert data["max_relative_error"] == 0.04

    def test_to_dataframe(self):
        report = TrialReport(
            true_count=100, epsilon=0.1, delta=0.1, estimates=[100.0, 150.0], seeds=[5, 6]
        )

        df = report.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["seed", "estimate", "relative_error", "within_epsilon"]
        assert df["seed"].tolist() == [5, 6]
        assert df["within_epsilon"].tolist() == [True, False]


class TestRunTrials:
    """Tests for run_trials."""

    def test_exact_on_small_streams(self):
        """Streams far below the threshold are counted exactly."""
        report = run_trials(lambda: distinct_stream(500), 500, trials=5, base_seed=10)

        assert report.estimates == [500.0] * 5
        assert report.seeds == [10, 11, 12, 13, 14]
        assert report.failures == 0

    def test_reproducible(self):
        kwargs = dict(trials=3, epsilon=0.5, delta=0.5, base_seed=3)
        a = run_trials(lambda: distinct_stream(5000), 5000, **kwargs)
        b = run_trials(lambda: distinct_stream(5000), 5000, **kwargs)

        assert a.estimates == b.estimates

    def test_rejects_bad_arguments(self):
        with pytest.raises(ValueError, match="trials"):
            run_trials(lambda: distinct_stream(10), 10, trials=0)
        with pytest.raises(ValueError, match="true_count"):
            run_trials(lambda: distinct_stream(10), 0)

    def test_logs_summary(self, caplog):
        caplog.set_level("INFO", logger="streamdistinct")

        run_trials(lambda: distinct_stream(50), 50, trials=2)

        assert "Ran 2 trials" in caplog.text


class TestPlotTrials:

    def test_writes_png(self, test_output_dir: Path):
        report = run_trials(lambda: distinct_stream(5000), 5000, trials=10, epsilon=0.5, delta=0.5)

        path = plot_trials(report, test_output_dir / "errors.png")

        assert path.exists()
        assert path.stat().st_size > 0
