"""Integration tests comparing estimates to exact distinct counts.

These feed long streams through seeded estimators and check the estimates
against the known distinct count, including repeated runs to check the
(epsilon, delta) guarantee empirically.
"""

from pathlib import Path

import pytest

from streamdistinct.analysis import plot_trials, run_trials
from streamdistinct.sketching import DistinctCountEstimator
from streamdistinct.streams import alternating_stream, distinct_stream


class TestAlternatingStream:
    """Two distinct values, 100 elements."""

    @pytest.mark.parametrize("seed", range(20))
    def test_estimate_close_to_two(self, seed):
        est = DistinctCountEstimator[int](0, 0.1, 0.1, seed=seed)
        for value in alternating_stream(100):
            est.update(value)

        assert 1 <= est.estimate() <= 4
        if est.sampling_rate == 1.0:
            assert est.estimate() == 2


class TestMillionDistinct:
    """0, 1, ..., 999_999 with epsilon = delta = 0.1."""

    @pytest.mark.parametrize("seed", [1, 2])
    def test_within_ten_percent(self, seed):
        n = 1_000_000
        est = DistinctCountEstimator[int](0, 0.1, 0.1, seed=seed)
        for value in distinct_stream(n):
            est.update(value)

        error = abs(est.estimate() - n) / n
        assert error <= 0.1, f"Expected ~{n}, got {est.estimate()} (error={error:.1%})"
        assert est.halvings > 0
        assert len(est) < est.threshold


class TestRepeatedTrials:
    """Failure fraction over seeded runs stays within delta."""

    def test_failure_fraction_within_delta(self, test_output_dir: Path):
        # 10**5 elements per run keeps 100 runs tractable in pure Python;
        # the 10**6 stream is checked per seed in TestMillionDistinct.
        n = 100_000
        report = run_trials(
            lambda: distinct_stream(n), n, trials=100, epsilon=0.1, delta=0.1, base_seed=1000
        )

        # Sampling slack on top of delta for 100 trials
        assert report.failure_fraction <= 0.1 + 0.05, report.to_dict()
        assert abs(report.mean_estimate - n) / n < 0.02

        plot_trials(report, test_output_dir / "relative_errors.png")
        report.to_dataframe().to_csv(test_output_dir / "trials.csv", index=False)

    def test_loose_parameters_still_within_band(self):
        """Looser epsilon/delta give smaller samples but hold their own band."""
        n = 50_000
        report = run_trials(
            lambda: distinct_stream(n), n, trials=40, epsilon=0.3, delta=0.2, base_seed=7
        )

        assert report.failure_fraction <= 0.2 + 0.1, report.to_dict()

    def test_repeats_do_not_inflate_estimate(self):
        """Each value appearing five times still counts once."""
        distinct = 30_000

        def repeated():
            for _ in range(5):
                yield from range(distinct)

        report = run_trials(repeated, distinct, trials=10, epsilon=0.2, delta=0.1, base_seed=50)

        assert report.failure_fraction <= 0.1 + 0.1, report.to_dict()
