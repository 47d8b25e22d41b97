"""Repeated seeded trials for checking estimator accuracy.

run_trials() feeds the same stream to many independently seeded
estimators and collects the estimates into a TrialReport. The report
shows how often a run landed outside the epsilon band, which should be
at most delta (plus sampling noise) when the guarantee holds.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from streamdistinct.sketching.distinct_count import DistinctCountEstimator
from streamdistinct.sketching.random_source import PythonRandomSource

logger = logging.getLogger(__name__)


@dataclass
class TrialReport:
    """Estimates from repeated runs over one stream."""
    true_count: int
    epsilon: float
    delta: float
    estimates: list[float] = field(default_factory=list)
    seeds: list[int] = field(default_factory=list)

    @property
    def trials(self) -> int:
        return len(self.estimates)

    @property
    def relative_errors(self) -> list[float]:
        return [abs(e - self.true_count) / self.true_count for e in self.estimates]

    @property
    def failures(self) -> int:
        """Runs whose relative error exceeds epsilon."""
        return sum(1 for err in self.relative_errors if err > self.epsilon)

    @property
    def failure_fraction(self) -> float:
        if not self.estimates:
            return 0.0
        return self.failures / len(self.estimates)

    @property
    def mean_estimate(self) -> float:
        if not self.estimates:
            return 0.0
        return sum(self.estimates) / len(self.estimates)

    @property
    def max_relative_error(self) -> float:
        return max(self.relative_errors, default=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "true_count": self.true_count,
            "epsilon": self.epsilon,
            "delta": self.delta,
            "trials": self.trials,
            "mean_estimate": round(self.mean_estimate, 6),
            "max_relative_error": round(self.max_relative_error, 6),
            "failures": self.failures,
            "failure_fraction": round(self.failure_fraction, 6),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per trial: seed, estimate, relative_error, within_epsilon."""
        errors = self.relative_errors
        return pd.DataFrame(
            {
                "seed": self.seeds,
                "estimate": self.estimates,
                "relative_error": errors,
                "within_epsilon": [err <= self.epsilon for err in errors],
            }
        )


def run_trials(
    stream_factory: Callable[[], Iterable[Any]],
    true_count: int,
    *,
    trials: int = 100,
    epsilon: float = 0.1,
    delta: float = 0.1,
    base_seed: int = 0,
    initial_size_hint: int = 0,
) -> TrialReport:
    """Run independently seeded estimators over fresh copies of a stream.

    Args:
        stream_factory: Called once per trial; must return a new iterable.
        true_count: Exact number of distinct elements in the stream.
        trials: Number of runs.
        epsilon: Relative error target for every estimator.
        delta: Failure probability for every estimator.
        base_seed: Trial i is seeded with base_seed + i.
        initial_size_hint: Passed through to each estimator.

    Returns:
        TrialReport with one estimate per trial.

    Raises:
        ValueError: If trials or true_count is not positive.
    """
    if trials <= 0:
        raise ValueError(f"trials must be positive, got {trials}")
    if true_count <= 0:
        raise ValueError(f"true_count must be positive, got {true_count}")

    report = TrialReport(true_count=true_count, epsilon=epsilon, delta=delta)

    for i in range(trials):
        seed = base_seed + i
        estimator = DistinctCountEstimator(
            initial_size_hint,
            epsilon,
            delta,
            random_source=PythonRandomSource(seed=seed),
        )
        for element in stream_factory():
            estimator.update(element)
        report.estimates.append(estimator.estimate())
        report.seeds.append(seed)

    logger.info(
        "Ran %d trials (epsilon=%s, delta=%s): mean=%.1f true=%d failures=%d",
        report.trials,
        epsilon,
        delta,
        report.mean_estimate,
        true_count,
        report.failures,
    )
    return report


def plot_trials(report: TrialReport, path: str | Path) -> Path:
    """Save a histogram of relative errors with the ±epsilon band marked.

    Args:
        report: Results from run_trials().
        path: Output image path. Parent directories are created.

    Returns:
        The path written.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    signed = [(e - report.true_count) / report.true_count for e in report.estimates]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.hist(signed, bins=min(30, max(report.trials, 1)), alpha=0.7)
    ax.axvline(-report.epsilon, color="red", linestyle="--", label=f"±ε = {report.epsilon}")
    ax.axvline(report.epsilon, color="red", linestyle="--")
    ax.set_xlabel("Relative error")
    ax.set_ylabel("Trials")
    ax.set_title(
        f"{report.trials} trials, true={report.true_count}, "
        f"outside band={report.failure_fraction:.0%} (δ={report.delta})"
    )
    ax.legend()

    plt.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path
