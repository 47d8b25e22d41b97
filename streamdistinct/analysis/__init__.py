"""Analysis tools for reasoning about estimator accuracy.

- **trials**: Repeated seeded runs, summary report and error histogram
"""

from streamdistinct.analysis.trials import TrialReport, plot_trials, run_trials

__all__ = [
    "TrialReport",
    "plot_trials",
    "run_trials",
]
