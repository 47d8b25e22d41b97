"""Single-pass distinct-count estimation with (epsilon, delta) guarantees.

Example:
    from streamdistinct import DistinctCountEstimator

    est = DistinctCountEstimator(epsilon=0.1, delta=0.1, seed=1)
    for value in range(1_000_000):
        est.update(value)
    print(est.estimate())  # ~1_000_000
"""

import logging

from streamdistinct.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from streamdistinct.sketching import (
    CardinalitySketch,
    DistinctCountEstimator,
    PythonRandomSource,
    RandomSource,
    Sketch,
    ThinningInvariantError,
    threshold,
)

__version__ = "0.1.0"

# Silent unless the application configures logging.
logging.getLogger("streamdistinct").addHandler(logging.NullHandler())

__all__ = [
    "CardinalitySketch",
    "DistinctCountEstimator",
    "PythonRandomSource",
    "RandomSource",
    "Sketch",
    "ThinningInvariantError",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
    "threshold",
]
