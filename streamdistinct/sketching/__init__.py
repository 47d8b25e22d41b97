"""Streaming sketches for distinct-count estimation.

The estimator here answers "how many different elements have I seen?"
from a single pass over a stream, holding only a bounded random sample of
the elements in memory.

Common properties:
- Bounded memory (set by epsilon, delta and the stream length so far)
- Single-pass processing (update with items one at a time)
- Reproducible (injected random source or optional seed)

Quick Reference:
    DistinctCountEstimator: Cardinality (distinct count) estimation
    RandomSource / PythonRandomSource: Injectable random draws
    threshold: Sample-size threshold formula

Example:
    from streamdistinct.sketching import DistinctCountEstimator

    est = DistinctCountEstimator[int](epsilon=0.1, delta=0.1, seed=42)
    for user_id in user_ids:
        est.update(user_id)
    print(f"~{est.estimate():.0f} distinct users")
"""

# Base protocols
from streamdistinct.sketching.base import CardinalitySketch, Sketch

# Cardinality estimation
from streamdistinct.sketching.distinct_count import (
    DistinctCountEstimator,
    ThinningInvariantError,
    threshold,
)

# Randomness
from streamdistinct.sketching.random_source import PythonRandomSource, RandomSource

__all__ = [
    "CardinalitySketch",
    # Cardinality estimation
    "DistinctCountEstimator",
    # Randomness
    "PythonRandomSource",
    "RandomSource",
    # Protocols
    "Sketch",
    "ThinningInvariantError",
    "threshold",
]
