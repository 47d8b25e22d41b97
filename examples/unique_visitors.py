"""Estimate unique visitors in a skewed clickstream and compare to the exact count.

Half of all clicks come from a small set of regulars,
so most stream elements are repeats. The estimator keeps a bounded sample
while a plain set has to hold every visitor id.

Run:
    python examples/unique_visitors.py
"""

import random
import sys

import streamdistinct
from streamdistinct import DistinctCountEstimator

CLICKS = 500_000
VISITOR_POPULATION = 200_000
EPSILON = 0.1
DELTA = 0.05
SEED = 2026


def clickstream(rng: random.Random):
    for _ in range(CLICKS):
        # Half the clicks come from 100 regulars
        if rng.random() < 0.5:
            yield f"visitor-{rng.randrange(100)}"
        else:
            yield f"visitor-{rng.randrange(VISITOR_POPULATION)}"


def main() -> None:
    streamdistinct.configure_from_env()

    estimator = DistinctCountEstimator[str](0, EPSILON, DELTA, seed=SEED)
    exact: set[str] = set()

    for visitor in clickstream(random.Random(SEED)):
        estimator.update(visitor)
        exact.add(visitor)

    estimate = estimator.estimate()
    error = abs(estimate - len(exact)) / len(exact)
    print(f"clicks processed:   {estimator.processed_count}")
    print(f"exact visitors:     {len(exact)}")
    print(f"estimated visitors: {estimate:.0f} (error {error:.2%}, target ±{EPSILON:.0%})")
    print(f"sample size:        {len(estimator)} at rate 1/{2 ** estimator.halvings}")
    print(f"memory:             {estimator.memory_bytes:,} bytes vs {sys.getsizeof(exact):,} for the exact set")


if __name__ == "__main__":
    main()
