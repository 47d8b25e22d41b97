"""Distinct-count estimation by adaptive sampling (the CVM algorithm).

The estimator keeps a random sample of the distinct elements seen so far.
Every occurrence of an element is re-trialed: the element is dropped from
the sample and re-admitted with the current sampling probability p. When
the sample reaches the threshold t, each sampled element survives a fair
coin flip and p is halved. The estimate is |sample| / p.

Key properties:
- Space: O(t) elements, t = ceil(12/ε² · ln(8n/δ))
- Update: O(1) amortized (a thinning pass is O(t) and halves p)
- Query: O(1)
- Error: within relative error ε with probability ≥ 1-δ

The threshold is evaluated at the running stream length n, so the memory
bound grows logarithmically as the stream grows.

Reference:
    Chakraborty, Vinodchandran, Meel. "Distinct Elements in Streams: An
    Algorithm for the (Text) Book" (2023), arXiv:2301.10191, Algorithm 1.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Hashable
from typing import Generic, TypeVar

from streamdistinct.sketching.base import CardinalitySketch
from streamdistinct.sketching.random_source import PythonRandomSource, RandomSource

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def threshold(epsilon: float, delta: float, n: int) -> int:
    """Sample size at which the estimator thins its sample.

    Computes ``ceil((12 / epsilon^2) * ln(8n / delta))``. ``n`` is clamped to
    at least 1 so an empty stream still has a positive threshold.

    Args:
        epsilon: Relative error target in (0, 1).
        delta: Failure probability in (0, 1).
        n: Number of stream elements processed.

    Returns:
        The threshold as a positive integer.

    Raises:
        ValueError: If epsilon or delta is not positive, or the parameters
            do not give a finite threshold.
    """
    if not epsilon > 0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")
    if not delta > 0:
        raise ValueError(f"delta must be positive, got {delta}")

    n = max(n, 1)
    square = epsilon * epsilon
    if square > 0:
        raw = (12.0 / square) * math.log((8.0 * n) / delta)
    else:
        raw = math.inf
    if not math.isfinite(raw) or raw <= 0:
        raise ValueError(
            f"threshold is not finite for epsilon={epsilon}, delta={delta}, n={n}"
        )
    return math.ceil(raw)


class ThinningInvariantError(RuntimeError):
    """Thinning failed to bring the sample below the threshold.

    Raised from ``update`` when, after every sampled element has been
    coin-flipped, the sample is still exactly at the threshold. This points
    at a broken random source or a bad parameterization. The estimator is
    left in the state it was in when the violation was detected.
    """

    def __init__(
        self,
        threshold: int,
        retained_size: int,
        sampling_rate: float,
        processed_count: int,
    ):
        self.threshold = threshold
        self.retained_size = retained_size
        self.sampling_rate = sampling_rate
        self.processed_count = processed_count
        super().__init__(
            f"thinning left {retained_size} elements at threshold {threshold} "
            f"(sampling_rate={sampling_rate}, processed_count={processed_count})"
        )


class DistinctCountEstimator(CardinalitySketch, Generic[T]):
    """Estimates the number of distinct elements in a stream.

    Args:
        initial_size_hint: Starting value of the processed count. Only feeds
            the threshold formula; it is not a capacity.
        epsilon: Relative error target in (0, 1).
        delta: Failure probability in (0, 1).
        random_source: Source of uniform draws and coin flips.
        seed: Seed for the default ``PythonRandomSource``. Cannot be combined
            with ``random_source``.

    Example:
        est = DistinctCountEstimator[str](epsilon=0.1, delta=0.1, seed=7)

        for visitor_id in visitor_stream:
            est.update(visitor_id)

        print(f"~{est.estimate():.0f} unique visitors")
    """

    def __init__(
        self,
        initial_size_hint: int = 0,
        epsilon: float = 0.1,
        delta: float = 0.1,
        *,
        random_source: RandomSource | None = None,
        seed: int | None = None,
    ):
        """Initialize the estimator.

        Raises:
            ValueError: If epsilon or delta not in (0, 1), the threshold is
                not finite, initial_size_hint is negative, or both
                random_source and seed are given.
        """
        if not isinstance(initial_size_hint, int) or isinstance(initial_size_hint, bool):
            raise ValueError(f"initial_size_hint must be an integer, got {initial_size_hint!r}")
        if initial_size_hint < 0:
            raise ValueError(f"initial_size_hint must be non-negative, got {initial_size_hint}")
        if not 0 < epsilon < 1:
            raise ValueError(f"epsilon must be in (0, 1), got {epsilon}")
        if not 0 < delta < 1:
            raise ValueError(f"delta must be in (0, 1), got {delta}")
        if random_source is not None and seed is not None:
            raise ValueError("pass either random_source or seed, not both")

        # Fails here rather than on the first update.
        threshold(epsilon, delta, initial_size_hint)

        self._epsilon = epsilon
        self._delta = delta
        self._initial_size_hint = initial_size_hint
        self._source = random_source if random_source is not None else PythonRandomSource(seed)

        self._retained: set[T] = set()
        self._sampling_rate = 1.0
        self._halvings = 0
        self._processed_count = initial_size_hint
        self._total_count = 0

        logger.debug(
            "DistinctCountEstimator initialized: epsilon=%s delta=%s size_hint=%d threshold=%d",
            epsilon,
            delta,
            initial_size_hint,
            self.threshold,
        )

    @property
    def epsilon(self) -> float:
        """Relative error target."""
        return self._epsilon

    @property
    def delta(self) -> float:
        """Failure probability."""
        return self._delta

    @property
    def initial_size_hint(self) -> int:
        return self._initial_size_hint

    @property
    def random_source(self) -> RandomSource:
        return self._source

    @property
    def sampling_rate(self) -> float:
        """Current sampling probability, always 1 / 2**halvings."""
        return self._sampling_rate

    @property
    def halvings(self) -> int:
        """Number of thinning steps performed so far."""
        return self._halvings

    @property
    def processed_count(self) -> int:
        """Stream length used by the threshold formula (includes the size hint)."""
        return self._processed_count

    @property
    def threshold(self) -> int:
        """Threshold at the current processed count."""
        return threshold(self._epsilon, self._delta, self._processed_count)

    @property
    def retained(self) -> frozenset[T]:
        """Snapshot of the currently sampled elements."""
        return frozenset(self._retained)

    def update(self, element: T) -> None:
        """Process one stream element.

        Raises:
            ThinningInvariantError: If a thinning pass leaves the sample at
                the threshold.
        """
        self._processed_count += 1
        self._total_count += 1

        # Re-trial on every occurrence at the current rate.
        self._retained.discard(element)
        if self._source.random() <= self._sampling_rate:
            self._retained.add(element)

        t = threshold(self._epsilon, self._delta, self._processed_count)
        # The sample grows by at most one per call, so == catches every crossing.
        if len(self._retained) == t:
            self._thin(t)

    def _thin(self, t: int) -> None:
        """Keep each sampled element on a fair coin flip and halve the rate."""
        before = len(self._retained)
        coin_flip = self._source.coin_flip
        self._retained = {e for e in self._retained if coin_flip()}
        self._sampling_rate /= 2.0
        self._halvings += 1

        logger.debug(
            "Thinned sample at n=%d: %d -> %d elements, sampling_rate=%s",
            self._processed_count,
            before,
            len(self._retained),
            self._sampling_rate,
        )

        if len(self._retained) == t:
            logger.error(
                "Thinning left the sample at threshold %d (n=%d, sampling_rate=%s)",
                t,
                self._processed_count,
                self._sampling_rate,
            )
            raise ThinningInvariantError(
                threshold=t,
                retained_size=len(self._retained),
                sampling_rate=self._sampling_rate,
                processed_count=self._processed_count,
            )

    def add(self, item: T, count: int = 1) -> None:
        """Add ``count`` occurrences of an item, each re-trialed independently.

        Raises:
            ValueError: If count is negative.
            ThinningInvariantError: See ``update``.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        for _ in range(count):
            self.update(item)

    def estimate(self) -> float:
        """Estimated number of distinct elements seen so far.

        Exact while no thinning has happened (sampling_rate == 1.0).
        """
        return len(self._retained) / self._sampling_rate

    def cardinality(self) -> int:
        """Estimate truncated to an integer."""
        return int(self.estimate())

    @property
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""
        # Set table plus element references; element payloads are not counted
        return sys.getsizeof(self._retained) + len(self._retained) * 8 + sys.getsizeof(self)

    @property
    def item_count(self) -> int:
        """Elements submitted since construction or the last clear()."""
        return self._total_count

    def clear(self) -> None:
        """Reset to the freshly constructed state, keeping configuration."""
        self._retained = set()
        self._sampling_rate = 1.0
        self._halvings = 0
        self._processed_count = self._initial_size_hint
        self._total_count = 0

    def __len__(self) -> int:
        """Number of elements currently sampled."""
        return len(self._retained)

    def __contains__(self, element: object) -> bool:
        return element in self._retained

    def __repr__(self) -> str:
        return (
            f"DistinctCountEstimator(epsilon={self._epsilon}, delta={self._delta}, "
            f"sampled={len(self._retained)}, sampling_rate={self._sampling_rate}, "
            f"estimate≈{self.estimate():.0f})"
        )
