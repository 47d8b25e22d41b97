"""Base protocols for streaming distinct-count sketches.

A sketch consumes a stream one item at a time and answers approximate
queries about it from bounded memory. Estimators in this package are
single-producer: items arrive sequentially and nothing here blocks or
yields.

This module defines:
- Sketch: Base protocol with common operations (add, clear, sizing)
- CardinalitySketch: For cardinality (distinct count) estimation
"""

from abc import ABC, abstractmethod
from typing import TypeVar

T = TypeVar("T")


class Sketch(ABC):
    """Base protocol for streaming sketches.

    Sketches process a stream of items and provide approximate answers to
    queries about the stream. They support:
    - Adding items (with optional repeat counts)
    - Estimating memory usage
    - Clearing state for reuse

    Randomized sketches take their randomness as an injected source (or a
    `seed` for the default source) so runs can be reproduced.
    """

    @abstractmethod
    def add(self, item: T, count: int = 1) -> None:
        """Add an item to the sketch.

        Args:
            item: The item to add.
            count: Number of occurrences to add (default 1).
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Total number of occurrences added to the sketch."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the sketch to its initial empty state."""


class CardinalitySketch(Sketch):
    """Protocol for sketches that estimate cardinality (distinct count).

    Implementations: DistinctCountEstimator
    """

    @abstractmethod
    def cardinality(self) -> int:
        """Estimate the number of distinct items.

        Returns:
            Estimated count of unique items added.
        """
