"""Injectable sources of random bits for randomized sketches.

Estimators never reach for the module-level ``random`` functions. They are
handed a ``RandomSource`` instead, so a test can swap in a seeded or fully
scripted source and replay a run exactly.
"""

from __future__ import annotations

import random
from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Protocol for a source of independent random draws."""

    @abstractmethod
    def random(self) -> float:
        """Draw a uniform real in [0, 1)."""
        ...

    @abstractmethod
    def coin_flip(self) -> bool:
        """Draw a fair boolean (True with probability 1/2)."""
        ...


class PythonRandomSource:
    """RandomSource backed by a ``random.Random`` generator.

    Args:
        seed: Seed for a new private generator.
        rng: An existing generator to draw from instead. Sharing one
            generator between sources interleaves their draws.

    Example:
        source = PythonRandomSource(seed=42)
        source.random()     # 0.6394...
        source.coin_flip()  # True or False
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        if seed is not None and rng is not None:
            raise ValueError("pass either seed or rng, not both")

        self._seed = seed
        self._rng = rng if rng is not None else random.Random(seed)

    @property
    def seed(self) -> int | None:
        """Seed the private generator was created with, if any."""
        return self._seed

    def random(self) -> float:
        return self._rng.random()

    def coin_flip(self) -> bool:
        return self._rng.getrandbits(1) == 1

    def __repr__(self) -> str:
        return f"PythonRandomSource(seed={self._seed})"
