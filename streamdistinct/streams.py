"""Reference streams for exercising distinct-count estimators."""

from __future__ import annotations

from collections.abc import Callable, Iterator


def alternating_stream(length: int = 100) -> Iterator[int]:
    """Yield ``1 + (-1)**v`` for v in range(length): 2, 0, 2, 0, ...

    Two distinct values regardless of length (one when length == 1).
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    for v in range(length):
        yield 1 + (-1) ** v


def distinct_stream(length: int = 1_000_000) -> Iterator[int]:
    """Yield 0, 1, ..., length - 1 (every element distinct)."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    yield from range(length)


def distinct_count_of(name: str, length: int) -> int:
    """Exact number of distinct values in the named stream."""
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    if name == "alternating":
        return min(length, 2)
    if name == "distinct":
        return length
    raise ValueError(f"unknown stream {name!r}, expected one of {sorted(STREAMS)}")


STREAMS: dict[str, Callable[[int], Iterator[int]]] = {
    "alternating": alternating_stream,
    "distinct": distinct_stream,
}
