"""CLI entry point: python -m streamdistinct"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from streamdistinct.logging_config import configure_from_env, enable_console_logging
from streamdistinct.sketching import DistinctCountEstimator, ThinningInvariantError
from streamdistinct.streams import STREAMS, distinct_count_of

logger = logging.getLogger("streamdistinct.cli")

# Scenarios run when no --stream is given: (stream, default length)
DEFAULT_SCENARIOS = [("alternating", 100), ("distinct", 1_000_000)]


def _label(name: str, length: int) -> str:
    if name == "alternating":
        return "0,2,0,2..."
    return f"0,1,...,{length - 1}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m streamdistinct",
        description="Estimate distinct elements in a reference stream",
    )
    parser.add_argument(
        "--stream",
        choices=sorted(STREAMS),
        help="Run a single stream instead of the default scenarios",
    )
    parser.add_argument(
        "--length",
        type=int,
        default=None,
        help="Stream length (default: 100 for alternating, 1000000 for distinct)",
    )
    parser.add_argument("--epsilon", type=float, default=0.1, help="Relative error target")
    parser.add_argument("--delta", type=float, default=0.1, help="Failure probability")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random source")
    parser.add_argument(
        "--size-hint",
        type=int,
        default=0,
        help="Initial processed-count hint fed to the threshold formula",
    )
    parser.add_argument(
        "--trials",
        type=int,
        default=1,
        help="Repeat with seeds seed, seed+1, ... and print a JSON report",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log to stderr at this level (default: configure from SD_* env vars)",
    )
    return parser


def _run_once(name: str, length: int, args: argparse.Namespace) -> None:
    estimator = DistinctCountEstimator(
        args.size_hint, args.epsilon, args.delta, seed=args.seed
    )
    for element in STREAMS[name](length):
        estimator.update(element)

    true_count = distinct_count_of(name, length)
    print(
        f"The sequence {_label(name, length)} has {true_count} distinct elements? "
        f"Result: {estimator.cardinality()}"
    )


def _run_trials(name: str, length: int, args: argparse.Namespace) -> None:
    from streamdistinct.analysis import run_trials

    report = run_trials(
        lambda: STREAMS[name](length),
        distinct_count_of(name, length),
        trials=args.trials,
        epsilon=args.epsilon,
        delta=args.delta,
        base_seed=args.seed or 0,
        initial_size_hint=args.size_hint,
    )
    print(json.dumps({"stream": name, "length": length, **report.to_dict()}, indent=2))


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    if args.length is not None and args.length < 0:
        parser.error(f"--length must be non-negative, got {args.length}")
    if args.trials < 1:
        parser.error(f"--trials must be at least 1, got {args.trials}")
    if args.trials > 1 and args.length == 0:
        parser.error("--trials needs a non-empty stream")

    if args.stream:
        scenarios = [(args.stream, args.length if args.length is not None else dict(DEFAULT_SCENARIOS)[args.stream])]
    else:
        scenarios = [(name, args.length if args.length is not None else n) for name, n in DEFAULT_SCENARIOS]

    try:
        for name, length in scenarios:
            if args.trials > 1:
                _run_trials(name, length, args)
            else:
                _run_once(name, length, args)
    except ValueError as exc:
        parser.error(str(exc))
    except ThinningInvariantError as exc:
        logger.error("Estimator invariant violated: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
