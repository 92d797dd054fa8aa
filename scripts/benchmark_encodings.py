"""Encoding benchmark: marshal/unmarshal throughput per serialization backend.

Generates a seeded synthetic corpus once, then runs each backend in
fixed order:

    ``orjson`` → ``ujson`` → ``stdlib json`` → ``avro binary``

Each backend marshals then unmarshals every record until the corpus is
exhausted or its time budget runs out, and its report is printed as
soon as it finishes.

Usage:
    python -m scripts.benchmark_encodings
    python -m scripts.benchmark_encodings --record-count 20000 --time-budget 10
    python -m scripts.benchmark_encodings --seed 7 --max-collection-size 5

Output:
    One text report per encoding to stdout.
    Progress and logs to stderr.
    Exit code 1 if any encode/decode call fails.
"""

import argparse
import logging
import sys

from core.runner import EncodingFailure
from scripts.benchmark_utils import BenchmarkConfig, run_benchmarks

logger: logging.Logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser. Defaults mirror ``BenchmarkConfig``."""
    defaults: BenchmarkConfig = BenchmarkConfig()
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Marshal/unmarshal benchmark across serialization backends",
    )
    parser.add_argument(
        "--record-count",
        type=int,
        default=defaults.record_count,
        help=f"Records to generate (default: {defaults.record_count})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help=f"Record generator seed (default: {defaults.seed})",
    )
    parser.add_argument(
        "--corpus-seconds",
        type=float,
        default=defaults.corpus_generation_seconds,
        help=(
            "Wall-clock cap on corpus generation "
            f"(default: {defaults.corpus_generation_seconds})"
        ),
    )
    parser.add_argument(
        "--time-budget",
        type=float,
        default=defaults.per_runner_time_budget_seconds,
        help=(
            "Per-encoding time budget in seconds "
            f"(default: {defaults.per_runner_time_budget_seconds})"
        ),
    )
    parser.add_argument(
        "--max-collection-size",
        type=int,
        default=defaults.max_collection_size,
        help=(
            "Max elements in generated list/map fields "
            f"(default: {defaults.max_collection_size})"
        ),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run all encoding benchmarks and print one report per encoding."""
    args: argparse.Namespace = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config: BenchmarkConfig = BenchmarkConfig(
        record_count=args.record_count,
        seed=args.seed,
        corpus_generation_seconds=args.corpus_seconds,
        per_runner_time_budget_seconds=args.time_budget,
        max_collection_size=args.max_collection_size,
    )

    print(
        f"Encoding Benchmark: {config.record_count:,} records, "
        f"seed={config.seed}, "
        f"budget={config.per_runner_time_budget_seconds:g}s per encoding",
        file=sys.stderr,
    )

    try:
        run_benchmarks(config=config)
    except EncodingFailure as exc:
        logger.error(
            "%s failed during %s: %s",
            exc.encoding,
            exc.phase,
            exc.__cause__,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
