"""Shared benchmark utilities: configuration, reporting, orchestration.

This module ties the record generator, the runner, and the encoding
backends together. It includes:

- ``BenchmarkConfig`` with every tunable as a named, validated field
- Duration formatting in the largest fitting unit
- The fixed-format per-encoding text report
- ``run_benchmarks``: generate once, run each encoding in order,
  report each result as soon as its runner finishes

Design principles:
    - Pydantic models for config and result data structures
    - No process-wide state: the corpus and the backends are passed
      explicitly from the top-level call down to each runner
    - Sequential execution, report order mirrors invocation order

Example:
    >>> import io
    >>> from scripts.benchmark_utils import BenchmarkConfig, run_benchmarks
    >>> out = io.StringIO()
    >>> results = run_benchmarks(
    ...     config=BenchmarkConfig(record_count=50, seed=1),
    ...     out=out,
    ... )
    >>> [r.label for r in results]
    ['orjson', 'ujson', 'stdlib json', 'avro binary']
"""

import logging
import sys
from collections.abc import Sequence
from typing import TextIO

from pydantic import BaseModel, ConfigDict, Field

from core.records import DEFAULT_MAX_COLLECTION_SIZE, generate_records
from core.runner import (
    DEFAULT_TIME_BUDGET_SECONDS,
    EncodingBackend,
    run_encoding_benchmark,
)
from core.stats import EncodingStats
from infra.encodings import default_encodings

logger: logging.Logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class BenchmarkConfig(BaseModel):
    """Configuration for a full benchmark session.

    Attributes:
        record_count: Target corpus size. Primary bound on generation.
        seed: Seed for the record generator. ``None`` is
            non-reproducible.
        corpus_generation_seconds: Wall-clock cap on corpus generation.
            Secondary guard; generation normally stops at
            ``record_count``.
        per_runner_time_budget_seconds: Wall-clock budget for each
            runner. Checked once per record.
        max_collection_size: Upper bound on list/map fields of generated
            records.

    Example:
        >>> config = BenchmarkConfig(record_count=1_000)
        >>> config.per_runner_time_budget_seconds
        120.0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    record_count: int = Field(
        default=100_000,
        gt=0,
        description="Target number of generated records",
    )
    seed: int | None = Field(
        default=42,
        description="Record generator seed (None for OS entropy)",
    )
    corpus_generation_seconds: float = Field(
        default=15.0,
        gt=0.0,
        description="Wall-clock cap on corpus generation (seconds)",
    )
    per_runner_time_budget_seconds: float = Field(
        default=DEFAULT_TIME_BUDGET_SECONDS,
        ge=0.0,
        description="Wall-clock budget per encoding runner (seconds)",
    )
    max_collection_size: int = Field(
        default=DEFAULT_MAX_COLLECTION_SIZE,
        ge=0,
        description="Max elements in generated list/map fields",
    )


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _trim(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_duration(ns: float) -> str:
    """Format a nanosecond duration in the largest fitting unit.

    The value is rounded to the displayed precision (three decimals)
    before the unit is chosen, so a carry moves it to the next unit:
    ``999_999.9`` ns is ``"1ms"`` and ``119_999_600_000`` ns is
    ``"2m0s"``.

    Args:
        ns: Duration in nanoseconds. Fractions are allowed (averages).

    Returns:
        Compact string such as ``"850ns"``, ``"12.345µs"``,
        ``"1.5ms"``, ``"3.2s"``, or ``"2m3.5s"``.

    Example:
        >>> format_duration(0)
        '0s'
        >>> format_duration(1_500_000)
        '1.5ms'
        >>> format_duration(125_000_000_000)
        '2m5s'
    """
    if ns <= 0:
        return "0s"

    whole_ns: int = round(ns)
    if whole_ns < 1_000:
        return f"{whole_ns}ns"

    micros: float = round(ns / 1e3, 3)
    if micros < 1_000:
        return _trim(micros) + "µs"

    millis: float = round(ns / 1e6, 3)
    if millis < 1_000:
        return _trim(millis) + "ms"

    seconds: float = round(ns / 1e9, 3)
    if seconds < 60:
        return _trim(seconds) + "s"
    minutes: int = int(seconds // 60)
    rest: float = round(seconds - minutes * 60, 3)
    return f"{minutes}m{_trim(rest)}s"


def format_stats_report(stats: EncodingStats) -> str:
    """Generate the fixed-format text report for one encoding.

    Args:
        stats: Finalized stats from a runner.

    Returns:
        Multi-line report, ending with a blank line.

    Example:
        >>> from core.stats import StatsAccumulator
        >>> acc = StatsAccumulator(label="orjson")
        >>> acc.add_marshal(elapsed_ns=2_000, size_bytes=1_200)
        >>> acc.add_unmarshal(elapsed_ns=3_000)
        >>> report = format_stats_report(acc.finalize())
        >>> report.splitlines()[:3]
        ['System: orjson', '\\t 1 Records Processed', '\\t 1,200 Total Bytes']
    """
    lines: list[str] = []

    lines.append(f"System: {stats.label}")
    lines.append(f"\t {stats.records:,} Records Processed")
    lines.append(f"\t {stats.data_size_bytes:,} Total Bytes")
    lines.append("")
    lines.append(f"\t {format_duration(stats.unmarshal_avg_ns)} UnMarshal Average")
    lines.append(
        f"\t {format_duration(stats.unmarshal_total_ns)} UnMarshal Total Time"
    )
    lines.append(f"\t {int(stats.unmarshal_ops_per_sec):,} UnMarshal Op/sec")
    lines.append("")
    lines.append(f"\t {format_duration(stats.marshal_avg_ns)} Marshal Average")
    lines.append(f"\t {format_duration(stats.marshal_total_ns)} Marshal Total Time")
    lines.append(f"\t {int(stats.marshal_ops_per_sec):,} Marshal Op/sec")
    lines.append("")

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def run_benchmarks(
    config: BenchmarkConfig,
    encodings: Sequence[EncodingBackend] | None = None,
    out: TextIO | None = None,
) -> list[EncodingStats]:
    """Generate the corpus once and benchmark each encoding in order.

    Each report is written to ``out`` as soon as its runner finishes,
    so an :class:`~core.runner.EncodingFailure` in a later encoding
    leaves the earlier reports in place and writes nothing for the
    failing one.

    Args:
        config: Session configuration.
        encodings: Backends to run, in report order. Defaults to
            :func:`~infra.encodings.default_encodings`.
        out: Report stream. Defaults to ``sys.stdout``.

    Returns:
        One :class:`EncodingStats` per encoding, in run order.

    Raises:
        EncodingFailure: Propagated from the first failing runner.
    """
    stream: TextIO = out if out is not None else sys.stdout
    backends: Sequence[EncodingBackend] = (
        encodings if encodings is not None else default_encodings()
    )

    records = generate_records(
        count=config.record_count,
        max_collection_size=config.max_collection_size,
        seed=config.seed,
        time_limit_seconds=config.corpus_generation_seconds,
    )
    logger.info(
        "Benchmarking %d encodings over %d records",
        len(backends),
        len(records),
    )

    results: list[EncodingStats] = []
    for backend in backends:
        stats: EncodingStats = run_encoding_benchmark(
            records=records,
            encoding=backend,
            time_budget_seconds=config.per_runner_time_budget_seconds,
        )
        results.append(stats)
        stream.write(format_stats_report(stats))
        stream.flush()

    return results
