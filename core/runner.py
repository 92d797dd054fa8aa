"""Time-boxed marshal/unmarshal benchmark loop.

One call to :func:`run_encoding_benchmark` is one runner invocation
bound to one encoding. It walks the shared record list in order and,
for each record:

    1. times ``encode(record)`` and accumulates elapsed time and
       payload size;
    2. times ``decode(payload)`` on the bytes just produced and
       accumulates elapsed time.

Termination:
    The loop ends when the record list is exhausted or, checked once
    after each record, when more than ``time_budget_seconds`` of
    wall-clock time has passed since the runner started. A record in
    flight is never interrupted.

Failure policy:
    Any exception from ``encode`` or ``decode`` is wrapped in
    :class:`EncodingFailure` and raised immediately. No retry, and no
    partial stats are returned. The entry point turns the failure into
    a non-zero process exit.

Timing:
    ``time.perf_counter_ns()`` around each call, integer nanoseconds,
    no float accumulation drift.

Example:
    >>> from core.records import generate_records
    >>> from core.runner import run_encoding_benchmark
    >>> from infra.encodings import OrjsonEncoding
    >>> stats = run_encoding_benchmark(
    ...     records=generate_records(count=10, seed=1),
    ...     encoding=OrjsonEncoding(),
    ... )
    >>> stats.records
    10
"""

import logging
import time
from collections.abc import Sequence
from typing import Protocol

from core.records import Record
from core.stats import EncodingStats, StatsAccumulator

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_TIME_BUDGET_SECONDS: float = 120.0
"""Per-runner wall-clock budget (2 minutes)."""

_PHASE_MARSHAL: str = "marshal"
_PHASE_UNMARSHAL: str = "unmarshal"


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class EncodingBackend(Protocol):
    """Two-operation contract a runner drives."""

    name: str

    def encode(self, record: Record) -> bytes: ...

    def decode(self, payload: bytes) -> Record: ...


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class EncodingFailure(Exception):
    """An encode or decode call failed; the run must be aborted.

    Attributes:
        encoding: Name of the backend that failed.
        phase: ``"marshal"`` or ``"unmarshal"``.
        record_index: Position of the offending record in the corpus.
    """

    def __init__(self, encoding: str, phase: str, record_index: int) -> None:
        self.encoding: str = encoding
        self.phase: str = phase
        self.record_index: int = record_index
        super().__init__(
            f"error {phase} {encoding} (record {record_index})"
        )


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def run_encoding_benchmark(
    records: Sequence[Record],
    encoding: EncodingBackend,
    time_budget_seconds: float = DEFAULT_TIME_BUDGET_SECONDS,
) -> EncodingStats:
    """Run the marshal/unmarshal loop for one encoding.

    Does not mutate ``records``. Ops/sec in the result is computed from
    the cumulative time of each phase, not from total wall time.

    Args:
        records: Shared, read-only record corpus. May be empty.
        encoding: Backend under test.
        time_budget_seconds: Wall-clock budget. Must be >= 0. A budget
            of 0 processes exactly one record (if any).

    Returns:
        Finalized :class:`EncodingStats` for this encoding.

    Raises:
        EncodingFailure: If any encode or decode call raises.
        ValueError: If ``time_budget_seconds`` is negative.
    """
    if time_budget_seconds < 0:
        raise ValueError(
            f"time_budget_seconds must be >= 0, got {time_budget_seconds}"
        )

    label: str = encoding.name
    acc: StatsAccumulator = StatsAccumulator(label=label)
    budget_ns: int = int(time_budget_seconds * 1e9)

    logger.info("Running %s over %d records", label, len(records))
    start: int = time.perf_counter_ns()

    for i, record in enumerate(records):
        t0: int = time.perf_counter_ns()
        try:
            payload: bytes = encoding.encode(record)
        except Exception as exc:
            raise EncodingFailure(label, _PHASE_MARSHAL, i) from exc
        t1: int = time.perf_counter_ns()
        acc.add_marshal(elapsed_ns=t1 - t0, size_bytes=len(payload))

        t0 = time.perf_counter_ns()
        try:
            encoding.decode(payload)
        except Exception as exc:
            raise EncodingFailure(label, _PHASE_UNMARSHAL, i) from exc
        t1 = time.perf_counter_ns()
        acc.add_unmarshal(elapsed_ns=t1 - t0)

        if time.perf_counter_ns() - start > budget_ns:
            if i + 1 < len(records):
                logger.info(
                    "%s stopped after %d of %d records (budget %.1fs)",
                    label,
                    i + 1,
                    len(records),
                    time_budget_seconds,
                )
            break

    stats: EncodingStats = acc.finalize()
    logger.info(
        "Finished %s: %d records, %d bytes",
        label,
        stats.records,
        stats.data_size_bytes,
    )
    return stats
