"""Per-encoding statistics accumulator.

A runner owns one :class:`StatsAccumulator` for the duration of its loop
and calls :meth:`StatsAccumulator.add_marshal` /
:meth:`StatsAccumulator.add_unmarshal` once per processed record.
:meth:`StatsAccumulator.finalize` then produces a frozen
:class:`EncodingStats` snapshot for the reporter.

Averaging contract:
    Averages are never maintained incrementally. They are computed once,
    in ``finalize()``, as ``total_ns / records``. This keeps
    ``avg * records == total`` exact up to float rounding.

Throughput contract:
    Operations per second for a phase is
    ``records / (phase_total_ns / 1e9)``, i.e. throughput attributable
    to that phase alone. It excludes the other phase and loop overhead.
    A zero phase total yields ``0.0`` instead of a division error.

Example:
    >>> from core.stats import StatsAccumulator
    >>> acc = StatsAccumulator(label="orjson")
    >>> acc.add_marshal(elapsed_ns=2_000, size_bytes=120)
    >>> acc.add_unmarshal(elapsed_ns=3_000)
    >>> stats = acc.finalize()
    >>> stats.records, stats.data_size_bytes
    (1, 120)
    >>> stats.marshal_avg_ns
    2000.0
"""

from pydantic import BaseModel, ConfigDict, Field

_NS_PER_SECOND: float = 1e9


# ---------------------------------------------------------------------------
# Stats Model
# ---------------------------------------------------------------------------


class EncodingStats(BaseModel):
    """Immutable, finalized statistics for one encoding run.

    Attributes:
        label: Encoding name (e.g., ``"orjson"``).
        records: Number of records marshaled during the run.
        data_size_bytes: Cumulative size of all marshaled payloads.
        marshal_total_ns: Cumulative marshal duration (nanoseconds).
        marshal_avg_ns: ``marshal_total_ns / records`` (0 when empty).
        marshal_ops_per_sec: Marshal throughput (0 when total is zero).
        unmarshal_total_ns: Cumulative unmarshal duration (nanoseconds).
        unmarshal_avg_ns: ``unmarshal_total_ns / records`` (0 when empty).
        unmarshal_ops_per_sec: Unmarshal throughput (0 when total is zero).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: str = Field(description="Encoding name")
    records: int = Field(ge=0, description="Records processed")
    data_size_bytes: int = Field(ge=0, description="Total marshaled bytes")
    marshal_total_ns: int = Field(ge=0, description="Total marshal time (ns)")
    marshal_avg_ns: float = Field(ge=0.0, description="Mean marshal time (ns)")
    marshal_ops_per_sec: float = Field(
        ge=0.0,
        description="Records / cumulative marshal seconds",
    )
    unmarshal_total_ns: int = Field(
        ge=0,
        description="Total unmarshal time (ns)",
    )
    unmarshal_avg_ns: float = Field(
        ge=0.0,
        description="Mean unmarshal time (ns)",
    )
    unmarshal_ops_per_sec: float = Field(
        ge=0.0,
        description="Records / cumulative unmarshal seconds",
    )


# ---------------------------------------------------------------------------
# Derived metrics
# ---------------------------------------------------------------------------


def average_ns(total_ns: int, count: int) -> float:
    """Mean duration per record, ``0.0`` when ``count`` is zero."""
    if count <= 0:
        return 0.0
    return total_ns / count


def ops_per_second(count: int, total_ns: int) -> float:
    """Operations per second over a cumulative phase duration.

    Args:
        count: Number of operations performed.
        total_ns: Cumulative time spent in those operations.

    Returns:
        ``count / seconds``, or ``0.0`` when ``total_ns`` is zero.

    Example:
        >>> ops_per_second(count=500, total_ns=250_000_000)
        2000.0
        >>> ops_per_second(count=3, total_ns=0)
        0.0
    """
    if total_ns <= 0:
        return 0.0
    return count / (total_ns / _NS_PER_SECOND)


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------


class StatsAccumulator:
    """Running totals for a single runner invocation.

    Not thread-safe; one accumulator belongs to one runner loop.

    Args:
        label: Encoding name carried into the finalized stats.
    """

    def __init__(self, label: str) -> None:
        self._label: str = label
        self._records: int = 0
        self._data_size_bytes: int = 0
        self._marshal_total_ns: int = 0
        self._unmarshal_total_ns: int = 0

    @property
    def label(self) -> str:
        return self._label

    @property
    def records(self) -> int:
        return self._records

    def add_marshal(self, elapsed_ns: int, size_bytes: int) -> None:
        """Record one completed marshal.

        Args:
            elapsed_ns: Time spent in the encode call.
            size_bytes: Length of the produced payload.

        Raises:
            ValueError: If either value is negative.
        """
        if elapsed_ns < 0 or size_bytes < 0:
            raise ValueError(
                f"elapsed_ns and size_bytes must be >= 0, "
                f"got {elapsed_ns}, {size_bytes}"
            )
        self._records += 1
        self._data_size_bytes += size_bytes
        self._marshal_total_ns += elapsed_ns

    def add_unmarshal(self, elapsed_ns: int) -> None:
        """Record one completed unmarshal.

        Raises:
            ValueError: If ``elapsed_ns`` is negative.
        """
        if elapsed_ns < 0:
            raise ValueError(f"elapsed_ns must be >= 0, got {elapsed_ns}")
        self._unmarshal_total_ns += elapsed_ns

    def finalize(self) -> EncodingStats:
        """Compute averages and rates and return a frozen snapshot.

        Safe to call on an empty accumulator: every derived value is 0.
        """
        return EncodingStats(
            label=self._label,
            records=self._records,
            data_size_bytes=self._data_size_bytes,
            marshal_total_ns=self._marshal_total_ns,
            marshal_avg_ns=average_ns(self._marshal_total_ns, self._records),
            marshal_ops_per_sec=ops_per_second(
                self._records, self._marshal_total_ns,
            ),
            unmarshal_total_ns=self._unmarshal_total_ns,
            unmarshal_avg_ns=average_ns(
                self._unmarshal_total_ns, self._records,
            ),
            unmarshal_ops_per_sec=ops_per_second(
                self._records, self._unmarshal_total_ns,
            ),
        )
