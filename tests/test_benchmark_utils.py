"""Unit tests for benchmark utilities.

Tests cover:
    - BenchmarkConfig defaults, validation, and immutability
    - Duration formatting across units
    - Report formatting (labels, thousands separators, durations)
    - Orchestration: run order, report order, corpus size, and
      no report for an encoding that fails
"""

import io

import pytest
from pydantic import ValidationError

from core.records import Record
from core.runner import EncodingFailure
from core.stats import EncodingStats, StatsAccumulator
from scripts.benchmark_utils import (
    BenchmarkConfig,
    format_duration,
    format_stats_report,
    run_benchmarks,
)


class _EchoBackend:
    """Minimal backend returning a fixed payload."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        self._last: Record | None = None

    def encode(self, record: Record) -> bytes:
        self._last = record
        return b"abcd"

    def decode(self, payload: bytes) -> Record:
        assert self._last is not None
        return self._last


class _FailingDecodeBackend(_EchoBackend):
    """Backend whose decode call always fails."""

    def decode(self, payload: bytes) -> Record:
        raise RuntimeError("decode exploded")


def _make_stats(**overrides: object) -> EncodingStats:
    """Create EncodingStats with plausible values."""
    fields: dict[str, object] = {
        "label": "orjson",
        "records": 1_234_567,
        "data_size_bytes": 987_654_321,
        "marshal_total_ns": 2_500_000_000,
        "marshal_avg_ns": 2_025.0,
        "marshal_ops_per_sec": 493_827.6,
        "unmarshal_total_ns": 125_000_000_000,
        "unmarshal_avg_ns": 101_250.0,
        "unmarshal_ops_per_sec": 9_876.5,
    }
    fields.update(overrides)
    return EncodingStats(**fields)


# -----------------------------------------------------------------------
# Benchmark Config Validation
# -----------------------------------------------------------------------


class TestBenchmarkConfig:
    """Tests for BenchmarkConfig Pydantic model."""

    def test_defaults(self) -> None:
        """Default config has expected values."""
        config: BenchmarkConfig = BenchmarkConfig()
        assert config.record_count == 100_000
        assert config.seed == 42
        assert config.corpus_generation_seconds == 15.0
        assert config.per_runner_time_budget_seconds == 120.0
        assert config.max_collection_size == 20

    def test_record_count_must_be_positive(self) -> None:
        """record_count <= 0 should raise."""
        with pytest.raises(ValidationError):
            BenchmarkConfig(record_count=0)

    def test_corpus_seconds_must_be_positive(self) -> None:
        """corpus_generation_seconds <= 0 should raise."""
        with pytest.raises(ValidationError):
            BenchmarkConfig(corpus_generation_seconds=0.0)

    def test_zero_budget_allowed(self) -> None:
        """A zero runner budget is valid (one record per encoding)."""
        config: BenchmarkConfig = BenchmarkConfig(
            per_runner_time_budget_seconds=0.0,
        )
        assert config.per_runner_time_budget_seconds == 0.0

    def test_negative_budget_rejected(self) -> None:
        """Negative runner budget should raise."""
        with pytest.raises(ValidationError):
            BenchmarkConfig(per_runner_time_budget_seconds=-1.0)

    def test_negative_collection_size_rejected(self) -> None:
        """Negative max_collection_size should raise."""
        with pytest.raises(ValidationError):
            BenchmarkConfig(max_collection_size=-1)

    def test_seed_none_allowed(self) -> None:
        """seed=None is accepted."""
        assert BenchmarkConfig(seed=None).seed is None

    def test_unknown_field_rejected(self) -> None:
        """Unknown fields are rejected (extra='forbid')."""
        with pytest.raises(ValidationError):
            BenchmarkConfig(warmup_count=10)  # type: ignore[call-arg]

    def test_immutability(self) -> None:
        """BenchmarkConfig should be frozen."""
        config: BenchmarkConfig = BenchmarkConfig()
        with pytest.raises(ValidationError):
            config.record_count = 5  # type: ignore[misc]


# -----------------------------------------------------------------------
# Duration Formatting
# -----------------------------------------------------------------------


class TestFormatDuration:
    """Tests for format_duration()."""

    @pytest.mark.parametrize(
        ("ns", "expected"),
        [
            (0, "0s"),
            (850, "850ns"),
            (12_345, "12.345µs"),
            (2_000, "2µs"),
            (1_500_000, "1.5ms"),
            (3_200_000_000, "3.2s"),
            (125_000_000_000, "2m5s"),
            (123_500_000_000, "2m3.5s"),
            (119_999_600_000, "2m0s"),
            (999_999.9, "1ms"),
        ],
    )
    def test_units(self, ns: float, expected: str) -> None:
        assert format_duration(ns) == expected

    def test_fractional_nanoseconds(self) -> None:
        """Averages can be fractional; sub-microsecond rounds to ns."""
        assert format_duration(2_025.0) == "2.025µs"
        assert format_duration(99.6) == "100ns"


# -----------------------------------------------------------------------
# Report Formatting
# -----------------------------------------------------------------------


class TestFormatStatsReport:
    """Tests for the per-encoding text report."""

    def test_contains_label(self) -> None:
        """Report starts with the encoding label."""
        report: str = format_stats_report(_make_stats())
        assert report.startswith("System: orjson\n")

    def test_thousands_separators(self) -> None:
        """Counts and rates use comma separators."""
        report: str = format_stats_report(_make_stats())
        assert "1,234,567 Records Processed" in report
        assert "987,654,321 Total Bytes" in report
        assert "493,827 Marshal Op/sec" in report
        assert "9,876 UnMarshal Op/sec" in report

    def test_durations(self) -> None:
        """Averages and totals are formatted as durations."""
        report: str = format_stats_report(_make_stats())
        assert "2.025µs Marshal Average" in report
        assert "2.5s Marshal Total Time" in report
        assert "101.25µs UnMarshal Average" in report
        assert "2m5s UnMarshal Total Time" in report

    def test_unmarshal_block_before_marshal(self) -> None:
        """UnMarshal lines precede Marshal lines."""
        report: str = format_stats_report(_make_stats())
        assert report.index("UnMarshal Average") < report.index(
            "\t 2.025µs Marshal Average"
        )

    def test_empty_stats(self) -> None:
        """An all-zero stats block formats without error."""
        report: str = format_stats_report(
            _make_stats(
                records=0,
                data_size_bytes=0,
                marshal_total_ns=0,
                marshal_avg_ns=0.0,
                marshal_ops_per_sec=0.0,
                unmarshal_total_ns=0,
                unmarshal_avg_ns=0.0,
                unmarshal_ops_per_sec=0.0,
            )
        )
        assert "0 Records Processed" in report
        assert "0s Marshal Average" in report

    def test_line_count(self) -> None:
        """Fixed layout: header, 2 totals, 2 blocks of 3, blank separators."""
        report: str = format_stats_report(_make_stats())
        assert len(report.splitlines()) == 12

    def test_header_from_accumulator(self) -> None:
        """A finalized accumulator formats its header and totals."""
        acc: StatsAccumulator = StatsAccumulator(label="orjson")
        acc.add_marshal(elapsed_ns=2_000, size_bytes=1_200)
        acc.add_unmarshal(elapsed_ns=3_000)
        report: str = format_stats_report(acc.finalize())
        assert report.splitlines()[:3] == [
            "System: orjson",
            "\t 1 Records Processed",
            "\t 1,200 Total Bytes",
        ]


# -----------------------------------------------------------------------
# Orchestration
# -----------------------------------------------------------------------


class TestRunBenchmarks:
    """Tests for run_benchmarks()."""

    def _config(self) -> BenchmarkConfig:
        return BenchmarkConfig(
            record_count=5,
            seed=3,
            per_runner_time_budget_seconds=60.0,
        )

    def test_results_in_order(self) -> None:
        """Results follow the given backend order."""
        out: io.StringIO = io.StringIO()
        results: list[EncodingStats] = run_benchmarks(
            config=self._config(),
            encodings=[_EchoBackend("first"), _EchoBackend("second")],
            out=out,
        )
        assert [r.label for r in results] == ["first", "second"]
        assert all(r.records == 5 for r in results)

    def test_reports_written_in_order(self) -> None:
        """One report block per backend, in run order."""
        out: io.StringIO = io.StringIO()
        run_benchmarks(
            config=self._config(),
            encodings=[_EchoBackend("first"), _EchoBackend("second")],
            out=out,
        )
        text: str = out.getvalue()
        assert text.count("Records Processed") == 2
        assert text.index("System: first") < text.index("System: second")

    def test_failure_stops_without_report(self) -> None:
        """A failing backend raises and gets no report; earlier ones do."""
        out: io.StringIO = io.StringIO()
        with pytest.raises(EncodingFailure) as exc_info:
            run_benchmarks(
                config=self._config(),
                encodings=[
                    _EchoBackend("ok"),
                    _FailingDecodeBackend("bad"),
                    _EchoBackend("never"),
                ],
                out=out,
            )
        assert exc_info.value.encoding == "bad"
        text: str = out.getvalue()
        assert "System: ok" in text
        assert "System: bad" not in text
        assert "System: never" not in text

    def test_default_encodings_end_to_end(self) -> None:
        """Real backends run over a small seeded corpus."""
        out: io.StringIO = io.StringIO()
        results: list[EncodingStats] = run_benchmarks(
            config=self._config(), out=out,
        )
        assert [r.label for r in results] == [
            "orjson", "ujson", "stdlib json", "avro binary",
        ]
        for result in results:
            assert result.records == 5
            assert result.data_size_bytes > 0
