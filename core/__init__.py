"""Core layer for the serialization benchmark.

This package provides the synthetic record model and generator, the
per-encoding statistics accumulator, and the time-boxed benchmark
runner. Result and record models are Pydantic-based with frozen
configuration for immutability.
"""

from core.records import Record, build_record, generate_records
from core.runner import EncodingBackend, EncodingFailure, run_encoding_benchmark
from core.stats import EncodingStats, StatsAccumulator, ops_per_second

__all__: list[str] = [
    "EncodingBackend",
    "EncodingFailure",
    "EncodingStats",
    "Record",
    "StatsAccumulator",
    "build_record",
    "generate_records",
    "ops_per_second",
    "run_encoding_benchmark",
]
