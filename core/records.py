"""Synthetic record model and corpus generator.

This module defines the flat ``Record`` every encoding under test
serializes, plus the generator that builds the benchmark corpus once at
startup.

Wire-neutral form:
    Backends never see the model directly. :meth:`Record.to_native`
    produces a plain ``dict`` that both JSON and Avro can carry:
    ``date`` as an ISO-8601 string and ``map_int`` keys as decimal
    strings (neither format allows integer map keys).
    :meth:`Record.from_native` validates a decoded dict back into a
    ``Record``, relying on Pydantic lax mode to coerce those strings.

Corpus size:
    Generation is count-bounded and seeded, so two runs with the same
    seed produce the same corpus. A wall-clock cap stays in place as a
    secondary guard for very large counts.

Example:
    >>> from core.records import generate_records
    >>> records = generate_records(count=3, seed=7)
    >>> len(records)
    3
    >>> all(len(r.str_array) <= 20 for r in records)
    True
"""

import logging
import random
import string
import time
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger: logging.Logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Generation bounds
# ---------------------------------------------------------------------------

DEFAULT_MAX_COLLECTION_SIZE: int = 20
"""Upper bound on list/map fan-out for generated records."""

_INT64_MIN: int = -(2**63)
_INT64_MAX: int = 2**63 - 1

_EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DATE_SPAN_US: int = 60 * 365 * 24 * 3600 * 1_000_000  # ~60 years

_ALPHABET: str = string.ascii_letters + string.digits


# ---------------------------------------------------------------------------
# Record Model
# ---------------------------------------------------------------------------


class Record(BaseModel):
    """Flat synthetic business record used as the benchmark payload.

    Immutable after construction. Each record is independent; there are
    no references between records.

    Attributes:
        id: Numeric identifier (signed 64-bit range).
        date: Timezone-aware UTC timestamp.
        name_a: First name string.
        name_b: Second name string.
        name_c: Third name string.
        count1: First integer counter.
        count2: Second integer counter.
        count3: Third integer counter.
        amt1: First floating-point amount.
        amt2: Second floating-point amount.
        flag: Boolean flag.
        str_array: Ordered sequence of strings.
        map_string: String-to-string mapping.
        map_int: Integer-to-integer mapping.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    date: datetime
    name_a: str
    name_b: str
    name_c: str
    count1: int
    count2: int
    count3: int
    amt1: float
    amt2: float
    flag: bool
    str_array: list[str] = Field(default_factory=list)
    map_string: dict[str, str] = Field(default_factory=dict)
    map_int: dict[int, int] = Field(default_factory=dict)

    def to_native(self) -> dict[str, Any]:
        """Return the wire-neutral ``dict`` form shared by all backends.

        Returns:
            Plain dict with JSON/Avro-compatible values only.
        """
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "name_a": self.name_a,
            "name_b": self.name_b,
            "name_c": self.name_c,
            "count1": self.count1,
            "count2": self.count2,
            "count3": self.count3,
            "amt1": self.amt1,
            "amt2": self.amt2,
            "flag": self.flag,
            "str_array": list(self.str_array),
            "map_string": dict(self.map_string),
            "map_int": {str(k): v for k, v in self.map_int.items()},
        }

    @classmethod
    def from_native(cls, data: dict[str, Any]) -> "Record":
        """Validate a decoded wire-neutral dict back into a ``Record``.

        Args:
            data: Dict as produced by a backend's decode step.

        Returns:
            Validated :class:`Record`.

        Raises:
            pydantic.ValidationError: If ``data`` does not describe a
                valid record.
        """
        return cls.model_validate(data)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _random_string(rng: random.Random, min_len: int = 4, max_len: int = 16) -> str:
    return "".join(rng.choices(_ALPHABET, k=rng.randint(min_len, max_len)))


def _random_int64(rng: random.Random) -> int:
    return rng.randint(_INT64_MIN, _INT64_MAX)


def build_record(rng: random.Random, max_collection_size: int) -> Record:
    """Build one record with pseudo-random field values.

    Collection fields get a random size in ``[0, max_collection_size]``.
    Map sizes may come out smaller when random keys collide.

    Args:
        rng: Random source. Passing a seeded instance makes the output
            reproducible.
        max_collection_size: Upper bound on list/map sizes.

    Returns:
        A fully populated :class:`Record`.
    """
    date: datetime = _EPOCH + timedelta(
        microseconds=rng.randint(0, _DATE_SPAN_US),
    )
    return Record(
        id=_random_int64(rng),
        date=date,
        name_a=_random_string(rng),
        name_b=_random_string(rng),
        name_c=_random_string(rng),
        count1=_random_int64(rng),
        count2=_random_int64(rng),
        count3=_random_int64(rng),
        amt1=rng.uniform(-1e9, 1e9),
        amt2=rng.uniform(-1e9, 1e9),
        flag=rng.random() < 0.5,
        str_array=[
            _random_string(rng)
            for _ in range(rng.randint(0, max_collection_size))
        ],
        map_string={
            _random_string(rng): _random_string(rng)
            for _ in range(rng.randint(0, max_collection_size))
        },
        map_int={
            _random_int64(rng): _random_int64(rng)
            for _ in range(rng.randint(0, max_collection_size))
        },
    )


def generate_records(
    count: int,
    max_collection_size: int = DEFAULT_MAX_COLLECTION_SIZE,
    seed: int | None = None,
    time_limit_seconds: float = 15.0,
) -> list[Record]:
    """Generate the benchmark corpus.

    Builds up to ``count`` records from a private ``random.Random``
    seeded with ``seed``. Generation also stops once
    ``time_limit_seconds`` of wall-clock time has elapsed, in which case
    fewer records are returned and a warning is logged.

    Args:
        count: Target number of records. Must be > 0.
        max_collection_size: Upper bound on list/map sizes. Must be >= 0.
        seed: Seed for reproducible output. ``None`` seeds from the OS.
        time_limit_seconds: Wall-clock safety cap. Must be > 0.

    Returns:
        List of generated :class:`Record` instances, in generation order.

    Raises:
        ValueError: If any argument is out of range.

    Example:
        >>> a = generate_records(count=5, seed=1)
        >>> b = generate_records(count=5, seed=1)
        >>> a == b
        True
    """
    if count <= 0:
        raise ValueError(f"count must be > 0, got {count}")
    if max_collection_size < 0:
        raise ValueError(
            f"max_collection_size must be >= 0, got {max_collection_size}"
        )
    if time_limit_seconds <= 0:
        raise ValueError(
            f"time_limit_seconds must be > 0, got {time_limit_seconds}"
        )

    rng: random.Random = random.Random(seed)
    records: list[Record] = []
    start: float = time.perf_counter()

    for _ in range(count):
        records.append(build_record(rng, max_collection_size))
        if time.perf_counter() - start > time_limit_seconds:
            logger.warning(
                "Corpus time limit %.1fs reached after %d of %d records",
                time_limit_seconds,
                len(records),
                count,
            )
            break

    logger.info(
        "Generated %d records in %.2fs (seed=%s)",
        len(records),
        time.perf_counter() - start,
        seed,
    )
    return records
