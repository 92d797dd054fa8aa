"""Serialization backends under test.

Each backend implements the same two-operation contract:

    ``encode(record) -> bytes``
    ``decode(payload) -> Record``

Encoding itself is delegated entirely to third-party libraries
(``orjson``, ``ujson``, the standard ``json`` module, ``fastavro``).
Every backend encodes :meth:`Record.to_native` and decodes through
:meth:`Record.from_native`, so the model conversion cost is identical
across backends and only the codec differs.

Backend state:
    Reusable codec objects (``json.JSONEncoder`` / ``json.JSONDecoder``,
    the parsed Avro schema) are owned by the backend instance and built
    in ``__init__``. Nothing is held at module scope except the Avro
    schema description.

Example:
    >>> from core.records import generate_records
    >>> from infra.encodings import OrjsonEncoding
    >>> backend = OrjsonEncoding()
    >>> record = generate_records(count=1, seed=3)[0]
    >>> backend.decode(backend.encode(record)) == record
    True
"""

import io
import json
from abc import ABC, abstractmethod
from typing import Any

import fastavro
import orjson
import ujson

from core.records import Record

# ---------------------------------------------------------------------------
# Avro schema
# ---------------------------------------------------------------------------

AVRO_SCHEMA: dict[str, Any] = {
    "type": "record",
    "name": "Record",
    "namespace": "serialization_bench",
    "fields": [
        {"name": "id", "type": "long"},
        {"name": "date", "type": "string"},
        {"name": "name_a", "type": "string"},
        {"name": "name_b", "type": "string"},
        {"name": "name_c", "type": "string"},
        {"name": "count1", "type": "long"},
        {"name": "count2", "type": "long"},
        {"name": "count3", "type": "long"},
        {"name": "amt1", "type": "double"},
        {"name": "amt2", "type": "double"},
        {"name": "flag", "type": "boolean"},
        {"name": "str_array", "type": {"type": "array", "items": "string"}},
        {"name": "map_string", "type": {"type": "map", "values": "string"}},
        {"name": "map_int", "type": {"type": "map", "values": "long"}},
    ],
}
"""Avro record schema matching :meth:`Record.to_native`.

``date`` travels as its ISO-8601 string and ``map_int`` as a
``map<long>`` with decimal string keys (Avro map keys are always
strings).
"""


# ---------------------------------------------------------------------------
# Backend contract
# ---------------------------------------------------------------------------


class Encoding(ABC):
    """Abstract base for the bundled serialization backends.

    Subclasses set :attr:`name` and implement :meth:`encode` and
    :meth:`decode`. The runner itself only requires the structural
    ``EncodingBackend`` protocol. Failures are reported by raising; the
    runner wraps any exception into ``EncodingFailure``.
    """

    name: str = "encoding"

    @abstractmethod
    def encode(self, record: Record) -> bytes:
        """Serialize one record to bytes."""

    @abstractmethod
    def decode(self, payload: bytes) -> Record:
        """Deserialize bytes produced by :meth:`encode`."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# ---------------------------------------------------------------------------
# JSON backends
# ---------------------------------------------------------------------------


class OrjsonEncoding(Encoding):
    """JSON via ``orjson`` (Rust, emits ``bytes`` directly)."""

    name = "orjson"

    def encode(self, record: Record) -> bytes:
        return orjson.dumps(record.to_native())

    def decode(self, payload: bytes) -> Record:
        return Record.from_native(orjson.loads(payload))


class UjsonEncoding(Encoding):
    """JSON via ``ujson`` (C extension, emits ``str``)."""

    name = "ujson"

    def encode(self, record: Record) -> bytes:
        return ujson.dumps(record.to_native()).encode("utf-8")

    def decode(self, payload: bytes) -> Record:
        return Record.from_native(ujson.loads(payload))


class StdlibJsonEncoding(Encoding):
    """JSON via the standard library ``json`` module.

    Holds one reusable ``JSONEncoder`` / ``JSONDecoder`` pair per
    instance so per-call configuration lookups stay out of the timing.

    Args:
        compact: Use ``(",", ":")`` separators (no whitespace), which
            matches the output shape of the other JSON backends.
    """

    name = "stdlib json"

    def __init__(self, compact: bool = True) -> None:
        separators: tuple[str, str] = (",", ":") if compact else (", ", ": ")
        self._encoder: json.JSONEncoder = json.JSONEncoder(
            separators=separators,
        )
        self._decoder: json.JSONDecoder = json.JSONDecoder()

    def encode(self, record: Record) -> bytes:
        return self._encoder.encode(record.to_native()).encode("utf-8")

    def decode(self, payload: bytes) -> Record:
        return Record.from_native(self._decoder.decode(payload.decode("utf-8")))


# ---------------------------------------------------------------------------
# Avro backend
# ---------------------------------------------------------------------------


class AvroEncoding(Encoding):
    """Schemaless Avro binary via ``fastavro``.

    The schema is parsed once at construction. Payloads carry no header
    or embedded schema, only the binary-encoded datum.

    Args:
        schema: Avro schema description. Defaults to :data:`AVRO_SCHEMA`.

    Raises:
        fastavro.schema.SchemaParseException: If ``schema`` is invalid.
    """

    name = "avro binary"

    def __init__(self, schema: dict[str, Any] | None = None) -> None:
        self._schema = fastavro.parse_schema(schema or AVRO_SCHEMA)

    def encode(self, record: Record) -> bytes:
        buf: io.BytesIO = io.BytesIO()
        fastavro.schemaless_writer(buf, self._schema, record.to_native())
        return buf.getvalue()

    def decode(self, payload: bytes) -> Record:
        datum = fastavro.schemaless_reader(io.BytesIO(payload), self._schema)
        return Record.from_native(datum)


def default_encodings() -> list[Encoding]:
    """Return the four backends in fixed report order."""
    return [
        OrjsonEncoding(),
        UjsonEncoding(),
        StdlibJsonEncoding(),
        AvroEncoding(),
    ]
