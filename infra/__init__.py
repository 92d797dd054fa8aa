"""Infrastructure layer for the serialization benchmark.

This package wraps the third-party serialization libraries under test
(orjson, ujson, the standard json module, fastavro) behind a common
encode/decode contract.
"""

from infra.encodings import (
    AVRO_SCHEMA,
    AvroEncoding,
    Encoding,
    OrjsonEncoding,
    StdlibJsonEncoding,
    UjsonEncoding,
    default_encodings,
)

__all__: list[str] = [
    "AVRO_SCHEMA",
    "AvroEncoding",
    "Encoding",
    "OrjsonEncoding",
    "StdlibJsonEncoding",
    "UjsonEncoding",
    "default_encodings",
]
