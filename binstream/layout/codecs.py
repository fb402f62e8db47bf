"""Build stream codecs from layout definitions."""

import logging
from collections.abc import Iterator, Mapping
from enum import IntEnum
from typing import Any

from binstream.proto import (
    BUFFER,
    DURATION,
    INSTANT,
    OFFSET_INSTANT,
    PRIMITIVES,
    STRING,
    UUID,
    UVARINT,
    VARINT,
    ArrayCodec,
    Codec,
    CollectionCodec,
    CompressedBufferCodec,
    CompressedStringCodec,
    EnumCodec,
    SequenceCodec,
    SerializationError,
    wire_enum,
)
from binstream.proto.serialization import Decoder

from .types import Layout, LayoutEnum, LayoutRecord, LayoutType

logger = logging.getLogger(__name__)

BUILTIN_CODECS: dict[str, Codec[Any]] = {
    **PRIMITIVES,
    "varint": VARINT,
    "uvarint": UVARINT,
    "bytes": BUFFER,
    "zbytes": CompressedBufferCodec(),
    "string": STRING,
    "zstring": CompressedStringCodec(),
    "duration": DURATION,
    "instant": INSTANT,
    "offset_instant": OFFSET_INSTANT,
    "uuid": UUID,
}

CONTAINER_CODECS: dict[str, type[SequenceCodec[Any]]] = {
    "seq": SequenceCodec,
    "collection": CollectionCodec,
    "array": ArrayCodec,
}


class RecordCodec(Codec[dict[str, Any]]):
    """Encodes a mapping field by field, in declaration order."""

    def __init__(self, name: str, fields: list[tuple[str, Codec[Any]]]) -> None:
        self.name = name
        self.fields = fields

    def encode(self, value: Mapping[str, Any]) -> Iterator[bytes]:
        for field_name, codec in self.fields:
            if field_name not in value:
                raise SerializationError(f"{self.name} is missing field {field_name}")
            yield from codec.encode(value[field_name])

    def decode(self) -> Decoder[dict[str, Any]]:
        result: dict[str, Any] = {}
        for field_name, codec in self.fields:
            result[field_name] = yield from codec.decode()
        logger.debug("Decoded %s with %d fields", self.name, len(result))
        return result


def make_enum(enum: LayoutEnum) -> type[IntEnum]:
    """Create an IntEnum class for a layout enum, tagged with its wire type."""
    enum_cls = IntEnum(enum.name, {v.name: v.value for v in enum.values})  # type: ignore[misc]
    return wire_enum(enum.type)(enum_cls)


class LayoutCodecs:
    """Resolves layout types to codecs, caching enums and records by name."""

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self.enums: dict[str, type[IntEnum]] = {e.name: make_enum(e) for e in layout.enums}
        self._records: dict[str, RecordCodec] = {}

    def codec(self, t: LayoutType) -> Codec[Any]:
        """Return the codec for a layout type."""
        if t.element is not None:
            return CONTAINER_CODECS[t.name](self.codec(t.element))

        if t.name in BUILTIN_CODECS:
            return BUILTIN_CODECS[t.name]

        if t.name in self.enums:
            return EnumCodec(self.enums[t.name])

        record = self.layout.find_record(t.name)
        if record is not None:
            return self.record(record)

        raise SerializationError(f"Unknown type: {t.name}")

    def record(self, record: LayoutRecord | str) -> RecordCodec:
        """Return the codec for a record, by definition or name."""
        if isinstance(record, str):
            found = self.layout.find_record(record)
            if found is None:
                raise SerializationError(f"Unknown record: {record}")
            record = found

        if record.name not in self._records:
            self._records[record.name] = RecordCodec(
                record.name, [(f.name, self.codec(f.type)) for f in record.fields]
            )
        return self._records[record.name]
