"""Fixed-width big-endian primitives and enum width dispatch."""

import struct
from collections.abc import Callable, Iterator
from enum import Enum
from typing import Any, TypeVar

from .serialization import Codec, Decoder, SerializationError, UnsupportedEnumWidthError

# Map wire type names to struct format characters. The ">" prefix added by
# PrimitiveCodec pins every scalar to big-endian regardless of host order.
FORMAT_CHARS: dict[str, str] = {
    "bool": "?",
    "int8": "b",
    "uint8": "B",
    "int16": "h",
    "uint16": "H",
    "int32": "i",
    "uint32": "I",
    "int64": "q",
    "uint64": "Q",
    "float32": "f",
    "float64": "d",
}

INTEGER_TYPES = frozenset(
    ["int8", "uint8", "int16", "uint16", "int32", "uint32", "int64", "uint64"]
)


class PrimitiveCodec(Codec[Any]):
    """Encodes one fixed-width scalar."""

    def __init__(self, name: str, fmt: str) -> None:
        self.name = name
        self._struct = struct.Struct(">" + fmt)
        self.size = self._struct.size

    def encode(self, value: Any) -> Iterator[bytes]:
        try:
            yield self._struct.pack(value)
        except (struct.error, OverflowError) as exc:
            raise SerializationError(f"{value!r} cannot be encoded as {self.name}: {exc}") from exc

    def decode(self) -> Decoder[Any]:
        data = yield self.size
        return self._struct.unpack(data)[0]


class CharCodec(Codec[str]):
    """Encodes a single character as a 16-bit code unit or a 32-bit code point."""

    def __init__(self, name: str, width: int) -> None:
        self.name = name
        self.size = width
        self._limit = 0xFFFF if width == 2 else 0x10FFFF
        self._int = PrimitiveCodec(name, "H" if width == 2 else "I")

    def encode(self, value: str) -> Iterator[bytes]:
        if len(value) != 1:
            raise SerializationError(f"{self.name} expects a single character, got {value!r}")
        code = ord(value)
        if code > self._limit:
            raise SerializationError(f"{value!r} does not fit in a {self.name}")
        yield from self._int.encode(code)

    def decode(self) -> Decoder[str]:
        code = yield from self._int.decode()
        if code > self._limit:
            raise SerializationError(f"{code:#x} is not a valid {self.name}")
        return chr(code)


BOOL = PrimitiveCodec("bool", FORMAT_CHARS["bool"])
INT8 = PrimitiveCodec("int8", FORMAT_CHARS["int8"])
UINT8 = PrimitiveCodec("uint8", FORMAT_CHARS["uint8"])
INT16 = PrimitiveCodec("int16", FORMAT_CHARS["int16"])
UINT16 = PrimitiveCodec("uint16", FORMAT_CHARS["uint16"])
INT32 = PrimitiveCodec("int32", FORMAT_CHARS["int32"])
UINT32 = PrimitiveCodec("uint32", FORMAT_CHARS["uint32"])
INT64 = PrimitiveCodec("int64", FORMAT_CHARS["int64"])
UINT64 = PrimitiveCodec("uint64", FORMAT_CHARS["uint64"])
FLOAT32 = PrimitiveCodec("float32", FORMAT_CHARS["float32"])
FLOAT64 = PrimitiveCodec("float64", FORMAT_CHARS["float64"])
CHAR16 = CharCodec("char16", 2)
CHAR32 = CharCodec("char32", 4)

PRIMITIVES: dict[str, Codec[Any]] = {
    codec.name: codec
    for codec in (
        BOOL,
        CHAR16,
        CHAR32,
        INT8,
        UINT8,
        INT16,
        UINT16,
        INT32,
        UINT32,
        INT64,
        UINT64,
        FLOAT32,
        FLOAT64,
    )
}


TEnum = TypeVar("TEnum", bound=type[Enum])


def wire_enum(wire_type: str) -> Callable[[TEnum], TEnum]:
    """Declare the integer wire type of an enum.

    Example:
        @wire_enum("uint8")
        class Direction(IntEnum):
            Up = 0
            Down = 1
    """
    if wire_type not in INTEGER_TYPES:
        raise UnsupportedEnumWidthError(f"{wire_type!r} is not an integer wire type")

    def decorate(enum_cls: TEnum) -> TEnum:
        enum_cls.wire_type = wire_type  # type: ignore[attr-defined]
        return enum_cls

    return decorate


class EnumCodec(Codec[Enum]):
    """Encodes enum members through the integer primitive of their declared width."""

    def __init__(self, enum_cls: type[Enum], wire_type: str | None = None) -> None:
        wire_type = wire_type or getattr(enum_cls, "wire_type", None)
        if wire_type not in INTEGER_TYPES:
            raise UnsupportedEnumWidthError(
                f"{enum_cls.__name__} has unsupported wire type {wire_type!r}"
            )

        self.name = enum_cls.__name__
        self.enum_cls = enum_cls
        self.wire_type = wire_type
        self._int = PRIMITIVES[wire_type]

    def encode(self, value: Enum) -> Iterator[bytes]:
        if not isinstance(value, self.enum_cls):
            raise SerializationError(f"{value!r} is not a member of {self.name}")
        yield from self._int.encode(value.value)

    def decode(self) -> Decoder[Enum]:
        raw = yield from self._int.decode()
        try:
            return self.enum_cls(raw)
        except ValueError as exc:
            raise SerializationError(f"{raw} is not a valid {self.name}") from exc
