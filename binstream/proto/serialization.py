"""Codec base class and in-memory pack/unpack helpers."""

from collections.abc import Generator, Iterator
from typing import Generic, TypeAlias, TypeVar

from .buffer import GrowableBuffer, Permission
from .transport import run_decoder

T = TypeVar("T")

Decoder: TypeAlias = Generator[int, bytes, T]

# Length prefix of an absent buffer, string or container.
NULL_LENGTH = -1


class SerializationError(RuntimeError):
    """Raised when a value cannot be encoded or wire data is malformed."""


class UnsupportedEnumWidthError(SerializationError):
    """Raised when an enum's wire type is not one of the integer primitives."""


class Codec(Generic[T]):
    """Base class for all wire codecs.

    A codec holds no stream state. `encode` yields the encoded chunks in wire
    order; `decode` is a generator that yields the number of bytes it needs
    next, is sent exactly that many bytes, and returns the decoded value.
    Composite codecs delegate with `yield from`:

    Example:
        class PointCodec(Codec[tuple[int, int]]):
            def encode(self, value):
                yield from INT32.encode(value[0])
                yield from INT32.encode(value[1])

            def decode(self):
                x = yield from INT32.decode()
                y = yield from INT32.decode()
                return (x, y)
    """

    name: str = "codec"

    def encode(self, value: T) -> Iterator[bytes]:
        """Yield the wire chunks for `value`."""
        raise NotImplementedError("encode() must be implemented by a codec subclass")

    def decode(self) -> Decoder[T]:
        """Request bytes and return the decoded value."""
        raise NotImplementedError("decode() must be implemented by a codec subclass")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def pack(codec: Codec[T], value: T) -> bytes:
    """Encode a single value to bytes."""
    return b"".join(codec.encode(value))


def unpack(codec: Codec[T], data: bytes | bytearray | memoryview, offset: int = 0) -> tuple[T, int]:
    """Decode a single value from bytes.

    Args:
        codec: The codec describing the value.
        data: The bytes to decode from.
        offset: Starting offset in data.

    Returns:
        Tuple of (value, bytes_consumed).
    """
    buffer = GrowableBuffer(memoryview(data)[offset:], Permission.READ)
    value = run_decoder(buffer, codec.decode())
    return value, buffer.position
