"""Length-prefixed buffer and string framing, with optional compression."""

import codecs
import logging
import zlib
from collections.abc import Iterator
from typing import Protocol

from .primitives import INT32
from .serialization import NULL_LENGTH, Codec, Decoder, SerializationError

logger = logging.getLogger(__name__)

DEFAULT_TEXT_ENCODING = "utf-16-be"


class Compressor(Protocol):
    """Pure byte-to-byte compression collaborator."""

    def compress(self, data: bytes) -> bytes: ...

    def decompress(self, data: bytes) -> bytes: ...


class ZlibCompressor:
    """zlib stream compressor."""

    def __init__(self, level: int = -1) -> None:
        if not -1 <= level <= 9:
            raise ValueError(f"zlib level must be -1..9, got {level}")
        self.level = level

    def compress(self, data: bytes) -> bytes:
        return zlib.compress(data, self.level)

    def decompress(self, data: bytes) -> bytes:
        return zlib.decompress(data)


def read_length(prefix: Codec[int] = INT32) -> Decoder[int]:
    """Decode a length prefix, rejecting negative values other than the null sentinel."""
    length = yield from prefix.decode()
    if length < NULL_LENGTH:
        raise SerializationError(f"Invalid length prefix {length}")
    return length


class BufferCodec(Codec[bytes | None]):
    """Raw bytes behind an int32 length; -1 marks an absent buffer."""

    name = "bytes"

    def encode(self, value: bytes | bytearray | memoryview | None) -> Iterator[bytes]:
        if value is None:
            yield from INT32.encode(NULL_LENGTH)
            return

        yield from INT32.encode(len(value))
        if len(value) != 0:
            yield bytes(value)

    def decode(self) -> Decoder[bytes | None]:
        length = yield from read_length()
        if length == NULL_LENGTH:
            return None
        if length == 0:
            return b""
        return bytes((yield length))


BUFFER = BufferCodec()


class CompressedBufferCodec(Codec[bytes | None]):
    """A buffer whose payload is passed through a compressor before framing."""

    name = "zbytes"

    def __init__(self, compressor: Compressor | None = None) -> None:
        self.compressor = compressor or ZlibCompressor()

    def encode(self, value: bytes | bytearray | memoryview | None) -> Iterator[bytes]:
        if value is None:
            yield from BUFFER.encode(None)
            return

        compressed = self.compressor.compress(bytes(value))
        logger.debug("Compressed %d bytes to %d", len(value), len(compressed))
        yield from BUFFER.encode(compressed)

    def decode(self) -> Decoder[bytes | None]:
        compressed = yield from BUFFER.decode()
        if compressed is None:
            return None
        if len(compressed) == 0:
            return b""
        return self.compressor.decompress(compressed)


def normalize_encoding(encoding: str | None) -> str:
    """Resolve a text encoding, redirecting BOM-carrying UTF-16 to big-endian UTF-16."""
    if encoding is None:
        return DEFAULT_TEXT_ENCODING

    try:
        name = codecs.lookup(encoding).name
    except LookupError as exc:
        raise SerializationError(f"Unknown text encoding {encoding!r}") from exc

    if name == "utf-16":
        return DEFAULT_TEXT_ENCODING
    return name


class StringCodec(Codec[str | None]):
    """Text encoded to bytes and framed as a buffer."""

    name = "string"

    def __init__(self, encoding: str | None = None, buffer: Codec[bytes | None] = BUFFER) -> None:
        self.encoding = normalize_encoding(encoding)
        self._buffer = buffer

    def encode(self, value: str | None) -> Iterator[bytes]:
        if value is None:
            yield from self._buffer.encode(None)
            return
        if value == "":
            yield from self._buffer.encode(b"")
            return

        try:
            data = value.encode(self.encoding)
        except UnicodeError as exc:
            raise SerializationError(f"Text cannot be encoded as {self.encoding}: {exc}") from exc
        yield from self._buffer.encode(data)

    def decode(self) -> Decoder[str | None]:
        data = yield from self._buffer.decode()
        if data is None:
            return None
        if len(data) == 0:
            return ""

        try:
            return data.decode(self.encoding)
        except UnicodeError as exc:
            raise SerializationError(f"Bytes are not valid {self.encoding}: {exc}") from exc


class CompressedStringCodec(StringCodec):
    """Text framed through a compressed buffer."""

    name = "zstring"

    def __init__(self, encoding: str | None = None, compressor: Compressor | None = None) -> None:
        super().__init__(encoding, CompressedBufferCodec(compressor))


STRING = StringCodec()
