"""Transport contracts and the drivers that run codecs against them.

Codecs never touch a transport directly. An encoder is an iterator of byte
chunks and a decoder is a generator that yields how many bytes it needs and
is sent exactly that many bytes back. The drivers below feed them against a
blocking transport or an asyncio one, so both execution modes share a
single implementation of every codec.
"""

import asyncio
from asyncio import StreamReader, StreamWriter
from collections.abc import Generator, Iterable
from io import IOBase
from typing import Protocol, TypeVar, runtime_checkable

from .buffer import (
    EndOfStreamError,
    PermissionDeniedError,
    UnsupportedOperationError,
    check_bounds,
)

T = TypeVar("T")

# Largest single read issued while gathering a requested byte count
READ_CHUNK = 1 << 16


@runtime_checkable
class Transport(Protocol):
    """Blocking read/write/position contract consumed by the codecs."""

    position: int

    @property
    def can_read(self) -> bool: ...

    @property
    def can_write(self) -> bool: ...

    def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int: ...

    def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None: ...


class AsyncTransport(Protocol):
    """Cooperative variant of `Transport`."""

    position: int

    @property
    def can_read(self) -> bool: ...

    @property
    def can_write(self) -> bool: ...

    async def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int: ...

    async def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None: ...


class FileTransport:
    """Adapts a binary file object (`BufferedIOBase`, `BytesIO`, ...) to `Transport`."""

    def __init__(self, stream: IOBase) -> None:
        self._stream = stream

    @property
    def can_read(self) -> bool:
        return self._stream.readable()

    @property
    def can_write(self) -> bool:
        return self._stream.writable()

    @property
    def position(self) -> int:
        return self._stream.tell()

    @position.setter
    def position(self, value: int) -> None:
        if not self._stream.seekable():
            raise UnsupportedOperationError("The underlying stream is not seekable.")
        self._stream.seek(value)

    def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int:
        if not self.can_read:
            raise PermissionDeniedError("Failed to read from the stream, no read permission.")
        check_bounds(dest, offset, count)
        if count == 0:
            return 0
        return self._stream.readinto(memoryview(dest)[offset : offset + count]) or 0

    def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None:
        if not self.can_write:
            raise PermissionDeniedError("Failed to write into the stream, no write permission.")
        check_bounds(src, offset, count)
        if count > 0:
            self._stream.write(memoryview(src)[offset : offset + count])


class AsyncStreamTransport:
    """Adapts an asyncio (StreamReader, StreamWriter) pair to `AsyncTransport`.

    Sockets cannot seek, so `position` counts the bytes moved in either
    direction and is read-only.
    """

    def __init__(self, reader: StreamReader | None, writer: StreamWriter | None) -> None:
        self._reader = reader
        self._writer = writer
        self._position = 0

    @property
    def can_read(self) -> bool:
        return self._reader is not None

    @property
    def can_write(self) -> bool:
        return self._writer is not None

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        raise UnsupportedOperationError("Seeking a socket stream is not supported.")

    async def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int:
        if self._reader is None:
            raise PermissionDeniedError("Failed to read from the stream, no StreamReader.")
        check_bounds(dest, offset, count)
        if count == 0:
            return 0

        data = await self._reader.read(count)
        dest[offset : offset + len(data)] = data
        self._position += len(data)
        return len(data)

    async def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None:
        if self._writer is None:
            raise PermissionDeniedError("Failed to write into the stream, no StreamWriter.")
        check_bounds(src, offset, count)
        if count > 0:
            self._writer.write(bytes(src[offset : offset + count]))
            await self._writer.drain()
            self._position += count


class AsyncTransportAdapter:
    """Exposes a blocking `Transport` through the `AsyncTransport` contract.

    Every call yields to the event loop once before touching the transport.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def can_read(self) -> bool:
        return self._transport.can_read

    @property
    def can_write(self) -> bool:
        return self._transport.can_write

    @property
    def position(self) -> int:
        return self._transport.position

    @position.setter
    def position(self, value: int) -> None:
        self._transport.position = value

    async def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int:
        await asyncio.sleep(0)
        return self._transport.read(dest, offset, count)

    async def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None:
        await asyncio.sleep(0)
        self._transport.write(src, offset, count)


def read_exact(transport: Transport, count: int) -> bytes:
    """Read exactly `count` bytes, failing with EndOfStreamError if the transport runs dry.

    The destination grows by at most READ_CHUNK bytes per read.
    """
    data = bytearray()
    while len(data) < count:
        chunk = bytearray(min(count - len(data), READ_CHUNK))
        n = transport.read(chunk, 0, len(chunk))
        if n == 0:
            raise EndOfStreamError(f"Expected {count} bytes, stream ended after {len(data)}")
        data += chunk[:n]
    return bytes(data)


async def read_exact_async(transport: AsyncTransport, count: int) -> bytes:
    """Async counterpart of `read_exact`."""
    data = bytearray()
    while len(data) < count:
        chunk = bytearray(min(count - len(data), READ_CHUNK))
        n = await transport.read(chunk, 0, len(chunk))
        if n == 0:
            raise EndOfStreamError(f"Expected {count} bytes, stream ended after {len(data)}")
        data += chunk[:n]
    return bytes(data)


def run_encoder(transport: Transport, chunks: Iterable[bytes]) -> None:
    """Write every chunk produced by an encoder."""
    for chunk in chunks:
        if chunk:
            transport.write(chunk, 0, len(chunk))


async def run_encoder_async(transport: AsyncTransport, chunks: Iterable[bytes]) -> None:
    """Write every chunk produced by an encoder, suspending on each write."""
    for chunk in chunks:
        if chunk:
            await transport.write(chunk, 0, len(chunk))


def run_decoder(transport: Transport, decoder: Generator[int, bytes, T]) -> T:
    """Satisfy every byte request of a decoder and return its result."""
    try:
        count = next(decoder)
        while True:
            count = decoder.send(read_exact(transport, count))
    except StopIteration as done:
        return done.value


async def run_decoder_async(transport: AsyncTransport, decoder: Generator[int, bytes, T]) -> T:
    """Satisfy every byte request of a decoder, suspending on each read."""
    try:
        count = next(decoder)
        while True:
            count = decoder.send(await read_exact_async(transport, count))
    except StopIteration as done:
        return done.value
