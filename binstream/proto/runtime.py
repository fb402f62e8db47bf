"""Stream facade that runs codecs against a transport."""

import inspect
from asyncio import StreamReader, StreamWriter
from collections.abc import Coroutine
from io import IOBase
from typing import Any, Literal, TypeVar, overload

from .buffer import GrowableBuffer
from .serialization import Codec
from .transport import (
    AsyncStreamTransport,
    AsyncTransport,
    AsyncTransportAdapter,
    FileTransport,
    Transport,
    run_decoder,
    run_decoder_async,
    run_encoder,
    run_encoder_async,
)

T = TypeVar("T")

StreamLike = Transport | AsyncTransport | IOBase | tuple[StreamReader, StreamWriter]


class ProtocolError(RuntimeError):
    """Raised when a stream is used in a mode its transport does not support."""


class BinaryStream:
    """Reads and writes codec values on a transport.

    Supports both synchronous and asynchronous I/O. The stream may be a
    `Transport` such as `GrowableBuffer`, a binary file object, an
    `AsyncTransport`, or a (StreamReader, StreamWriter) tuple. Blocking
    transports are also usable with `async_=True`; async-only transports
    are not usable synchronously.

    Example (sync):
        stream = BinaryStream()
        stream.write(INT32, 42)
        stream.write(STRING, "hello")

    Example (async):
        reader, writer = await asyncio.open_connection(host, port)
        stream = BinaryStream(stream=(reader, writer))
        await stream.write(STRING, "hello", async_=True)
        reply = await stream.read(STRING, async_=True)
    """

    _transport: Transport | None
    _async_transport: AsyncTransport | None

    def __init__(
        self,
        stream: StreamLike | None = None,
    ) -> None:
        if stream is None:
            stream = GrowableBuffer()

        if isinstance(stream, tuple):
            self._transport = None
            self._async_transport = AsyncStreamTransport(*stream)
        elif isinstance(stream, IOBase):
            self._transport = FileTransport(stream)
            self._async_transport = AsyncTransportAdapter(self._transport)
        elif inspect.iscoroutinefunction(getattr(stream, "read", None)):
            self._transport = None
            self._async_transport = stream  # type: ignore[assignment]
        elif isinstance(stream, Transport):
            self._transport = stream
            self._async_transport = AsyncTransportAdapter(stream)
        else:
            raise ProtocolError(f"{type(stream).__name__} is not a usable transport")

    @property
    def transport(self) -> Transport | AsyncTransport:
        """The transport this stream reads from and writes to."""
        if self._transport is not None:
            return self._transport
        assert self._async_transport is not None
        return self._async_transport

    @property
    def position(self) -> int:
        return self.transport.position

    @overload
    def write(self, codec: Codec[T], value: T, *, async_: Literal[False] = False) -> None: ...

    @overload
    def write(
        self, codec: Codec[T], value: T, *, async_: Literal[True]
    ) -> Coroutine[Any, Any, None]: ...

    def write(
        self, codec: Codec[T], value: T, *, async_: bool = False
    ) -> None | Coroutine[Any, Any, None]:
        """Encode a value onto the stream.

        Args:
            codec: The codec describing the value.
            value: The value to encode.
            async_: If True, returns a coroutine for async writing.

        Returns:
            None for sync, or a coroutine for async.
        """
        if async_:
            return self._write_async(codec, value)

        if self._transport is None:
            raise ProtocolError("Sync write requires a blocking transport")
        run_encoder(self._transport, codec.encode(value))
        return None

    async def _write_async(self, codec: Codec[T], value: T) -> None:
        """Async implementation of write."""
        if self._async_transport is None:
            raise ProtocolError("Async write requires an async transport")
        await run_encoder_async(self._async_transport, codec.encode(value))

    @overload
    def read(self, codec: Codec[T], *, async_: Literal[False] = False) -> T: ...

    @overload
    def read(self, codec: Codec[T], *, async_: Literal[True]) -> Coroutine[Any, Any, T]: ...

    def read(self, codec: Codec[T], *, async_: bool = False) -> T | Coroutine[Any, Any, T]:
        """Decode a value from the stream.

        Args:
            codec: The codec describing the value.
            async_: If True, returns a coroutine for async reading.

        Returns:
            The decoded value, or a coroutine resolving to it for async.
        """
        if async_:
            return self._read_async(codec)

        if self._transport is None:
            raise ProtocolError("Sync read requires a blocking transport")
        return run_decoder(self._transport, codec.decode())

    async def _read_async(self, codec: Codec[T]) -> T:
        """Async implementation of read."""
        if self._async_transport is None:
            raise ProtocolError("Async read requires an async transport")
        return await run_decoder_async(self._async_transport, codec.decode())
