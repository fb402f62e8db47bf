"""Growable in-memory byte buffer used as the default stream transport."""

import logging
from enum import Flag, auto

logger = logging.getLogger(__name__)


class StreamError(RuntimeError):
    """Base exception for buffer and transport failures."""


class PermissionDeniedError(StreamError):
    """Raised when reading or writing without the matching permission."""


class OutOfRangeError(StreamError, IndexError):
    """Raised when an offset, count or position is outside its bounds."""


class EndOfStreamError(StreamError, EOFError):
    """Raised when a read needs bytes and none are left."""


class UnsupportedOperationError(StreamError):
    """Raised for operations the stream does not support."""


class InvalidOperationError(StreamError):
    """Raised when an operation is invalid for the current stream state."""


class Permission(Flag):
    """Read/write capability fixed when a buffer is created."""

    READ = auto()
    WRITE = auto()
    READ_WRITE = READ | WRITE


def check_bounds(data: bytes | bytearray | memoryview, offset: int, count: int) -> None:
    """Validate an (offset, count) window against a caller-supplied byte region."""
    if offset < 0 or count < 0:
        raise OutOfRangeError("The offset and count must not be negative.")
    if offset >= len(data):
        raise OutOfRangeError("The offset is out of the buffer range.")
    if offset + count > len(data):
        raise OutOfRangeError("The offset + count is out of the buffer range.")


class GrowableBuffer:
    """A position-cursor byte buffer.

    Created without data the buffer starts empty, is readable, writable and
    grows on demand. Created from caller-supplied bytes it owns a copy of
    them, keeps that size forever and may be narrowed to read-only or
    write-only.

    Example:
        buf = GrowableBuffer()
        buf.write(b"\\x01\\x02", 0, 2)

        reader = GrowableBuffer(buf.to_bytes(), Permission.READ)
        dest = bytearray(2)
        reader.read(dest, 0, 2)
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview | None = None,
        permission: Permission = Permission.READ_WRITE,
    ) -> None:
        if data is None:
            self._data = bytearray()
            self._can_resize = True
        else:
            self._data = bytearray(data)
            self._can_resize = False

        self._permission = permission
        self._position = 0
        self._bytes_read = 0
        self._bytes_written = 0

    @property
    def can_read(self) -> bool:
        return Permission.READ in self._permission

    @property
    def can_write(self) -> bool:
        return Permission.WRITE in self._permission

    @property
    def can_seek(self) -> bool:
        return False

    @property
    def can_resize(self) -> bool:
        return self._can_resize

    @property
    def length(self) -> int:
        """Current capacity of the backing region in bytes."""
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        if value < 0 or value > len(self._data):
            raise OutOfRangeError(f"Position {value} is outside the buffer (0..{len(self._data)})")
        self._position = value

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    @property
    def bytes_left(self) -> int:
        return len(self._data) - self._position

    @property
    def is_end_of_stream(self) -> bool:
        return self.bytes_left == 0

    def ensure_capacity(self, capacity: int) -> None:
        """Make the buffer at least `capacity` bytes long."""
        if len(self._data) >= capacity:
            return

        if not self._can_resize:
            raise UnsupportedOperationError("The stream cannot be resized")

        logger.debug("Growing buffer from %d to %d bytes", len(self._data), capacity)

        # Exact-size reallocation; the old contents land in the new prefix.
        grown = bytearray(capacity)
        grown[: len(self._data)] = self._data
        self._data = grown

    def read(self, dest: bytearray | memoryview, offset: int, count: int) -> int:
        """Copy up to `count` bytes at the cursor into `dest[offset:]`.

        Returns:
            The number of bytes copied, which is less than `count` when the
            buffer ends first. The cursor moves by the same amount.
        """
        if not self.can_read:
            raise PermissionDeniedError("Failed to read from the buffer, no read permission.")

        check_bounds(dest, offset, count)

        if count == 0:
            return 0

        available = count
        if self._position + count > len(self._data):
            available = self.bytes_left
            if available == 0:
                raise EndOfStreamError("The stream has reached the end of the buffer.")

        dest[offset : offset + available] = self._data[self._position : self._position + available]

        self._position += available
        self._bytes_read += available
        return available

    def write(self, src: bytes | bytearray | memoryview, offset: int, count: int) -> None:
        """Copy `count` bytes from `src[offset:]` to the cursor, growing as needed."""
        if not self.can_write:
            raise PermissionDeniedError("Failed to write into the buffer, no write permission.")

        check_bounds(src, offset, count)

        if count > 0:
            self.ensure_capacity(self._position + count)
            self._data[self._position : self._position + count] = src[offset : offset + count]

            self._position += count
            self._bytes_written += count

    def seek(self, offset: int, whence: int = 0) -> int:
        raise UnsupportedOperationError("Seeking this stream is not supported.")

    def set_length(self, length: int) -> None:
        raise UnsupportedOperationError("Truncating this stream is not supported.")

    def flush(self) -> None:
        raise UnsupportedOperationError("Flushing this stream is not supported.")

    def copy_into(self, dest: bytearray | memoryview, offset: int, length: int) -> None:
        """Copy the first `length` bytes of the buffer into `dest[offset:]`."""
        if length > len(self._data):
            raise InvalidOperationError(
                "The stream does not have enough bytes to copy to the given buffer."
            )
        if offset < 0 or offset + length > len(dest):
            raise OutOfRangeError("The offset + length is out of the destination range.")

        dest[offset : offset + length] = self._data[:length]

    def to_bytes(self) -> bytes:
        """Return a copy of the whole backing region."""
        return bytes(self._data)

    def __repr__(self) -> str:
        return (
            f"GrowableBuffer(length={len(self._data)}, position={self._position}, "
            f"permission={self._permission.name}, resizable={self._can_resize})"
        )
