"""Dates, times, durations and 128-bit identifiers.

Times travel as int64 counts of 100-nanosecond ticks. Instants count from
0001-01-01T00:00:00. Python's datetime types stop at microseconds, so
encoding multiplies by ten and decoding drops sub-microsecond ticks.
"""

import uuid
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

from .framing import BUFFER
from .primitives import INT64
from .serialization import Codec, Decoder, SerializationError

TICKS_PER_MICROSECOND = 10
TICKS_PER_SECOND = 10_000_000

EPOCH = datetime(1, 1, 1, tzinfo=timezone.utc)
_NAIVE_EPOCH = datetime(1, 1, 1)
_MICROSECOND = timedelta(microseconds=1)


def timedelta_to_ticks(value: timedelta) -> int:
    return (value // _MICROSECOND) * TICKS_PER_MICROSECOND


def ticks_to_timedelta(ticks: int) -> timedelta:
    # Truncate toward zero like a tick-based duration would.
    micros = abs(ticks) // TICKS_PER_MICROSECOND
    return timedelta(microseconds=-micros if ticks < 0 else micros)


def _check_instant(ticks: int, name: str) -> None:
    if ticks < 0:
        raise SerializationError(f"{name} tick count {ticks} precedes 0001-01-01")


class DurationCodec(Codec[timedelta]):
    """A timedelta as an int64 tick count."""

    name = "duration"

    def encode(self, value: timedelta) -> Iterator[bytes]:
        yield from INT64.encode(timedelta_to_ticks(value))

    def decode(self) -> Decoder[timedelta]:
        ticks = yield from INT64.decode()
        try:
            return ticks_to_timedelta(ticks)
        except OverflowError as exc:
            raise SerializationError(f"Duration of {ticks} ticks is out of range") from exc


class InstantCodec(Codec[datetime]):
    """A point in time, stored in UTC.

    Naive datetimes are taken to be local time and converted to UTC before
    encoding. Decoded values are always UTC-aware.
    """

    name = "instant"

    def encode(self, value: datetime) -> Iterator[bytes]:
        if value.tzinfo is not timezone.utc:
            try:
                value = value.astimezone(timezone.utc)
            except OverflowError as exc:
                raise SerializationError(f"{value!r} has no UTC instant in range") from exc
        yield from INT64.encode(timedelta_to_ticks(value - EPOCH))

    def decode(self) -> Decoder[datetime]:
        ticks = yield from INT64.decode()
        _check_instant(ticks, self.name)
        try:
            return EPOCH + ticks_to_timedelta(ticks)
        except OverflowError as exc:
            raise SerializationError(f"Instant of {ticks} ticks is out of range") from exc


class OffsetInstantCodec(Codec[datetime]):
    """Wall-clock ticks followed by the UTC offset as a duration."""

    name = "offset_instant"

    def encode(self, value: datetime) -> Iterator[bytes]:
        if value.tzinfo is None or value.utcoffset() is None:
            try:
                value = value.astimezone()
            except OverflowError as exc:
                raise SerializationError(f"{value!r} has no local offset in range") from exc

        offset = value.utcoffset() or timedelta(0)
        wall_clock = value.replace(tzinfo=None)
        yield from INT64.encode(timedelta_to_ticks(wall_clock - _NAIVE_EPOCH))
        yield from DURATION.encode(offset)

    def decode(self) -> Decoder[datetime]:
        ticks = yield from INT64.decode()
        offset = yield from DURATION.decode()
        _check_instant(ticks, self.name)
        try:
            wall_clock = _NAIVE_EPOCH + ticks_to_timedelta(ticks)
            return wall_clock.replace(tzinfo=timezone(offset))
        except (OverflowError, ValueError) as exc:
            raise SerializationError(f"Invalid offset instant ({ticks} ticks, {offset})") from exc


class UuidCodec(Codec[uuid.UUID]):
    """A 128-bit identifier framed as a 16-byte buffer in GUID byte order."""

    name = "uuid"

    def encode(self, value: uuid.UUID) -> Iterator[bytes]:
        yield from BUFFER.encode(value.bytes_le)

    def decode(self) -> Decoder[uuid.UUID]:
        data = yield from BUFFER.decode()
        if data is None or len(data) != 16:
            size = "absent" if data is None else f"{len(data)} bytes"
            raise SerializationError(f"Expected a 16 byte identifier, got {size}")
        return uuid.UUID(bytes_le=data)


DURATION = DurationCodec()
INSTANT = InstantCodec()
OFFSET_INSTANT = OffsetInstantCodec()
UUID = UuidCodec()
