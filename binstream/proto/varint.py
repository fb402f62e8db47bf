"""Variable-length ("compressed") 32-bit integers.

Layout, least-significant bits first:

    byte 0:   C S v5 v4 v3 v2 v1 v0     C = more bytes follow
    byte 1-3: C v v v v v v v           S = negative (signed form only)
    byte 4:   0 0 0 v v v v v           at most five bytes

A value takes 1 to 5 bytes depending on its magnitude. Decoding a negative
value fills the high bits that were not transmitted with ones.
"""

from collections.abc import Iterator

from .serialization import Codec, Decoder, SerializationError, pack, unpack

# abs(value) below THRESHOLDS[i] fits in i + 1 bytes
THRESHOLDS = (0x40, 0x2000, 0x100000, 0x8000000)

# Bit offset of the payload carried by continuation byte i + 1
SHIFTS = (6, 13, 20, 27)

# Sign extension for a negative value spread over i + 1 bytes
SIGN_MASKS = (0xFFFFFFC0, 0xFFFFE000, 0xFFF00000, 0xF8000000, 0x80000000)

MAX_SIZE = 5

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT32_MAX = (1 << 32) - 1


def varint_size(value: int) -> int:
    """Return how many bytes `value` occupies on the wire."""
    magnitude = abs(value)
    for size, threshold in enumerate(THRESHOLDS, start=1):
        if magnitude < threshold:
            return size
    return MAX_SIZE


class VarIntCodec(Codec[int]):
    """Encodes a 32-bit integer in 1 to 5 bytes."""

    def __init__(self, signed: bool = True) -> None:
        self.signed = signed
        self.name = "varint" if signed else "uvarint"

    def _check_range(self, value: int) -> None:
        if self.signed:
            if not INT32_MIN <= value <= INT32_MAX:
                raise SerializationError(f"{value} does not fit in a signed 32-bit varint")
        elif not 0 <= value <= UINT32_MAX:
            raise SerializationError(f"{value} does not fit in an unsigned 32-bit varint")

    def encode(self, value: int) -> Iterator[bytes]:
        self._check_range(value)

        size = varint_size(value)
        bits = value & 0xFFFFFFFF

        out = bytearray(size)
        out[0] = bits & 0x3F
        if self.signed and value < 0:
            out[0] |= 0x40

        for i in range(1, size):
            out[i] = (bits >> SHIFTS[i - 1]) & 0x7F

        if size == MAX_SIZE:
            # Signed values carry bit 31 in the sign flag; unsigned ones need it here.
            out[-1] &= 0x0F if self.signed else 0x1F

        for i in range(size - 1):
            out[i] |= 0x80

        yield bytes(out)

    def decode(self) -> Decoder[int]:
        (first,) = yield 1
        result = first & 0x3F
        size = 1

        byte = first
        while byte & 0x80 and size < MAX_SIZE:
            (byte,) = yield 1
            result |= (byte & 0x7F) << SHIFTS[size - 1]
            size += 1

        result &= 0xFFFFFFFF

        if not self.signed:
            return result

        if first & 0x40:
            result |= SIGN_MASKS[size - 1]

        return result - (1 << 32) if result & 0x80000000 else result


VARINT = VarIntCodec(signed=True)
UVARINT = VarIntCodec(signed=False)


def encode_varint(value: int, signed: bool = True) -> bytes:
    """Encode a single varint to bytes."""
    return pack(VARINT if signed else UVARINT, value)


def decode_varint(
    data: bytes | bytearray | memoryview, offset: int = 0, signed: bool = True
) -> tuple[int, int]:
    """Decode a varint from bytes.

    Returns:
        Tuple of (value, bytes_consumed).
    """
    return unpack(VARINT if signed else UVARINT, data, offset)
