"""Binary stream codecs: primitives, varints, framing, containers and temporal values."""

from .buffer import (
    EndOfStreamError,
    GrowableBuffer,
    InvalidOperationError,
    OutOfRangeError,
    Permission,
    PermissionDeniedError,
    StreamError,
    UnsupportedOperationError,
)
from .containers import ArrayCodec, CollectionCodec, SequenceCodec
from .framing import (
    BUFFER,
    STRING,
    BufferCodec,
    CompressedBufferCodec,
    CompressedStringCodec,
    Compressor,
    StringCodec,
    ZlibCompressor,
)
from .primitives import (
    BOOL,
    CHAR16,
    CHAR32,
    FLOAT32,
    FLOAT64,
    INT8,
    INT16,
    INT32,
    INT64,
    PRIMITIVES,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    CharCodec,
    EnumCodec,
    PrimitiveCodec,
    wire_enum,
)
from .runtime import BinaryStream, ProtocolError
from .serialization import (
    NULL_LENGTH,
    Codec,
    SerializationError,
    UnsupportedEnumWidthError,
    pack,
    unpack,
)
from .temporal import (
    DURATION,
    INSTANT,
    OFFSET_INSTANT,
    UUID,
    DurationCodec,
    InstantCodec,
    OffsetInstantCodec,
    UuidCodec,
)
from .transport import (
    AsyncStreamTransport,
    AsyncTransport,
    AsyncTransportAdapter,
    FileTransport,
    Transport,
)
from .varint import UVARINT, VARINT, VarIntCodec, decode_varint, encode_varint, varint_size
