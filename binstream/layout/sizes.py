"""Wire size calculation for layout types and records."""

from dataclasses import dataclass
from enum import StrEnum, auto

from .types import Layout, LayoutRecord, LayoutType

# Fixed wire sizes in bytes
FIXED_SIZES: dict[str, int] = {
    "bool": 1,
    "char16": 2,
    "char32": 4,
    "int8": 1,
    "uint8": 1,
    "int16": 2,
    "uint16": 2,
    "int32": 4,
    "uint32": 4,
    "int64": 8,
    "uint64": 8,
    "float32": 4,
    "float64": 8,
    "duration": 8,
    "instant": 8,
    "offset_instant": 16,
    "uuid": 20,  # int32 length + 16 bytes
}

# Length prefix width of framed types
PREFIX_SIZES: dict[str, int] = {
    "bytes": 4,
    "zbytes": 4,
    "string": 4,
    "zstring": 4,
    "seq": 4,
    "collection": 4,
    "array": 8,
}


class SizeKind(StrEnum):
    """Classification of size characteristics."""

    FIXED = auto()  # Min == Max
    BOUNDED = auto()  # Variable with a known maximum (varints)
    UNBOUNDED = auto()  # Length-prefixed payloads


@dataclass(frozen=True)
class SizeInfo:
    """Size information for a type or record."""

    min_size: int
    max_size: int | None  # None means unbounded
    kind: SizeKind

    @property
    def is_fixed(self) -> bool:
        return self.kind == SizeKind.FIXED

    @property
    def is_bounded(self) -> bool:
        return self.kind in (SizeKind.FIXED, SizeKind.BOUNDED)


@dataclass(frozen=True)
class RecordSizeInfo:
    """Complete size information for a record."""

    name: str
    size: SizeInfo
    fields: dict[str, SizeInfo]


class SizeCalculator:
    """Calculate sizes for layout types."""

    def __init__(self, layout: Layout):
        self.layout = layout
        self._cache: dict[str, RecordSizeInfo] = {}

    def calc_type_size(self, t: LayoutType) -> SizeInfo:
        """Calculate size for any type (primitive, enum, record or container)."""
        if t.name in FIXED_SIZES:
            size = FIXED_SIZES[t.name]
            return SizeInfo(size, size, SizeKind.FIXED)

        if t.name in ("varint", "uvarint"):
            return SizeInfo(1, 5, SizeKind.BOUNDED)

        if t.name in PREFIX_SIZES:
            # Only the length prefix is guaranteed; an absent value is just that.
            return SizeInfo(PREFIX_SIZES[t.name], None, SizeKind.UNBOUNDED)

        enum = self.layout.find_enum(t.name)
        if enum is not None:
            return self.calc_type_size(LayoutType(enum.type))

        record = self.layout.find_record(t.name)
        if record is not None:
            return self.calc_record_size(record).size

        raise ValueError(f"Unknown type: {t.name}")

    def calc_record_size(self, record: LayoutRecord) -> RecordSizeInfo:
        """Calculate size for a record (with caching)."""
        if record.name in self._cache:
            return self._cache[record.name]

        total_min = 0
        total_max: int | None = 0
        overall_kind = SizeKind.FIXED
        fields: dict[str, SizeInfo] = {}

        for f in record.fields:
            size = self.calc_type_size(f.type)
            fields[f.name] = size

            total_min += size.min_size
            if total_max is not None and size.max_size is not None:
                total_max += size.max_size
            else:
                total_max = None

            if size.kind == SizeKind.UNBOUNDED:
                overall_kind = SizeKind.UNBOUNDED
            elif size.kind == SizeKind.BOUNDED and overall_kind == SizeKind.FIXED:
                overall_kind = SizeKind.BOUNDED

        info = RecordSizeInfo(record.name, SizeInfo(total_min, total_max, overall_kind), fields)
        self._cache[record.name] = info
        return info


def calculate_sizes(layout: Layout) -> dict[str, RecordSizeInfo]:
    """Calculate size information for every record in a layout."""
    calc = SizeCalculator(layout)
    return {record.name: calc.calc_record_size(record) for record in layout.records}
