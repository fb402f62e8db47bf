"""Type definitions for layout parsing."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin


@dataclass
class LayoutType(DataClassJsonMixin):
    """Represents a field type.

    For containers (seq, collection, array) `element` holds the element
    type; it is None for every other type.
    """

    name: str
    element: "LayoutType | None" = None

    def __str__(self) -> str:
        if self.element is None:
            return self.name
        return f"{self.name}<{self.element}>"


@dataclass
class LayoutEnumValue(DataClassJsonMixin):
    """Represents a single enum value."""

    name: str
    value: int


@dataclass
class LayoutEnum(DataClassJsonMixin):
    """Represents an enum definition and its integer wire type."""

    name: str
    type: str
    values: list[LayoutEnumValue] = field(default_factory=list)


@dataclass
class LayoutField(DataClassJsonMixin):
    """Represents a field of a record."""

    name: str
    type: LayoutType


@dataclass
class LayoutRecord(DataClassJsonMixin):
    """Represents a record: fields encoded back to back, in order."""

    name: str
    fields: list[LayoutField] = field(default_factory=list)


@dataclass
class Layout(DataClassJsonMixin):
    """Represents a parsed layout file."""

    enums: list[LayoutEnum] = field(default_factory=list)
    records: list[LayoutRecord] = field(default_factory=list)

    def find_enum(self, name: str) -> LayoutEnum | None:
        return next((e for e in self.enums if e.name == name), None)

    def find_record(self, name: str) -> LayoutRecord | None:
        return next((r for r in self.records if r.name == name), None)


INTEGER_TYPES = frozenset(
    ["int8", "uint8", "int16", "uint16", "int32", "uint32", "int64", "uint64"]
)

PRIMITIVE_TYPES = INTEGER_TYPES | frozenset(
    [
        "bool",
        "char16",
        "char32",
        "float32",
        "float64",
        "varint",
        "uvarint",
        "bytes",
        "zbytes",
        "string",
        "zstring",
        "duration",
        "instant",
        "offset_instant",
        "uuid",
    ]
)

CONTAINER_TYPES = frozenset(["seq", "collection", "array"])


def is_primitive(t: LayoutType) -> bool:
    """Check if a type is a primitive type."""
    return t.element is None and t.name in PRIMITIVE_TYPES


def is_container(t: LayoutType) -> bool:
    """Check if a type is a container type."""
    return t.name in CONTAINER_TYPES
