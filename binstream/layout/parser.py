"""Layout definition parser using Lark."""

import os
from typing import Any

from lark import Lark
from lark.visitors import Transformer

from .types import (
    CONTAINER_TYPES,
    INTEGER_TYPES,
    PRIMITIVE_TYPES,
    Layout,
    LayoutEnum,
    LayoutEnumValue,
    LayoutField,
    LayoutRecord,
    LayoutType,
)

_g_parser: Lark | None = None


class ValidationError(RuntimeError):
    """Raised when layout validation fails."""


class TreeTransformer(Transformer):
    """Transform parse tree into layout types."""

    def start(self, args: list[Any]) -> Layout:
        return Layout(
            enums=[a for a in args if isinstance(a, LayoutEnum)],
            records=[a for a in args if isinstance(a, LayoutRecord)],
        )

    def enum(self, args: list[Any]) -> LayoutEnum:
        name, wire_type, *values = args
        return LayoutEnum(name=str(name), type=str(wire_type), values=values)

    def enum_value(self, args: list[Any]) -> LayoutEnumValue:
        return LayoutEnumValue(name=str(args[0]), value=int(args[1]))

    def record(self, args: list[Any]) -> LayoutRecord:
        name, *fields = args
        return LayoutRecord(name=str(name), fields=fields)

    def field(self, args: list[Any]) -> LayoutField:
        return LayoutField(name=str(args[0]), type=args[1])

    def simple_type(self, args: list[Any]) -> LayoutType:
        return LayoutType(name=str(args[0]))

    def generic_type(self, args: list[Any]) -> LayoutType:
        return LayoutType(name=str(args[0]), element=args[1])


def _check_unique(names: list[str], what: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValidationError(f"Duplicate {what} {name}")
        seen.add(name)


def _validate_type(t: LayoutType, layout: Layout, context: str) -> None:
    if t.name in CONTAINER_TYPES:
        if t.element is None:
            raise ValidationError(f"{context}: {t.name} needs an element type, e.g. {t.name}<int8>")
        _validate_type(t.element, layout, context)
        return

    if t.element is not None:
        raise ValidationError(f"{context}: {t.name} is not a container type")

    if t.name in PRIMITIVE_TYPES:
        return
    if layout.find_enum(t.name) or layout.find_record(t.name):
        return
    raise ValidationError(f"{context}: unknown type {t.name}")


def _record_refs(t: LayoutType) -> list[str]:
    if t.element is not None:
        return _record_refs(t.element)
    return [t.name]


def _check_cycles(layout: Layout) -> None:
    records = {r.name: r for r in layout.records}
    done: set[str] = set()

    def visit(name: str, path: list[str]) -> None:
        if name in path:
            cycle = " -> ".join(path[path.index(name) :] + [name])
            raise ValidationError(f"Recursive record reference: {cycle}")
        if name in done:
            return
        for f in records[name].fields:
            for ref in _record_refs(f.type):
                if ref in records:
                    visit(ref, path + [name])
        done.add(name)

    for name in records:
        visit(name, [])


def validate(layout: Layout) -> None:
    """Validate a parsed layout definition."""
    _check_unique([e.name for e in layout.enums] + [r.name for r in layout.records], "type")

    for enum in layout.enums:
        if enum.name in PRIMITIVE_TYPES or enum.name in CONTAINER_TYPES:
            raise ValidationError(f"Enum {enum.name} shadows a built-in type")
        if enum.type not in INTEGER_TYPES:
            raise ValidationError(f"Enum {enum.name} must use an integer type, not {enum.type}")
        _check_unique([v.name for v in enum.values], f"value in enum {enum.name}")
        _check_unique([str(v.value) for v in enum.values], f"number in enum {enum.name}")

    for record in layout.records:
        if record.name in PRIMITIVE_TYPES or record.name in CONTAINER_TYPES:
            raise ValidationError(f"Record {record.name} shadows a built-in type")
        _check_unique([f.name for f in record.fields], f"field in record {record.name}")
        for f in record.fields:
            _validate_type(f.type, layout, f"{record.name}.{f.name}")

    _check_cycles(layout)


def parse(text: str) -> Layout:
    """Parse and validate a layout definition."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/layout.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar, parser="lalr")

    tree = _g_parser.parse(text)
    layout = TreeTransformer().transform(tree)

    validate(layout)

    return layout
