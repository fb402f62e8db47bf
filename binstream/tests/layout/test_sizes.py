"""Tests for size calculation."""

import pytest

from binstream.layout import parse
from binstream.layout.sizes import SizeCalculator, SizeKind, calculate_sizes
from binstream.layout.types import LayoutType


def describe_primitive_sizes():
    def calculates_fixed_primitives(expect):
        layout = parse(
            """
            record Fixed {
                a: uint8
                b: int32
                c: float64
            }
        """
        )
        info = calculate_sizes(layout)

        expect(info["Fixed"].size.min_size) == 13  # 1 + 4 + 8
        expect(info["Fixed"].size.max_size) == 13
        expect(info["Fixed"].size.kind) == SizeKind.FIXED
        expect(info["Fixed"].size.is_fixed) == True

    def calculates_temporal_sizes(expect):
        layout = parse("record T { a: instant b: offset_instant c: duration d: uuid }")
        info = calculate_sizes(layout)

        expect(info["T"].fields["b"].min_size) == 16
        expect(info["T"].fields["d"].min_size) == 20  # length prefix + 16 bytes
        expect(info["T"].size.min_size) == 52

    def calculates_char_sizes(expect):
        layout = parse("record C { a: char16 b: char32 c: bool }")
        expect(calculate_sizes(layout)["C"].size.max_size) == 7


def describe_variable_sizes():
    def varints_are_bounded(expect):
        layout = parse("record V { a: varint b: uvarint }")
        size = calculate_sizes(layout)["V"].size

        expect(size.min_size) == 2
        expect(size.max_size) == 10
        expect(size.kind) == SizeKind.BOUNDED
        expect(size.is_bounded) == True
        expect(size.is_fixed) == False

    def framed_types_are_unbounded(expect):
        layout = parse("record F { a: bytes b: zstring c: seq<int8> d: array<int8> }")
        info = calculate_sizes(layout)["F"]

        expect(info.fields["a"].min_size) == 4
        expect(info.fields["d"].min_size) == 8
        expect(info.size.min_size) == 20
        expect(info.size.max_size) == None
        expect(info.size.kind) == SizeKind.UNBOUNDED
        expect(info.size.is_bounded) == False


def describe_references():
    def enums_use_their_wire_type(expect):
        layout = parse("enum Big: uint64 { A = 1 } record E { e: Big }")
        expect(calculate_sizes(layout)["E"].size.min_size) == 8

    def records_nest(expect):
        layout = parse(
            """
            enum Kind: uint8 { Ping = 1 }
            record Header { id: uvarint kind: Kind }
            record Message { header: Header name: string }
        """
        )
        info = calculate_sizes(layout)

        expect(info["Header"].size.min_size) == 2
        expect(info["Header"].size.max_size) == 6
        expect(info["Message"].fields["header"].kind) == SizeKind.BOUNDED
        expect(info["Message"].size.min_size) == 6
        expect(info["Message"].size.kind) == SizeKind.UNBOUNDED

    def caches_record_sizes(expect):
        layout = parse("record P { x: int32 }")
        calc = SizeCalculator(layout)
        first = calc.calc_record_size(layout.records[0])
        expect(calc.calc_record_size(layout.records[0]) is first) == True

    def rejects_unknown_types(expect):
        calc = SizeCalculator(parse("record P { x: int32 }"))
        with pytest.raises(ValueError):
            calc.calc_type_size(LayoutType("Missing"))
