"""Tests for fixed-width primitives and enums."""

from enum import Enum, IntEnum

import pytest

from binstream.proto import (
    BOOL,
    CHAR16,
    CHAR32,
    FLOAT32,
    FLOAT64,
    INT8,
    INT16,
    INT64,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    EnumCodec,
    SerializationError,
    UnsupportedEnumWidthError,
    pack,
    unpack,
    wire_enum,
)


@wire_enum("uint16")
class Color(IntEnum):
    Red = 1
    Green = 0x0203


class Plain(IntEnum):
    A = 1
    B = -1


def describe_endianness():
    def int16_is_big_endian(expect):
        expect(pack(INT16, 0x0102)) == b"\x01\x02"
        expect(unpack(INT16, b"\x01\x02")) == (0x0102, 2)

    def wide_integers_are_big_endian(expect):
        expect(pack(UINT32, 0x01020304)) == b"\x01\x02\x03\x04"
        expect(pack(UINT64, 1)) == b"\x00" * 7 + b"\x01"
        expect(pack(INT64, -2)) == b"\xff" * 7 + b"\xfe"

    def floats_are_big_endian(expect):
        expect(pack(FLOAT32, 1.5)) == b"\x3f\xc0\x00\x00"
        expect(pack(FLOAT64, -2.0)) == b"\xc0\x00\x00\x00\x00\x00\x00\x00"
        expect(unpack(FLOAT64, pack(FLOAT64, 3.25))) == (3.25, 8)


def describe_integers():
    def signed_bytes_use_twos_complement(expect):
        expect(pack(INT8, -1)) == b"\xff"
        expect(unpack(INT8, b"\x80")) == (-128, 1)

    def rejects_out_of_range_values(expect):
        with pytest.raises(SerializationError):
            pack(UINT8, 256)
        with pytest.raises(SerializationError):
            pack(UINT16, -1)
        with pytest.raises(SerializationError):
            pack(INT8, 128)

    def rejects_non_numbers(expect):
        with pytest.raises(SerializationError):
            pack(INT16, "12")


def describe_bool():
    def encodes_as_one_byte(expect):
        expect(pack(BOOL, True)) == b"\x01"
        expect(pack(BOOL, False)) == b"\x00"

    def any_non_zero_byte_is_true(expect):
        expect(unpack(BOOL, b"\x02")) == (True, 1)


def describe_chars():
    def char16_is_one_code_unit(expect):
        expect(pack(CHAR16, "A")) == b"\x00\x41"
        expect(pack(CHAR16, "é")) == b"\x00\xe9"
        expect(unpack(CHAR16, b"\x20\xac")) == ("€", 2)

    def char16_rejects_astral_code_points(expect):
        with pytest.raises(SerializationError):
            pack(CHAR16, "\U0001f600")

    def char32_is_one_code_point(expect):
        expect(pack(CHAR32, "\U0001f600")) == b"\x00\x01\xf6\x00"
        expect(unpack(CHAR32, b"\x00\x01\xf6\x00")) == ("\U0001f600", 4)

    def char32_rejects_invalid_code_points(expect):
        with pytest.raises(SerializationError):
            unpack(CHAR32, b"\x00\x11\x00\x00")

    def rejects_multiple_characters(expect):
        with pytest.raises(SerializationError):
            pack(CHAR16, "ab")


def describe_enums():
    def uses_declared_width(expect):
        codec = EnumCodec(Color)
        expect(codec.wire_type) == "uint16"
        expect(pack(codec, Color.Green)) == b"\x02\x03"
        expect(unpack(codec, b"\x00\x01")) == (Color.Red, 2)

    def accepts_an_explicit_width(expect):
        codec = EnumCodec(Plain, wire_type="int8")
        expect(pack(codec, Plain.B)) == b"\xff"
        expect(unpack(codec, b"\xff")) == (Plain.B, 1)

    def requires_a_declared_width(expect):
        with pytest.raises(UnsupportedEnumWidthError):
            EnumCodec(Plain)

    def rejects_non_integer_widths(expect):
        with pytest.raises(UnsupportedEnumWidthError):
            wire_enum("float32")
        with pytest.raises(UnsupportedEnumWidthError):
            EnumCodec(Plain, wire_type="varint")

    def width_error_is_a_serialization_error(expect):
        with pytest.raises(SerializationError):
            EnumCodec(Plain, wire_type="bool")

    def rejects_unknown_values(expect):
        with pytest.raises(SerializationError):
            unpack(EnumCodec(Color), b"\x00\x09")

    def rejects_foreign_members(expect):
        with pytest.raises(SerializationError):
            pack(EnumCodec(Color), Plain.A)

    def supports_plain_enums(expect):
        @wire_enum("uint8")
        class Mode(Enum):
            On = 1
            Off = 0

        expect(pack(EnumCodec(Mode), Mode.On)) == b"\x01"
