"""Tests for buffer and string framing."""

import random
import zlib

import pytest

from binstream.proto import (
    BUFFER,
    STRING,
    CompressedBufferCodec,
    CompressedStringCodec,
    SerializationError,
    StringCodec,
    ZlibCompressor,
    pack,
    unpack,
)


class ReversingCompressor:
    def __init__(self):
        self.calls = []

    def compress(self, data):
        self.calls.append("compress")
        return data[::-1]

    def decompress(self, data):
        self.calls.append("decompress")
        return data[::-1]


def describe_buffer():
    def absent_is_minus_one(expect):
        expect(pack(BUFFER, None)) == b"\xff\xff\xff\xff"
        expect(unpack(BUFFER, b"\xff\xff\xff\xff")) == (None, 4)

    def empty_is_zero_length(expect):
        expect(pack(BUFFER, b"")) == b"\x00\x00\x00\x00"
        expect(unpack(BUFFER, b"\x00\x00\x00\x00")) == (b"", 4)

    def content_follows_length(expect):
        expect(pack(BUFFER, b"abc")) == b"\x00\x00\x00\x03abc"
        expect(unpack(BUFFER, b"\x00\x00\x00\x03abc")) == (b"abc", 7)

    def accepts_bytearray_and_memoryview(expect):
        expect(pack(BUFFER, bytearray(b"ab"))) == b"\x00\x00\x00\x02ab"
        expect(pack(BUFFER, memoryview(b"ab"))) == b"\x00\x00\x00\x02ab"

    def rejects_other_negative_lengths(expect):
        with pytest.raises(SerializationError):
            unpack(BUFFER, b"\xff\xff\xff\xfe")

    def fails_on_truncated_payload(expect):
        with pytest.raises(EOFError):
            unpack(BUFFER, b"\x00\x00\x00\x05ab")

    def fails_on_length_prefix_past_the_data(expect):
        with pytest.raises(EOFError):
            unpack(BUFFER, b"\x7f\xff\xff\xffab")

    def reads_payloads_spanning_several_chunks(expect):
        payload = bytes(range(256)) * 800
        expect(unpack(BUFFER, pack(BUFFER, payload))) == (payload, len(payload) + 4)


def describe_compressed_buffer():
    @pytest.mark.parametrize(
        "value",
        [None, b"", b"a" * 1000, random.Random(7).randbytes(512)],
        ids=["absent", "empty", "repeated", "random"],
    )
    def round_trips(expect, value):
        codec = CompressedBufferCodec()
        data = pack(codec, value)
        expect(unpack(codec, data)) == (value, len(data))

    def absent_bypasses_compression(expect):
        compressor = ReversingCompressor()
        expect(pack(CompressedBufferCodec(compressor), None)) == b"\xff\xff\xff\xff"
        expect(compressor.calls) == []

    def empty_payload_is_still_compressed(expect):
        data = pack(CompressedBufferCodec(), b"")
        expect(data[4:]) == zlib.compress(b"")

    def empty_frame_decodes_without_decompressing(expect):
        compressor = ReversingCompressor()
        expect(unpack(CompressedBufferCodec(compressor), b"\x00\x00\x00\x00")) == (b"", 4)
        expect(compressor.calls) == []

    def repeated_bytes_shrink(expect):
        expect(len(pack(CompressedBufferCodec(), b"a" * 1000)) < 100) == True

    def frames_compressor_output(expect):
        codec = CompressedBufferCodec(ReversingCompressor())
        expect(pack(codec, b"abc")) == b"\x00\x00\x00\x03cba"
        expect(codec.compressor.calls) == ["compress"]

    def compressor_errors_propagate(expect):
        with pytest.raises(zlib.error):
            unpack(CompressedBufferCodec(), pack(BUFFER, b"not zlib"))

    def zlib_level_is_checked(expect):
        with pytest.raises(ValueError):
            ZlibCompressor(level=10)


def describe_string():
    @pytest.mark.parametrize("value", [None, "", "hello", "héllo ✓ \U0001f600"])
    def round_trips(expect, value):
        data = pack(STRING, value)
        expect(unpack(STRING, data)) == (value, len(data))

    def defaults_to_utf16_big_endian(expect):
        expect(pack(STRING, "hi")) == b"\x00\x00\x00\x04\x00h\x00i"

    def distinguishes_absent_and_empty(expect):
        expect(pack(STRING, None)) == b"\xff\xff\xff\xff"
        expect(pack(STRING, "")) == b"\x00\x00\x00\x00"

    def redirects_bom_utf16_to_big_endian(expect):
        expect(StringCodec("utf-16").encoding) == "utf-16-be"
        expect(StringCodec("UTF_16").encoding) == "utf-16-be"
        expect(pack(StringCodec("utf-16"), "hi")) == pack(STRING, "hi")

    def supports_other_encodings(expect):
        expect(pack(StringCodec("utf-8"), "hé")) == b"\x00\x00\x00\x03h\xc3\xa9"

    def rejects_unknown_encodings(expect):
        with pytest.raises(SerializationError):
            StringCodec("no-such-encoding")

    def rejects_unencodable_text(expect):
        with pytest.raises(SerializationError):
            pack(StringCodec("ascii"), "é")

    def rejects_undecodable_bytes(expect):
        with pytest.raises(SerializationError):
            unpack(StringCodec("utf-8"), b"\x00\x00\x00\x01\xff")


def describe_compressed_string():
    @pytest.mark.parametrize("value", [None, "", "hello " * 50, "éèê"])
    def round_trips(expect, value):
        codec = CompressedStringCodec()
        data = pack(codec, value)
        expect(unpack(codec, data)) == (value, len(data))

    def compresses_encoded_text(expect):
        data = pack(CompressedStringCodec(), "hi")
        expect(zlib.decompress(data[4:])) == "hi".encode("utf-16-be")
