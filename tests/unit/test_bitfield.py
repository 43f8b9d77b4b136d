# tests/unit/test_bitfield.py
from __future__ import annotations

import pytest

from rtcm3_stream.protocol.bitfield import (
    BitReader,
    BitWriter,
    DecodeError,
    bits_to_bytes,
    bytes_to_bits,
    popcount,
)


def test_read_uint_msb_first_across_bytes():
    r = BitReader(b"\x3E\xD7\xD3")
    assert r.read_uint(12) == 1005
    assert r.read_uint(12) == 2003
    assert r.remaining == 0


def test_read_uint_at_bit_offset():
    r = BitReader(b"\xDE\xAD\xBE\xEF", bit_offset=4)
    assert r.read_uint(8) == 0xEA
    assert r.pos == 12


def test_read_uint_64_bits():
    r = BitReader(b"\xFF" * 8 + b"\x80")
    assert r.read_uint(64) == (1 << 64) - 1
    assert r.read_uint(1) == 1


def test_read_int_sign_extends_odd_widths():
    w = BitWriter()
    w.write_uint(0b11111111111111, 14)  # -1 in 14 bits
    w.write_uint(0b10000000000000, 14)  # most negative
    w.write_uint(0b0011, 4)
    r = BitReader(w.to_bytes())
    assert r.read_int(14) == -1
    assert r.read_int(14) == -(1 << 13)
    assert r.read_int(4) == 3


def test_read_int_38_bits():
    w = BitWriter()
    w.write_int(-48507297108, 38)
    w.write_uint(0, 2)
    r = BitReader(w.to_bytes())
    assert r.read_int(38) == -48507297108


def test_read_bool_and_bits():
    r = BitReader(b"\xA0")
    assert r.read_bool() is True
    assert r.read_bits(3) == (False, True, False)
    assert r.padding_width() == 4


def test_read_past_end_raises():
    r = BitReader(b"\x01")
    r.read_uint(5)
    with pytest.raises(DecodeError, match="need 4 bits"):
        r.read_uint(4)
    # cursor not moved by the failed read
    assert r.pos == 5


def test_read_array_reads_exact_count():
    r = BitReader(b"\x12\x34")
    assert r.read_array(4, lambda rr: rr.read_uint(4)) == [1, 2, 3, 4]


def test_read_array_exhausted_raises():
    r = BitReader(b"\x12")
    with pytest.raises(DecodeError, match="exhausted after 2 of 3"):
        r.read_array(3, lambda rr: rr.read_uint(4))


def test_read_array_partial_element_raises():
    r = BitReader(b"\x12")
    with pytest.raises(DecodeError):
        r.read_array(2, lambda rr: rr.read_uint(6))


def test_width_out_of_range():
    with pytest.raises(ValueError):
        BitReader(b"\x00" * 16).read_uint(65)


def test_writer_rejects_overflow():
    w = BitWriter()
    with pytest.raises(ValueError):
        w.write_uint(16, 4)
    with pytest.raises(ValueError):
        w.write_int(8, 4)
    with pytest.raises(ValueError):
        w.write_int(-9, 4)


def test_writer_requires_whole_bytes():
    w = BitWriter()
    w.write_uint(1, 3)
    with pytest.raises(ValueError, match="multiple of 8"):
        w.to_bytes()
    w.write_bits([True] * 5)
    assert w.to_bytes() == b"\x3F"


def test_writer_reader_mixed_widths():
    fields = [(5, 17), (-3, 7), (1, 1), (0x2980EDEEF, 38), (-1, 20), (0, 5)]
    w = BitWriter()
    for v, width in fields:
        if v < 0:
            w.write_int(v, width)
        else:
            w.write_uint(v, width)
    data = w.to_bytes()
    assert len(data) * 8 == sum(width for _v, width in fields)

    r = BitReader(data)
    for v, width in fields:
        got = r.read_int(width) if v < 0 else r.read_uint(width)
        assert got == v


def test_bits_helpers():
    assert list(bytes_to_bits(b"\x81")) == [1, 0, 0, 0, 0, 0, 0, 1]
    assert bits_to_bytes([1, 0, 0, 0, 0, 0, 0, 1]) == b"\x81"
    with pytest.raises(ValueError):
        bits_to_bytes([1, 0, 2, 0, 0, 0, 0, 1])


def test_popcount():
    assert popcount(0) == 0
    assert popcount(0xFFFFFFFFFFFFFFFF) == 64
    assert popcount(0b1011) == 3
