# tests/unit/messages/test_layout.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import ClassVar, Tuple

import pytest

from rtcm3_stream.messages.dispatch import DECODERS
from rtcm3_stream.messages.layout import (
    Bits,
    Flag,
    Int,
    Padding,
    Uint,
    count_field,
    count_product,
    count_set_bits,
    decode_payload,
    encode_payload,
    layout_width,
)
from rtcm3_stream.messages.msm import MSM7Satellite, MSM7Signal, MsmHeader
from rtcm3_stream.messages.observation import (
    Rtcm1001Satellite,
    Rtcm1002Satellite,
    Rtcm1003Satellite,
    Rtcm1004Satellite,
    RtcmHeader,
)
from rtcm3_stream.protocol.bitfield import DecodeError

ALL_RECORDS = sorted(
    set(DECODERS.values())
    | {
        RtcmHeader,
        Rtcm1001Satellite,
        Rtcm1002Satellite,
        Rtcm1003Satellite,
        Rtcm1004Satellite,
        MsmHeader,
        MSM7Satellite,
        MSM7Signal,
    },
    key=lambda c: c.__name__,
)


@pytest.mark.parametrize("cls", ALL_RECORDS, ids=lambda c: c.__name__)
def test_layout_names_match_fields(cls):
    names = [item.name for item in cls.LAYOUT]
    fields = [f.name for f in dataclasses.fields(cls)]
    assert names == fields


@dataclass(frozen=True)
class _Toy:
    kind: int
    n: int
    level: int
    on: bool
    flags: Tuple[bool, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = (
        Uint("kind", 4),
        Uint("n", 3),
        Int("level", 5),
        Flag("on"),
        Bits("flags", count_field("n")),
        Padding(),
    )


def test_toy_record_bit_layout():
    rec = _Toy(kind=0xA, n=3, level=-1, on=True, flags=(True, False, True))
    payload = encode_payload(rec)

    # 1010 011 11111 1 101: exactly 16 bits, no padding
    assert payload == bytes([0b10100111, 0b11111101])
    out = decode_payload(_Toy, payload)
    assert out == rec
    assert out.padding == ()


def test_toy_padding_bits_are_read_back():
    rec = _Toy(kind=1, n=0, level=0, on=False, flags=())
    out = decode_payload(_Toy, encode_payload(rec))
    # 13 bits used, 3 padding bits
    assert out.padding == (False, False, False)
    assert out == rec


def test_wrong_padding_length_rejected():
    rec = _Toy(kind=1, n=0, level=0, on=False, flags=(), padding=(False,))
    with pytest.raises(ValueError, match="padding"):
        encode_payload(rec)


def test_bits_count_mismatch_rejected():
    rec = _Toy(kind=1, n=2, level=0, on=False, flags=(True,))
    with pytest.raises(ValueError, match="expected 2 bits"):
        encode_payload(rec)


def test_trailing_bytes_rejected():
    payload = encode_payload(_Toy(kind=1, n=0, level=0, on=False, flags=()))
    with pytest.raises(DecodeError, match="1 trailing bytes"):
        decode_payload(_Toy, payload + b"\x00")


def test_layout_width_refuses_derived_counts():
    with pytest.raises(ValueError, match="flags"):
        layout_width(_Toy)


def test_counters():
    values = {"a": 0b1011, "h": RtcmHeader(1001, 0, 0, False, 9, False, 0), "m": (True, False, True)}

    assert count_field("h.num_gps_satellite_signals_processed")(values) == 9
    assert count_set_bits("a")(values) == 3
    assert count_set_bits("m")(values) == 2
    assert count_product(count_set_bits("a"), count_set_bits("m"))(values) == 6
