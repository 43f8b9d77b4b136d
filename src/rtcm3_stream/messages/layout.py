# src/rtcm3_stream/messages/layout.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Dict, Sequence, Type, TypeVar

from rtcm3_stream.protocol.bitfield import BitReader, BitWriter, DecodeError, popcount

# ============================
# Layout items
# ============================
#
# A record class carries LAYOUT: an ordered tuple of the items below. Field
# names match the dataclass fields one to one. Count callables receive the
# fields decoded so far (name -> value) and return a repetition count.

R = TypeVar("R")

Counter = Callable[[Dict[str, Any]], int]


@dataclass(frozen=True)
class Uint:
    name: str
    width: int


@dataclass(frozen=True)
class Int:
    """Two's complement signed field."""
    name: str
    width: int


@dataclass(frozen=True)
class Flag:
    name: str


@dataclass(frozen=True)
class Bits:
    """Tuple of bools whose length is computed from earlier fields."""
    name: str
    count: Counter


@dataclass(frozen=True)
class Record:
    """Nested record (e.g. a message header)."""
    name: str
    cls: type


@dataclass(frozen=True)
class Repeat:
    """Array of sub-records; length derived from earlier fields."""
    name: str
    cls: type
    count: Counter


@dataclass(frozen=True)
class Padding:
    """Tail bits up to the next whole byte: (remaining bits) mod 8."""
    name: str = "padding"


def count_field(path: str) -> Counter:
    """Count taken directly from an earlier field, e.g. "header.num_sats"."""
    def _count(values: Dict[str, Any]) -> int:
        return _lookup(values, path)
    return _count


def count_set_bits(path: str) -> Counter:
    """Count = popcount of an integer bitmask field, or set entries of a bool tuple."""
    def _count(values: Dict[str, Any]) -> int:
        v = _lookup(values, path)
        if isinstance(v, int):
            return popcount(v)
        return sum(1 for b in v if b)
    return _count


def count_product(*counters: Counter) -> Counter:
    def _count(values: Dict[str, Any]) -> int:
        n = 1
        for c in counters:
            n *= c(values)
        return n
    return _count


def _lookup(values: Any, path: str) -> Any:
    v = values
    for part in path.split("."):
        v = v[part] if isinstance(v, dict) else getattr(v, part)
    return v


def layout_width(cls: type) -> int:
    """Total bits of a layout with no derived-count items, padding excluded."""
    total = 0
    for item in cls.LAYOUT:
        if isinstance(item, (Uint, Int)):
            total += item.width
        elif isinstance(item, Flag):
            total += 1
        elif isinstance(item, Record):
            total += layout_width(item.cls)
        elif isinstance(item, Padding):
            continue
        else:
            raise ValueError(f"{cls.__name__}.{item.name} has a derived width")
    return total


# ============================
# Decode
# ============================

def decode_record(cls: Type[R], reader: BitReader) -> R:
    """Read `cls.LAYOUT` in order and build the record."""
    values: Dict[str, Any] = {}
    for item in cls.LAYOUT:
        what = f"{cls.__name__}.{item.name}"
        if isinstance(item, Uint):
            values[item.name] = reader.read_uint(item.width, what=what)
        elif isinstance(item, Int):
            values[item.name] = reader.read_int(item.width, what=what)
        elif isinstance(item, Flag):
            values[item.name] = reader.read_bool(what=what)
        elif isinstance(item, Bits):
            values[item.name] = reader.read_bits(item.count(values), what=what)
        elif isinstance(item, Record):
            values[item.name] = decode_record(item.cls, reader)
        elif isinstance(item, Repeat):
            n = item.count(values)
            sub = item.cls
            values[item.name] = tuple(
                reader.read_array(n, lambda r: decode_record(sub, r), what=what)
            )
        elif isinstance(item, Padding):
            values[item.name] = reader.read_bits(reader.padding_width(), what=what)
        else:
            raise TypeError(f"unknown layout item {item!r}")
    return cls(**values)


def decode_payload(cls: Type[R], payload: bytes) -> R:
    """
    Decode a whole message payload. After the padding the cursor must sit
    exactly on the payload end; leftover whole bytes are a DecodeError.
    """
    reader = BitReader(payload)
    record = decode_record(cls, reader)
    if reader.remaining:
        raise DecodeError(
            f"{cls.__name__}: {reader.remaining // 8} trailing bytes after layout end"
        )
    return record


# ============================
# Encode
# ============================

def encode_record(record: Any, writer: BitWriter) -> None:
    cls = type(record)
    for item in cls.LAYOUT:
        what = f"{cls.__name__}.{item.name}"
        v = getattr(record, item.name)
        if isinstance(item, Uint):
            writer.write_uint(v, item.width, what=what)
        elif isinstance(item, Int):
            writer.write_int(v, item.width, what=what)
        elif isinstance(item, Flag):
            writer.write_bool(v, what=what)
        elif isinstance(item, Bits):
            n = item.count(_as_values(record))
            if len(v) != n:
                raise ValueError(f"{what}: expected {n} bits, got {len(v)}")
            writer.write_bits(v)
        elif isinstance(item, Record):
            if not isinstance(v, item.cls):
                raise TypeError(f"{what} must be {item.cls.__name__}")
            encode_record(v, writer)
        elif isinstance(item, Repeat):
            n = item.count(_as_values(record))
            if len(v) != n:
                raise ValueError(f"{what}: expected {n} records, got {len(v)}")
            for sub in v:
                if not isinstance(sub, item.cls):
                    raise TypeError(f"{what} entries must be {item.cls.__name__}")
                encode_record(sub, writer)
        elif isinstance(item, Padding):
            _write_padding(v, writer, what)
        else:
            raise TypeError(f"unknown layout item {item!r}")


def encode_payload(record: Any) -> bytes:
    writer = BitWriter()
    encode_record(record, writer)
    return writer.to_bytes()


def _write_padding(bits: Sequence[bool], writer: BitWriter, what: str) -> None:
    need = -writer.pos % 8
    if len(bits) == need:
        writer.write_bits(bits)
    elif len(bits) == 0:
        writer.write_bits([False] * need)
    else:
        raise ValueError(f"{what}: expected {need} padding bits, got {len(bits)}")


def _as_values(record: Any) -> Dict[str, Any]:
    return {f.name: getattr(record, f.name) for f in dataclasses.fields(record)}
