# protocol/bitfield.py
from __future__ import annotations

from typing import Callable, List, Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")

MAX_FIELD_WIDTH = 64


class DecodeError(ValueError):
    """Payload too short (or too long) for the layout being decoded."""


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Unpack bytes MSB-first into a uint8 array of 0/1 values."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("data must be bytes-like")
    return np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """Pack 0/1 values MSB-first. The bit count must be a multiple of 8."""
    b = np.asarray(bits, dtype=np.uint8).reshape(-1)
    if b.size % 8 != 0:
        raise ValueError(f"Bit length must be multiple of 8, got {b.size}")
    if np.any(b > 1):
        raise ValueError("bits must contain only 0/1")
    return np.packbits(b).tobytes()


def popcount(value: int) -> int:
    if value < 0:
        raise ValueError("popcount of negative value")
    return bin(value).count("1")


def _check_width(width: int) -> None:
    if not isinstance(width, int):
        raise TypeError("width must be int")
    if not (0 <= width <= MAX_FIELD_WIDTH):
        raise ValueError(f"width out of range [0,{MAX_FIELD_WIDTH}]: {width}")


class BitReader:
    """
    Sequential MSB-first reader over a byte payload.

    Every read checks the remaining bit count first, so a short payload
    raises DecodeError instead of reading past the end.
    """

    def __init__(self, data: bytes, *, bit_offset: int = 0):
        self._bits = bytes_to_bits(data)
        if not (0 <= bit_offset <= self._bits.size):
            raise ValueError("bit_offset out of range")
        self._pos = bit_offset

    @property
    def pos(self) -> int:
        return self._pos

    @property
    def bit_length(self) -> int:
        return int(self._bits.size)

    @property
    def remaining(self) -> int:
        return int(self._bits.size) - self._pos

    def padding_width(self) -> int:
        """Bits left before the cursor would sit on a whole-byte tail."""
        return self.remaining % 8

    def _take(self, width: int, what: str) -> np.ndarray:
        if width > self.remaining:
            raise DecodeError(
                f"{what}: need {width} bits at offset {self._pos}, only {self.remaining} left"
            )
        chunk = self._bits[self._pos : self._pos + width]
        self._pos += width
        return chunk

    def read_uint(self, width: int, *, what: str = "uint") -> int:
        _check_width(width)
        if width == 0:
            return 0
        chunk = self._take(width, what)
        # packbits left-aligns the last partial byte; shift the zero fill back out
        return int.from_bytes(np.packbits(chunk).tobytes(), "big") >> (-width % 8)

    def read_int(self, width: int, *, what: str = "int") -> int:
        """Two's complement read, sign-extended from the top extracted bit."""
        v = self.read_uint(width, what=what)
        if width and v & (1 << (width - 1)):
            v -= 1 << width
        return v

    def read_bool(self, *, what: str = "flag") -> bool:
        return bool(self.read_uint(1, what=what))

    def read_bits(self, n: int, *, what: str = "bits") -> Tuple[bool, ...]:
        if n < 0:
            raise ValueError("n < 0")
        return tuple(bool(b) for b in self._take(n, what))

    def read_array(self, n: int, read_one: Callable[["BitReader"], T], *, what: str = "array") -> List[T]:
        """
        Read exactly `n` elements with `read_one`. `n` comes from fields the
        caller has already decoded; running out of bits is a DecodeError.
        """
        if n < 0:
            raise ValueError("n < 0")
        out: List[T] = []
        for idx in range(n):
            if self.remaining == 0:
                raise DecodeError(f"{what}: buffer exhausted after {idx} of {n} elements")
            out.append(read_one(self))
        return out


class BitWriter:
    """MSB-first writer; the inverse of BitReader for the same field widths."""

    def __init__(self):
        self._bits: List[int] = []

    @property
    def pos(self) -> int:
        return len(self._bits)

    def write_uint(self, value: int, width: int, *, what: str = "uint") -> None:
        _check_width(width)
        if not isinstance(value, int):
            raise TypeError(f"{what}: value must be int")
        if not (0 <= value < (1 << width)):
            raise ValueError(f"{what}: {value} does not fit in {width} unsigned bits")
        for shift in range(width - 1, -1, -1):
            self._bits.append((value >> shift) & 1)

    def write_int(self, value: int, width: int, *, what: str = "int") -> None:
        _check_width(width)
        if width == 0:
            raise ValueError(f"{what}: signed width must be positive")
        if not isinstance(value, int):
            raise TypeError(f"{what}: value must be int")
        lo, hi = -(1 << (width - 1)), (1 << (width - 1)) - 1
        if not (lo <= value <= hi):
            raise ValueError(f"{what}: {value} does not fit in {width} signed bits")
        self.write_uint(value & ((1 << width) - 1), width, what=what)

    def write_bool(self, value: bool, *, what: str = "flag") -> None:
        self.write_uint(1 if value else 0, 1, what=what)

    def write_bits(self, bits: Sequence[bool]) -> None:
        self._bits.extend(1 if b else 0 for b in bits)

    def to_bytes(self) -> bytes:
        return bits_to_bytes(self._bits)
