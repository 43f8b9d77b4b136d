# protocol/crc.py
from __future__ import annotations

CRC24Q_POLY = 0x1864CFB
_MASK24 = 0xFFFFFF


def crc24q_bitwise(data: bytes, *, init: int = 0) -> int:
    """
    CRC-24Q (Qualcomm, used by RTCM3 and SBAS)
      width=24 poly=0x864CFB init=0x000000 refin=false refout=false xorout=0x000000
      Check("123456789") = 0xCDE703

    Bitwise reference implementation; crc24q() must always agree with it.
    """
    crc = init & _MASK24

    for b in data:
        crc ^= (b & 0xFF) << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= CRC24Q_POLY
    return crc & _MASK24


def _build_table() -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= CRC24Q_POLY
        table.append(crc & _MASK24)
    return tuple(table)


_TABLE = _build_table()


def crc24q(data: bytes, *, init: int = 0) -> int:
    """
    CRC-24Q over `data`, table driven. Pure function: no state is kept
    between calls, so concurrent callers never interfere.

    A complete RTCM3 frame (including its trailing 3 CRC bytes) checksums to 0.
    """
    crc = init & _MASK24
    for b in data:
        crc = ((crc << 8) & _MASK24) ^ _TABLE[((crc >> 16) ^ b) & 0xFF]
    return crc


def crc24q_bytes(data: bytes) -> bytes:
    """CRC-24Q of `data` as the 3 big-endian bytes that trail an RTCM3 frame."""
    return crc24q(data).to_bytes(3, "big")
