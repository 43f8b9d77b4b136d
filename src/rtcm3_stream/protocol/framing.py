# src/rtcm3_stream/protocol/framing.py
from __future__ import annotations

from .crc import crc24q, crc24q_bytes

PREAMBLE = 0xD3

# preamble:u8, reserved:6 bits, payload_len:10 bits  => 3 bytes
HEADER_LEN = 3
CRC_LEN = 3
LENGTH_MASK = 0x3FF
MAX_PAYLOAD_LEN = LENGTH_MASK  # 1023

# smallest buffer tail that can hold a header and a checksum
MIN_FRAME_LEN = HEADER_LEN + CRC_LEN

# largest frame the 10-bit length field allows
MAX_FRAME_LEN = HEADER_LEN + MAX_PAYLOAD_LEN + CRC_LEN  # 1029


def payload_length(hdr: bytes) -> int:
    """
    Payload length from the two bytes after the preamble: low 10 bits of a
    big-endian u16. The 6 reserved bits are ignored.
    """
    if len(hdr) < 2:
        raise ValueError("need 2 length bytes")
    return int.from_bytes(bytes(hdr[:2]), "big") & LENGTH_MASK


def frame_total_len(payload_len: int) -> int:
    if not (0 <= payload_len <= MAX_PAYLOAD_LEN):
        raise ValueError("payload_len out of range")
    return HEADER_LEN + payload_len + CRC_LEN


def frame_crc_ok(frame: bytes) -> bool:
    """True if the trailing 3 bytes equal CRC-24Q of everything before them."""
    if len(frame) < MIN_FRAME_LEN:
        return False
    body = frame[:-CRC_LEN]
    return crc24q(body) == int.from_bytes(bytes(frame[-CRC_LEN:]), "big")


def pack_frame(payload: bytes) -> bytes:
    """
    Wrap a message payload into a wire frame:
      0xD3 | 000000 + len(10) | payload | CRC-24Q(3)
    """
    if not isinstance(payload, (bytes, bytearray)):
        raise TypeError("pack_frame: payload must be bytes-like")
    payload = bytes(payload)
    if len(payload) > MAX_PAYLOAD_LEN:
        raise ValueError(f"payload too large: {len(payload)} > {MAX_PAYLOAD_LEN}")

    header = bytes([PREAMBLE]) + len(payload).to_bytes(2, "big")
    body = header + payload
    return body + crc24q_bytes(body)


def unpack_frame(frame: bytes) -> bytes:
    """
    Validate one complete frame and return its payload.

    Raises ValueError on a wrong preamble, a length mismatch or a bad CRC.
    """
    if not isinstance(frame, (bytes, bytearray)):
        raise TypeError("unpack_frame: frame must be bytes-like")
    frame = bytes(frame)

    if len(frame) < MIN_FRAME_LEN:
        raise ValueError("frame too short")
    if frame[0] != PREAMBLE:
        raise ValueError("bad preamble")

    payload_len = payload_length(frame[1:HEADER_LEN])
    if len(frame) != frame_total_len(payload_len):
        raise ValueError("frame length mismatch")

    if not frame_crc_ok(frame):
        raise ValueError("bad crc24q")

    return frame[HEADER_LEN : HEADER_LEN + payload_len]
