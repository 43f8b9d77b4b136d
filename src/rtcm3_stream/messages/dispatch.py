# src/rtcm3_stream/messages/dispatch.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Union

from rtcm3_stream.protocol.bitfield import DecodeError
from rtcm3_stream.protocol.framing import pack_frame, unpack_frame

from .ephemeris import Rtcm1019
from .layout import decode_payload, encode_payload
from .msm import MSM7_MESSAGE_NUMBERS, RtcmMSM7
from .observation import Rtcm1001, Rtcm1002, Rtcm1003, Rtcm1004
from .station import Rtcm1005, Rtcm1006

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnsupportedType:
    """Valid frame whose message number has no decoder."""
    message_number: int


Message = Union[
    Rtcm1001,
    Rtcm1002,
    Rtcm1003,
    Rtcm1004,
    Rtcm1005,
    Rtcm1006,
    Rtcm1019,
    RtcmMSM7,
    UnsupportedType,
]

DECODERS: Dict[int, type] = {
    1001: Rtcm1001,
    1002: Rtcm1002,
    1003: Rtcm1003,
    1004: Rtcm1004,
    1005: Rtcm1005,
    1006: Rtcm1006,
    1019: Rtcm1019,
    **{n: RtcmMSM7 for n in MSM7_MESSAGE_NUMBERS},
}


def message_type(payload: bytes) -> int:
    """
    First 12 bits of the payload: top 8 bits of byte 0, top 4 bits of byte 1.
    Does not consume anything; each decoder re-reads it as its first field.
    """
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise TypeError("payload must be bytes-like")
    if len(payload) < 2:
        raise DecodeError(f"payload too short for message number: {len(payload)} bytes")
    return (payload[0] << 4) | (payload[1] >> 4)


def decode(payload: bytes) -> Message:
    """
    Decode one message payload (the bytes between frame header and CRC).

    Unknown message numbers return UnsupportedType. A payload too short or
    too long for a known layout raises DecodeError.
    """
    msg_id = message_type(payload)
    cls = DECODERS.get(msg_id)
    if cls is None:
        log.debug("unsupported message type %d (%d bytes)", msg_id, len(payload))
        return UnsupportedType(msg_id)
    return decode_payload(cls, bytes(payload))


def encode(message: Message) -> bytes:
    """Inverse of decode(): message record -> payload bytes."""
    if isinstance(message, UnsupportedType):
        raise ValueError(f"cannot encode unsupported message type {message.message_number}")
    cls = DECODERS.get(_message_number(message))
    if cls is not type(message):
        raise ValueError(
            f"{type(message).__name__} cannot carry message number {_message_number(message)}"
        )
    return encode_payload(message)


def decode_frame(frame: bytes) -> Message:
    """Validate a complete wire frame and decode its payload."""
    return decode(unpack_frame(frame))


def encode_frame(message: Message) -> bytes:
    return pack_frame(encode(message))


def _message_number(message) -> int:
    header = getattr(message, "header", None)
    if header is not None:
        return header.message_number
    return message.message_number
