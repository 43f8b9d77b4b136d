# src/rtcm3_stream/stream/extractor.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List

from rtcm3_stream.protocol.crc import crc24q
from rtcm3_stream.protocol.framing import (
    CRC_LEN,
    HEADER_LEN,
    MAX_FRAME_LEN,
    MIN_FRAME_LEN,
    PREAMBLE,
    payload_length,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10_000


@dataclass(frozen=True)
class Config:
    """
    Frame extractor config.

    max_size: upper bound on bytes retained between push() calls. Only
              affects memory, never which complete frames are found; must
              be at least MAX_FRAME_LEN so a partial frame is never evicted.
    """
    max_size: int = DEFAULT_MAX_SIZE


@dataclass
class StreamStats:
    bytes_in: int = 0
    frames_ok: int = 0
    frames_bad_crc: int = 0
    bytes_dropped: int = 0
    bytes_evicted: int = 0


class FrameExtractor:
    """
    Streaming RTCM3 frame extractor.

    Bytes are appended to a retained buffer and scanned for 0xD3 preambles.
    A candidate whose CRC-24Q fails is treated as a coincidental preamble and
    the scan moves on by one byte; a candidate that is not fully buffered yet
    stops the scan until more input arrives.

    One instance per byte stream; not safe for concurrent push() calls.
    """

    def __init__(self, cfg: Config | None = None):
        self._cfg = cfg if cfg is not None else Config()
        self._max_size = _getattr_int(self._cfg, "max_size", MAX_FRAME_LEN, None)
        self._buf = bytearray()
        self.stats = StreamStats()

    @property
    def config(self) -> Config:
        return self._cfg

    @property
    def buffered(self) -> int:
        """Number of bytes currently retained."""
        return len(self._buf)

    def reset(self) -> None:
        """Drop retained bytes and start counting from zero."""
        self._buf.clear()
        self.stats = StreamStats()

    def push(self, data: bytes) -> List[bytes]:
        """
        Feed bytes into the extractor. Returns the complete, checksum-valid
        frames (preamble through CRC) in stream order.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("push: data must be bytes-like")

        self.stats.bytes_in += len(data)
        self._buf.extend(data)

        buf = self._buf
        n = len(buf)
        out: List[bytes] = []

        drain = 0
        i = 0
        while n - i >= MIN_FRAME_LEN:
            if buf[i] != PREAMBLE:
                i += 1
                continue

            payload_len = payload_length(buf[i + 1 : i + HEADER_LEN])
            body_end = i + HEADER_LEN + payload_len
            end = body_end + CRC_LEN
            if end > n:
                # Not enough data yet; may still be a real frame.
                break

            crc_calc = crc24q(buf[i:body_end])
            crc_recv = int.from_bytes(buf[body_end:end], "big")
            if crc_calc != crc_recv:
                # Preamble value inside some other payload, or corruption.
                self.stats.frames_bad_crc += 1
                log.debug("crc mismatch at offset %d (len %d): 0x%06X != 0x%06X",
                          i, payload_len, crc_calc, crc_recv)
                i += 1
                continue

            out.append(bytes(buf[i:end]))
            self.stats.frames_ok += 1
            self.stats.bytes_dropped += i - drain
            drain = end
            i = end

        if n - drain > self._max_size:
            evict = n - drain - self._max_size
            self.stats.bytes_evicted += evict
            log.debug("retained buffer over %d bytes, evicting %d", self._max_size, evict)
            drain += evict

        del buf[:drain]
        return out


def iter_frames(chunks: Iterable[bytes], *, cfg: Config | None = None) -> Iterator[bytes]:
    """
    Drive one FrameExtractor over an iterable of byte chunks (e.g. reads from a
    serial port or socket) and yield frames as they complete.
    """
    extractor = FrameExtractor(cfg)
    for chunk in chunks:
        yield from extractor.push(chunk)


# ----------------------------
# Helpers
# ----------------------------

def _getattr_int(cfg: Any, name: str, lo: int, hi: int | None) -> int:
    v = getattr(cfg, name, None)
    if v is None:
        raise AttributeError(f"cfg missing required int attribute: {name}")
    if not isinstance(v, int) or isinstance(v, bool):
        raise TypeError(f"cfg.{name} must be int")
    if v < lo or (hi is not None and v > hi):
        raise ValueError(f"cfg.{name} out of range [{lo},{hi}]")
    return v
