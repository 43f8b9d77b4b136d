from __future__ import annotations

import random
from typing import Any, Dict, Iterator, Optional

from rtcm3_stream.messages.layout import Bits, Flag, Int, Padding, Record, Repeat, Uint

# RTCM 10403 worked example: type 1005, station 2003, ARP
# X=1114104.5999 m, Y=-4850729.7108 m, Z=3975521.4643 m.
RTCM1005_EXAMPLE_FRAME = bytes.fromhex(
    "D30013"
    "3ED7D30202980EDEEF34B4BD62AC0941986F33"
    "360B98"
)
RTCM1005_EXAMPLE_PAYLOAD = RTCM1005_EXAMPLE_FRAME[3:-3]


def chunked(data: bytes, rng: random.Random, min_sz: int = 1, max_sz: int = 97) -> Iterator[bytes]:
    i = 0
    n = len(data)
    while i < n:
        sz = rng.randint(min_sz, max_sz)
        yield data[i : i + sz]
        i += sz


def random_record(cls: type, rng: random.Random, fixed: Optional[Dict[str, Any]] = None):
    """
    Build a random but valid instance of a layout record.

    `fixed` pins fields by name at any nesting depth (e.g. message_number,
    or sparse MSM masks so the payload stays small).
    """
    fixed = fixed or {}
    values: Dict[str, Any] = {}
    for item in cls.LAYOUT:
        if item.name in fixed:
            values[item.name] = fixed[item.name]
        elif isinstance(item, Uint):
            values[item.name] = rng.randrange(1 << item.width)
        elif isinstance(item, Int):
            half = 1 << (item.width - 1)
            values[item.name] = rng.randrange(-half, half)
        elif isinstance(item, Flag):
            values[item.name] = rng.random() < 0.5
        elif isinstance(item, Bits):
            values[item.name] = tuple(rng.random() < 0.5 for _ in range(item.count(values)))
        elif isinstance(item, Record):
            values[item.name] = random_record(item.cls, rng, fixed)
        elif isinstance(item, Repeat):
            n = item.count(values)
            values[item.name] = tuple(random_record(item.cls, rng, fixed) for _ in range(n))
        elif isinstance(item, Padding):
            values[item.name] = ()
    return cls(**values)
