# src/rtcm3_stream/messages/ephemeris.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

from .layout import Flag, Int, Padding, Uint


@dataclass(frozen=True)
class Rtcm1019:
    """
    GPS broadcast ephemeris. Flat record, raw integer fields as transmitted
    (scale factors per IS-GPS-200 are left to the consumer).
    """
    message_number: int
    satellite_id: int
    week: int
    sv_accuracy: int
    code_on_l2: int
    idot: int
    iode: int
    toc: int
    af2: int
    af1: int
    af0: int
    iodc: int
    crs: int
    delta_n: int
    m0: int
    cuc: int
    eccentricity: int
    cus: int
    sqrt_a: int
    toe: int
    cic: int
    omega0: int
    cis: int
    i0: int
    crc: int
    omega: int
    omega_dot: int
    tgd: int
    sv_health: int
    l2_p_data_flag: bool
    fit_interval: bool
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = (
        Uint("message_number", 12),
        Uint("satellite_id", 6),
        Uint("week", 10),
        Uint("sv_accuracy", 4),
        Uint("code_on_l2", 2),
        Int("idot", 14),
        Uint("iode", 8),
        Uint("toc", 16),
        Int("af2", 8),
        Int("af1", 16),
        Int("af0", 22),
        Uint("iodc", 10),
        Int("crs", 16),
        Int("delta_n", 16),
        Int("m0", 32),
        Int("cuc", 16),
        Uint("eccentricity", 32),
        Int("cus", 16),
        Uint("sqrt_a", 32),
        Uint("toe", 16),
        Int("cic", 16),
        Int("omega0", 32),
        Int("cis", 16),
        Int("i0", 32),
        Int("crc", 16),
        Int("omega", 32),
        Int("omega_dot", 24),
        Int("tgd", 8),
        Uint("sv_health", 6),
        Flag("l2_p_data_flag"),
        Flag("fit_interval"),
        Padding(),
    )
