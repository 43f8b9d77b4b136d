# src/rtcm3_stream/messages/observation.py
"""
GPS RTK observables, message types 1001-1004.

All four share RtcmHeader; the number of satellite records is the header's
num_gps_satellite_signals_processed field.

  1001  L1-only
  1002  L1-only, extended (ambiguity + CNR)
  1003  L1/L2
  1004  L1/L2, extended
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

from .layout import Flag, Int, Padding, Record, Repeat, Uint, count_field


@dataclass(frozen=True)
class RtcmHeader:
    message_number: int
    reference_station_id: int
    gps_epoch_time: int
    synchronous_gnss_flag: bool
    num_gps_satellite_signals_processed: int
    gps_divergence_free_smoothing_indicator: bool
    gps_smoothing_interval: int

    LAYOUT: ClassVar[tuple] = (
        Uint("message_number", 12),
        Uint("reference_station_id", 12),
        Uint("gps_epoch_time", 30),
        Flag("synchronous_gnss_flag"),
        Uint("num_gps_satellite_signals_processed", 5),
        Flag("gps_divergence_free_smoothing_indicator"),
        Uint("gps_smoothing_interval", 3),
    )


_L1 = (
    Uint("gps_satellite_id", 6),
    Uint("gps_l1_code_indicator", 1),
    Uint("gps_l1_pseudorange", 24),
    Int("gps_l1_phaserange_minus_pseudorange", 20),
    Uint("gps_l1_lock_time_indicator", 7),
)

_L1_EXTENDED = (
    Uint("gps_integer_l1_pseudorange_modulus_ambiguity", 8),
    Uint("gps_l1_cnr", 8),
)

_L2 = (
    Uint("gps_l2_code_indicator", 2),
    Int("gps_l2_l1_pseudorange_difference", 14),
    Int("gps_l2_phaserange_minus_pseudorange", 20),
    Uint("gps_l2_lock_time_indicator", 7),
)


@dataclass(frozen=True)
class Rtcm1001Satellite:
    gps_satellite_id: int
    gps_l1_code_indicator: int
    gps_l1_pseudorange: int
    gps_l1_phaserange_minus_pseudorange: int
    gps_l1_lock_time_indicator: int

    LAYOUT: ClassVar[tuple] = _L1


@dataclass(frozen=True)
class Rtcm1002Satellite:
    gps_satellite_id: int
    gps_l1_code_indicator: int
    gps_l1_pseudorange: int
    gps_l1_phaserange_minus_pseudorange: int
    gps_l1_lock_time_indicator: int
    gps_integer_l1_pseudorange_modulus_ambiguity: int
    gps_l1_cnr: int

    LAYOUT: ClassVar[tuple] = _L1 + _L1_EXTENDED


@dataclass(frozen=True)
class Rtcm1003Satellite:
    gps_satellite_id: int
    gps_l1_code_indicator: int
    gps_l1_pseudorange: int
    gps_l1_phaserange_minus_pseudorange: int
    gps_l1_lock_time_indicator: int
    gps_l2_code_indicator: int
    gps_l2_l1_pseudorange_difference: int
    gps_l2_phaserange_minus_pseudorange: int
    gps_l2_lock_time_indicator: int

    LAYOUT: ClassVar[tuple] = _L1 + _L2


@dataclass(frozen=True)
class Rtcm1004Satellite:
    gps_satellite_id: int
    gps_l1_code_indicator: int
    gps_l1_pseudorange: int
    gps_l1_phaserange_minus_pseudorange: int
    gps_l1_lock_time_indicator: int
    gps_integer_l1_pseudorange_modulus_ambiguity: int
    gps_l1_cnr: int
    gps_l2_code_indicator: int
    gps_l2_l1_pseudorange_difference: int
    gps_l2_phaserange_minus_pseudorange: int
    gps_l2_lock_time_indicator: int
    gps_l2_cnr: int

    LAYOUT: ClassVar[tuple] = _L1 + _L1_EXTENDED + _L2 + (Uint("gps_l2_cnr", 8),)


def _observation_layout(satellite_cls: type) -> tuple:
    return (
        Record("header", RtcmHeader),
        Repeat("satellites", satellite_cls, count_field("header.num_gps_satellite_signals_processed")),
        Padding(),
    )


@dataclass(frozen=True)
class Rtcm1001:
    header: RtcmHeader
    satellites: Tuple[Rtcm1001Satellite, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _observation_layout(Rtcm1001Satellite)


@dataclass(frozen=True)
class Rtcm1002:
    header: RtcmHeader
    satellites: Tuple[Rtcm1002Satellite, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _observation_layout(Rtcm1002Satellite)


@dataclass(frozen=True)
class Rtcm1003:
    header: RtcmHeader
    satellites: Tuple[Rtcm1003Satellite, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _observation_layout(Rtcm1003Satellite)


@dataclass(frozen=True)
class Rtcm1004:
    header: RtcmHeader
    satellites: Tuple[Rtcm1004Satellite, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _observation_layout(Rtcm1004Satellite)
