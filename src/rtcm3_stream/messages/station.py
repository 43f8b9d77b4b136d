# src/rtcm3_stream/messages/station.py
"""
Stationary reference station antenna reference point (ARP), types 1005/1006.

ECEF coordinates are 38-bit two's complement in units of 0.1 mm.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Tuple

from .layout import Flag, Int, Padding, Uint

ECEF_UNIT_M = 0.0001
ANTENNA_HEIGHT_UNIT_M = 0.0001

_ARP = (
    Uint("message_number", 12),
    Uint("reference_station_id", 12),
    Uint("itrf_realization_year", 6),
    Flag("gps_indicator"),
    Flag("glonass_indicator"),
    Flag("galileo_indicator"),
    Flag("reference_station_indicator"),
    Int("antenna_reference_point_ecef_x", 38),
    Flag("single_receiver_oscillator_indicator"),
    Uint("reserved", 1),
    Int("antenna_reference_point_ecef_y", 38),
    Uint("quarter_cycle_indicator", 2),
    Int("antenna_reference_point_ecef_z", 38),
)


class _AntennaReferencePoint:
    def ecef_m(self) -> Tuple[float, float, float]:
        """ARP as metres; unit scaling only."""
        return (
            self.antenna_reference_point_ecef_x * ECEF_UNIT_M,
            self.antenna_reference_point_ecef_y * ECEF_UNIT_M,
            self.antenna_reference_point_ecef_z * ECEF_UNIT_M,
        )


@dataclass(frozen=True)
class Rtcm1005(_AntennaReferencePoint):
    message_number: int
    reference_station_id: int
    itrf_realization_year: int
    gps_indicator: bool
    glonass_indicator: bool
    galileo_indicator: bool
    reference_station_indicator: bool
    antenna_reference_point_ecef_x: int
    single_receiver_oscillator_indicator: bool
    reserved: int
    antenna_reference_point_ecef_y: int
    quarter_cycle_indicator: int
    antenna_reference_point_ecef_z: int
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _ARP + (Padding(),)


@dataclass(frozen=True)
class Rtcm1006(_AntennaReferencePoint):
    message_number: int
    reference_station_id: int
    itrf_realization_year: int
    gps_indicator: bool
    glonass_indicator: bool
    galileo_indicator: bool
    reference_station_indicator: bool
    antenna_reference_point_ecef_x: int
    single_receiver_oscillator_indicator: bool
    reserved: int
    antenna_reference_point_ecef_y: int
    quarter_cycle_indicator: int
    antenna_reference_point_ecef_z: int
    antenna_height: int
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = _ARP + (Uint("antenna_height", 16), Padding())

    def antenna_height_m(self) -> float:
        return self.antenna_height * ANTENNA_HEIGHT_UNIT_M
