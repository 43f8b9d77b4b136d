# src/rtcm3_stream/messages/msm.py
"""
Multiple Signal Message, full resolution (MSM7) for GPS (1077), GLONASS (1087)
and Galileo (1097).

Repetition counts are all derived:
  cell_mask bits = popcount(gnss_satellite_mask) * popcount(gnss_signal_mask)
  satellites     = popcount(gnss_satellite_mask)
  signals        = number of set bits in cell_mask
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Tuple

from rtcm3_stream.protocol.bitfield import popcount

from .layout import Bits, Flag, Int, Padding, Record, Repeat, Uint, count_product, count_set_bits

MSM7_MESSAGE_NUMBERS = (1077, 1087, 1097)

SATELLITE_MASK_BITS = 64
SIGNAL_MASK_BITS = 32


def mask_ids(mask: int, width: int) -> List[int]:
    """1-based ids of the set bits of a mask, MSB (id 1) first."""
    return [i + 1 for i in range(width) if mask & (1 << (width - 1 - i))]


@dataclass(frozen=True)
class MsmHeader:
    message_number: int
    reference_station_id: int
    gnss_epoch_time: int
    multiple_message_bit: bool
    iods_issue_of_data_station: int
    reserved: int
    clock_steering_indicator: int
    external_clock_indicator: int
    gnss_divergence_free_smoothing_indicator: bool
    gnss_smoothing_interval: int
    gnss_satellite_mask: int
    gnss_signal_mask: int
    cell_mask: Tuple[bool, ...]

    LAYOUT: ClassVar[tuple] = (
        Uint("message_number", 12),
        Uint("reference_station_id", 12),
        Uint("gnss_epoch_time", 30),
        Flag("multiple_message_bit"),
        Uint("iods_issue_of_data_station", 3),
        Uint("reserved", 7),
        Uint("clock_steering_indicator", 2),
        Uint("external_clock_indicator", 2),
        Flag("gnss_divergence_free_smoothing_indicator"),
        Uint("gnss_smoothing_interval", 3),
        Uint("gnss_satellite_mask", SATELLITE_MASK_BITS),
        Uint("gnss_signal_mask", SIGNAL_MASK_BITS),
        Bits("cell_mask", count_product(count_set_bits("gnss_satellite_mask"),
                                        count_set_bits("gnss_signal_mask"))),
    )

    @property
    def num_satellites(self) -> int:
        return popcount(self.gnss_satellite_mask)

    @property
    def num_signals(self) -> int:
        return popcount(self.gnss_signal_mask)

    @property
    def num_cells(self) -> int:
        return sum(1 for c in self.cell_mask if c)

    def satellite_ids(self) -> List[int]:
        return mask_ids(self.gnss_satellite_mask, SATELLITE_MASK_BITS)

    def signal_ids(self) -> List[int]:
        return mask_ids(self.gnss_signal_mask, SIGNAL_MASK_BITS)

    def cells(self) -> List[Tuple[int, int]]:
        """(satellite_id, signal_id) for each set cell, in signal-record order."""
        sats = self.satellite_ids()
        sigs = self.signal_ids()
        out = []
        for k, present in enumerate(self.cell_mask):
            if present:
                out.append((sats[k // len(sigs)], sigs[k % len(sigs)]))
        return out


@dataclass(frozen=True)
class MSM7Satellite:
    rough_range: int
    extended_satellite_info: int
    rough_range_modulo: int
    rough_phase_range_rate: int

    LAYOUT: ClassVar[tuple] = (
        Uint("rough_range", 8),
        Uint("extended_satellite_info", 4),
        Uint("rough_range_modulo", 10),
        Int("rough_phase_range_rate", 14),
    )


@dataclass(frozen=True)
class MSM7Signal:
    fine_pseudorange: int
    fine_phase_range: int
    phaserange_lock_indicator: int
    halfcycle_ambiguity_indicator: bool
    cnr: int
    fine_phase_range_rate: int

    LAYOUT: ClassVar[tuple] = (
        Int("fine_pseudorange", 20),
        Int("fine_phase_range", 24),
        Uint("phaserange_lock_indicator", 10),
        Flag("halfcycle_ambiguity_indicator"),
        Uint("cnr", 10),
        Int("fine_phase_range_rate", 15),
    )


@dataclass(frozen=True)
class RtcmMSM7:
    header: MsmHeader
    satellites: Tuple[MSM7Satellite, ...]
    signals: Tuple[MSM7Signal, ...]
    padding: Tuple[bool, ...] = field(default=(), compare=False)

    LAYOUT: ClassVar[tuple] = (
        Record("header", MsmHeader),
        Repeat("satellites", MSM7Satellite, count_set_bits("header.gnss_satellite_mask")),
        Repeat("signals", MSM7Signal, count_set_bits("header.cell_mask")),
        Padding(),
    )
