"""Timing primitives shared by the infrared protocol encoders and decoders.

Durations are microseconds throughout. A received frame starts with the gap
(space) before it, followed by alternating marks and spaces, so odd indices
hold marks and even indices (other than the gap) hold spaces.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Optional

TOLERANCE_PERCENT = 25
MARK_EXCESS_MICROS = 20
MICROS_IN_ONE_MILLI = 1000
DEFAULT_INITIAL_GAP = 500_000

MARK = 1
SPACE = 0


class Protocol(enum.Enum):
    """Protocols known to the decoders."""

    UNKNOWN = enum.auto()
    NEC = enum.auto()
    NEC2 = enum.auto()
    ONKYO = enum.auto()
    APPLE = enum.auto()
    RC5 = enum.auto()
    RC6 = enum.auto()
    RC6A = enum.auto()
    SAMSUNG = enum.auto()
    SAMSUNGLG = enum.auto()
    SAMSUNG48 = enum.auto()
    SONY = enum.auto()
    WHYNTER = enum.auto()
    BOSEWAVE = enum.auto()


class Flags(enum.IntFlag):
    """Flags describing a decoded frame."""

    EMPTY = 0x00
    IS_LSB_FIRST = 0x00
    IS_REPEAT = 0x01
    IS_AUTO_REPEAT = 0x02
    PARITY_FAILED = 0x04
    TOGGLE_BIT = 0x08
    EXTRA_INFO = 0x10
    IS_PROTOCOL_WITH_DIFFERENT_REPEAT = 0x20
    IS_MSB_FIRST = 0x80


@dataclass(frozen=True)
class ProtocolConstants:
    """Timing description of a pulse distance / pulse width protocol."""

    protocol: Protocol
    khz: int
    header_mark: int
    header_space: int
    one_mark: int
    one_space: int
    zero_mark: int
    zero_space: int
    msb_first: bool
    repeat_period_ms: int
    special_repeat: Optional[Callable[["IRSender"], None]] = None


@dataclass
class IRData:
    """Result of a successful decode."""

    protocol: Protocol = Protocol.UNKNOWN
    address: int = 0
    command: int = 0
    extra: int = 0
    decoded_raw_data: int = 0
    number_of_bits: int = 0
    flags: Flags = Flags.EMPTY


@dataclass(frozen=True)
class RawFrame:
    """A received frame: the leading gap followed by alternating marks and spaces."""

    timings: tuple

    def __post_init__(self) -> None:
        timings = tuple(self.timings)
        if not timings:
            raise ValueError("a frame needs at least its leading gap")
        for duration in timings:
            if not isinstance(duration, int) or duration < 0:
                raise ValueError(f"invalid duration {duration!r}")
        object.__setattr__(self, "timings", timings)

    def __len__(self) -> int:
        return len(self.timings)

    def __getitem__(self, index):
        return self.timings[index]

    @property
    def gap(self) -> int:
        return self.timings[0]


def _within(measured: int, expected: int) -> bool:
    low = expected * (100 - TOLERANCE_PERCENT) // 100
    high = expected * (100 + TOLERANCE_PERCENT) // 100
    return low <= measured <= high


def match_mark(measured: int, expected: int) -> bool:
    """Whether a measured mark matches the expected duration."""
    return _within(measured, expected + MARK_EXCESS_MICROS)


def match_space(measured: int, expected: int) -> bool:
    """Whether a measured space matches the expected duration."""
    return _within(measured, expected - MARK_EXCESS_MICROS)


def check_header(frame: RawFrame, constants: ProtocolConstants) -> bool:
    """Whether the frame starts with the header mark and space of the protocol."""
    return (
        len(frame) >= 3
        and match_mark(frame[1], constants.header_mark)
        and match_space(frame[2], constants.header_space)
    )


def _bit_matches(mark: int, space: Optional[int], expected_mark: int, expected_space: int) -> bool:
    if not match_mark(mark, expected_mark):
        return False
    return space is None or match_space(space, expected_space)


def decode_pulse_distance_width_data(
    frame: RawFrame, constants: ProtocolConstants, bits: int, start_offset: int = 3
) -> Optional[int]:
    """Decode ``bits`` data bits starting at ``start_offset``; None if they do not match."""
    value = 0
    for bit in range(bits):
        index = start_offset + 2 * bit
        if index >= len(frame):
            return None
        mark = frame[index]
        space = frame[index + 1] if index + 1 < len(frame) else None
        if space is None and constants.one_space != constants.zero_space:
            return None
        if _bit_matches(mark, space, constants.one_mark, constants.one_space):
            level = 1
        elif _bit_matches(mark, space, constants.zero_mark, constants.zero_space):
            level = 0
        else:
            return None
        if constants.msb_first:
            value = (value << 1) | level
        else:
            value |= level << bit
    return value


def repeat_gap_within(frame: RawFrame, max_gap: int) -> bool:
    """Whether the gap before the frame is short enough to mark it as a repeat."""
    return frame.gap < max_gap


@dataclass
class ReceiveHistory:
    """What was decoded last, used to fill in special repeat frames."""

    address: int = 0
    command: int = 0
    protocol: Protocol = Protocol.UNKNOWN

    def remember(self, data: IRData) -> None:
        self.address = data.address
        self.command = data.command
        self.protocol = data.protocol


class IRSender:
    """Records the marks and spaces a transmitter would emit."""

    def __init__(self, initial_gap: int = DEFAULT_INITIAL_GAP) -> None:
        self.initial_gap = initial_gap
        self.khz: Optional[int] = None
        self.timings: list = []
        self._last_toggle = 1

    def enable_ir_out(self, khz: int) -> None:
        self.khz = khz

    def _emit(self, level: int, duration: int) -> None:
        if duration < 0:
            raise ValueError(f"negative duration {duration}")
        if duration == 0:
            return
        if not self.timings:
            if level == MARK:
                self.timings.append(duration)
            return
        last_level = MARK if (len(self.timings) - 1) % 2 == 0 else SPACE
        if last_level == level:
            self.timings[-1] += duration
        else:
            self.timings.append(duration)

    def mark(self, duration: int) -> None:
        self._emit(MARK, duration)

    def space(self, duration: int) -> None:
        self._emit(SPACE, duration)

    def delay(self, milliseconds: int) -> None:
        self.space(milliseconds * MICROS_IN_ONE_MILLI)

    def _elapsed(self) -> int:
        return sum(self.timings)

    def send_pulse_distance_width_data(
        self, one_mark, one_space, zero_mark, zero_space, data, bits, msb_first
    ) -> None:
        """Send data bits, followed by a stop mark for pulse distance codings."""
        positions = range(bits - 1, -1, -1) if msb_first else range(bits)
        for position in positions:
            if (data >> position) & 1:
                self.mark(one_mark)
                self.space(one_space)
            else:
                self.mark(zero_mark)
                self.space(zero_space)
        if one_space != zero_space:
            self.mark(zero_mark)

    def send_pulse_distance_width(self, constants: ProtocolConstants, data: int, bits: int, repeats: int) -> None:
        """Send a frame and its repeats in the raster of the protocol's repeat period.

        With negative ``repeats`` only the special repeat frame is sent, or
        nothing if the protocol has none.
        """
        special = constants.special_repeat
        if repeats < 0:
            if special is not None:
                special(self)
            return
        for number in range(repeats + 1):
            start = self._elapsed()
            if number > 0 and special is not None:
                special(self)
            else:
                self.enable_ir_out(constants.khz)
                self.mark(constants.header_mark)
                self.space(constants.header_space)
                self.send_pulse_distance_width_data(
                    constants.one_mark,
                    constants.one_space,
                    constants.zero_mark,
                    constants.zero_space,
                    data,
                    bits,
                    constants.msb_first,
                )
            if number < repeats:
                remaining = constants.repeat_period_ms * MICROS_IN_ONE_MILLI - (self._elapsed() - start)
                if remaining > 0:
                    self.space(remaining)

    def send_biphase_data(self, unit: int, data: int, bits: int) -> None:
        """Send a start bit and then data MSB first; 1 is space-mark, 0 is mark-space."""
        self.space(unit)
        self.mark(unit)
        for position in range(bits - 1, -1, -1):
            if (data >> position) & 1:
                self.space(unit)
                self.mark(unit)
            else:
                self.mark(unit)
                self.space(unit)

    def next_toggle(self) -> bool:
        """Advance the shared toggle state; True when the toggle bit is to be set."""
        if self._last_toggle == 0:
            self._last_toggle = 1
            return True
        self._last_toggle = 0
        return False

    def frame(self) -> RawFrame:
        """Everything sent so far, as a receiver would record it."""
        if not self.timings:
            raise ValueError("nothing has been sent")
        durations = self.timings if len(self.timings) % 2 == 1 else self.timings[:-1]
        return RawFrame((self.initial_gap, *durations))


class BiphaseReader:
    """Reads a Manchester coded frame one half-bit level at a time."""

    def __init__(self, frame: RawFrame, start_offset: int, unit: int) -> None:
        self.frame = frame
        self.offset = start_offset
        self.unit = unit
        self._used = 0

    def next_level(self) -> Optional[int]:
        """MARK or SPACE for the next unit interval, None if a duration fits no multiple."""
        if self.exhausted():
            return SPACE
        level = MARK if self.offset % 2 == 1 else SPACE
        duration = self.frame[self.offset]
        match = match_mark if level == MARK else match_space
        for intervals in (1, 2, 3):
            if match(duration, intervals * self.unit):
                break
        else:
            return None
        self._used += 1
        if self._used >= intervals:
            self._used = 0
            self.offset += 1
        return level

    def exhausted(self) -> bool:
        return self.offset >= len(self.frame)