"""Sony SIRCS remote protocol with 12, 15 or 20 bit frames."""
from __future__ import annotations

from typing import Optional

from .pulse import (
    MICROS_IN_ONE_MILLI,
    Flags,
    IRData,
    IRSender,
    Protocol,
    ProtocolConstants,
    RawFrame,
    check_header,
    decode_pulse_distance_width_data,
    match_mark,
    match_space,
    repeat_gap_within,
)

SONY_KHZ = 40

SONY_ADDRESS_BITS = 5
SONY_COMMAND_BITS = 7
SONY_EXTRA_BITS = 8
SONY_BITS_MIN = SONY_COMMAND_BITS + SONY_ADDRESS_BITS
SONY_BITS_15 = SONY_COMMAND_BITS + SONY_ADDRESS_BITS + 3
SONY_BITS_MAX = SONY_COMMAND_BITS + SONY_ADDRESS_BITS + SONY_EXTRA_BITS

SIRCS_12_PROTOCOL = SONY_BITS_MIN
SIRCS_15_PROTOCOL = SONY_BITS_15
SIRCS_20_PROTOCOL = SONY_BITS_MAX

SONY_UNIT = 600
SONY_HEADER_MARK = 4 * SONY_UNIT
SONY_ONE_MARK = 2 * SONY_UNIT
SONY_ZERO_MARK = SONY_UNIT
SONY_SPACE = SONY_UNIT

SONY_AVERAGE_DURATION_MIN = 21_000
SONY_AVERAGE_DURATION_MAX = 33_000
SONY_REPEAT_PERIOD = 45_000
SONY_MAXIMUM_REPEAT_DISTANCE = SONY_REPEAT_PERIOD - SONY_AVERAGE_DURATION_MIN

# Gaps shorter than this are taken as a fast repeat by the legacy decoder.
SONY_DOUBLE_SPACE_USECS = 500
LEGACY_REPEAT_VALUE = 0xFFFFFFFF

# Gap, header mark and space, then a mark and space per bit without the last space.
_VALID_LENGTHS = tuple(2 * bits + 2 for bits in (SONY_BITS_MIN, SONY_BITS_MAX, SONY_BITS_15))

SONY_CONSTANTS = ProtocolConstants(
    Protocol.SONY, SONY_KHZ, SONY_HEADER_MARK, SONY_SPACE, SONY_ONE_MARK,
    SONY_SPACE, SONY_ZERO_MARK, SONY_SPACE, False,
    SONY_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, None,
)


def send_sony(
    sender: IRSender, address: int, command: int, repeats: int = 0, bits: int = SIRCS_12_PROTOCOL
) -> None:
    """Send 7 command bits and then the address bits, LSB first.

    ``bits`` is meant to be 12, 15 or 20 and is not checked; it decides how
    many address bits (5, 8 or 13) go out.
    """
    data = (address & 0xFFFF) << SONY_COMMAND_BITS | (command & 0x7F)
    sender.send_pulse_distance_width(SONY_CONSTANTS, data, bits, repeats)


def decode_sony(frame: RawFrame) -> Optional[IRData]:
    """Decode a 12, 15 or 20 bit Sony frame, or return None if the frame is not one."""
    if not check_header(frame, SONY_CONSTANTS):
        return None
    if len(frame) not in _VALID_LENGTHS:
        return None
    bits = (len(frame) - 1) // 2
    raw = decode_pulse_distance_width_data(frame, SONY_CONSTANTS, bits, 3)
    if raw is None:
        return None
    data = IRData(
        protocol=Protocol.SONY,
        command=raw & 0x7F,
        address=raw >> SONY_COMMAND_BITS,
        decoded_raw_data=raw,
        number_of_bits=bits,
        flags=Flags.IS_LSB_FIRST,
    )
    if repeat_gap_within(frame, SONY_MAXIMUM_REPEAT_DISTANCE):
        data.flags |= Flags.IS_REPEAT
    return data


def decode_sony_msb(frame: RawFrame) -> Optional[IRData]:
    """Decode a Sony frame MSB first, as older code expects, or return None.

    A frame following very shortly after the previous one yields the value
    0xFFFFFFFF with zero bits.
    """
    if len(frame) < 2 * SONY_BITS_MIN + 2:
        return None
    if frame.gap < SONY_DOUBLE_SPACE_USECS:
        return IRData(
            protocol=Protocol.SONY,
            decoded_raw_data=LEGACY_REPEAT_VALUE,
            number_of_bits=0,
            flags=Flags.IS_REPEAT,
        )
    if not match_mark(frame[1], SONY_HEADER_MARK):
        return None

    value = 0
    bits = 0
    for offset in range(2, len(frame) - 1, 2):
        if not match_space(frame[offset], SONY_SPACE):
            return None
        mark = frame[offset + 1]
        if match_mark(mark, SONY_ONE_MARK):
            value = (value << 1) | 1
        elif match_mark(mark, SONY_ZERO_MARK):
            value <<= 1
        else:
            return None
        bits += 1

    return IRData(
        protocol=Protocol.SONY,
        decoded_raw_data=value,
        number_of_bits=bits,
        flags=Flags.IS_MSB_FIRST,
    )


def send_sony_msb(sender: IRSender, data: int, bits: int = SONY_BITS_MIN) -> None:
    """Send old style MSB first Sony data after the header, without a stop bit."""
    sender.enable_ir_out(SONY_KHZ)
    sender.mark(SONY_HEADER_MARK)
    sender.space(SONY_SPACE)
    sender.send_pulse_distance_width_data(
        SONY_ONE_MARK, SONY_SPACE, SONY_ZERO_MARK, SONY_SPACE, data, bits, True
    )