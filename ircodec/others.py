"""Dish, Whynter and the Shuzu example protocol."""
from __future__ import annotations

from typing import Optional

from .pulse import (
    Flags,
    IRData,
    IRSender,
    Protocol,
    ProtocolConstants,
    RawFrame,
    check_header,
    decode_pulse_distance_width_data,
    repeat_gap_within,
)

DISH_BITS = 16
DISH_HEADER_MARK = 400
DISH_HEADER_SPACE = 6100
DISH_BIT_MARK = 400
DISH_ONE_SPACE = 1700
DISH_ZERO_SPACE = 2800
DISH_REPEATS = 4

DISH_CONSTANTS = ProtocolConstants(
    Protocol.UNKNOWN, 56, DISH_HEADER_MARK, DISH_HEADER_SPACE,
    DISH_BIT_MARK, DISH_ONE_SPACE, DISH_BIT_MARK, DISH_ZERO_SPACE, True, 40, None,
)

WHYNTER_BITS = 32
WHYNTER_HEADER_MARK = 2850
WHYNTER_HEADER_SPACE = 2850
WHYNTER_BIT_MARK = 750
WHYNTER_ONE_SPACE = 2150
WHYNTER_ZERO_SPACE = 750

WHYNTER_CONSTANTS = ProtocolConstants(
    Protocol.WHYNTER, 38, WHYNTER_HEADER_MARK, WHYNTER_HEADER_SPACE,
    WHYNTER_BIT_MARK, WHYNTER_ONE_SPACE, WHYNTER_BIT_MARK, WHYNTER_ZERO_SPACE, True, 110, None,
)

SHUZU_ADDRESS_BITS = 16
SHUZU_COMMAND_BITS = 8
SHUZU_BITS = SHUZU_ADDRESS_BITS + SHUZU_COMMAND_BITS
SHUZU_UNIT = 560
SHUZU_HEADER_MARK = 16 * SHUZU_UNIT
SHUZU_HEADER_SPACE = 8 * SHUZU_UNIT
SHUZU_BIT_MARK = SHUZU_UNIT
SHUZU_ONE_SPACE = 3 * SHUZU_UNIT
SHUZU_ZERO_SPACE = SHUZU_UNIT
SHUZU_REPEAT_PERIOD = 110_000
SHUZU_REPEAT_SPACE = 45_000

SHUZU_CONSTANTS = ProtocolConstants(
    Protocol.BOSEWAVE, 38, SHUZU_HEADER_MARK, SHUZU_HEADER_SPACE,
    SHUZU_BIT_MARK, SHUZU_ONE_SPACE, SHUZU_BIT_MARK, SHUZU_ZERO_SPACE, False,
    SHUZU_REPEAT_PERIOD // 1000, None,
)


def send_dish(sender: IRSender, data: int) -> None:
    """Send 16 bits of Dish data, always with four repeats."""
    sender.send_pulse_distance_width(DISH_CONSTANTS, data, DISH_BITS, DISH_REPEATS)


def send_whynter(sender: IRSender, data: int, repeats: int) -> None:
    """Send 32 bits of Whynter data, MSB first."""
    sender.send_pulse_distance_width(WHYNTER_CONSTANTS, data, WHYNTER_BITS, repeats)


def decode_whynter(frame: RawFrame) -> Optional[IRData]:
    """Decode a Whynter frame, or return None if the frame is not one."""
    if len(frame) != 2 * WHYNTER_BITS + 4:
        return None
    if not check_header(frame, WHYNTER_CONSTANTS):
        return None
    raw = decode_pulse_distance_width_data(frame, WHYNTER_CONSTANTS, WHYNTER_BITS)
    if raw is None:
        return None
    return IRData(
        protocol=Protocol.WHYNTER,
        decoded_raw_data=raw,
        number_of_bits=WHYNTER_BITS,
        flags=Flags.IS_MSB_FIRST,
    )


def send_shuzu(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a Shuzu frame; the data word is the command repeated in both bytes."""
    command &= 0xFF
    sender.send_pulse_distance_width(SHUZU_CONSTANTS, command << 8 | command, SHUZU_BITS, repeats)


def decode_shuzu(frame: RawFrame) -> Optional[IRData]:
    """Decode a Shuzu frame, or return None if the frame is not one."""
    if len(frame) != 2 * SHUZU_BITS + 4:
        return None
    if not check_header(frame, SHUZU_CONSTANTS):
        return None
    raw = decode_pulse_distance_width_data(frame, SHUZU_CONSTANTS, SHUZU_BITS)
    if raw is None:
        return None
    data = IRData(
        protocol=Protocol.BOSEWAVE,
        command=raw >> SHUZU_ADDRESS_BITS,
        address=raw & 0xFFFF,
        decoded_raw_data=raw,
        number_of_bits=SHUZU_BITS,
    )
    if repeat_gap_within(frame, SHUZU_REPEAT_SPACE):
        data.flags |= Flags.IS_REPEAT
    return data