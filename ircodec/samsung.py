"""Samsung, SamsungLG and Samsung48 remote protocols."""
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
    ReceiveHistory,
    check_header,
    decode_pulse_distance_width_data,
    match_mark,
    match_space,
    repeat_gap_within,
)

SAMSUNG_KHZ = 38

SAMSUNG_ADDRESS_BITS = 16
SAMSUNG_COMMAND16_BITS = 16
SAMSUNG_COMMAND32_BITS = 32
SAMSUNG_BITS = SAMSUNG_ADDRESS_BITS + SAMSUNG_COMMAND16_BITS
SAMSUNG48_BITS = SAMSUNG_ADDRESS_BITS + SAMSUNG_COMMAND32_BITS

SAMSUNG_UNIT = 560
SAMSUNG_HEADER_MARK = 8 * SAMSUNG_UNIT
SAMSUNG_HEADER_SPACE = 8 * SAMSUNG_UNIT
SAMSUNG_BIT_MARK = SAMSUNG_UNIT
SAMSUNG_ONE_SPACE = 3 * SAMSUNG_UNIT
SAMSUNG_ZERO_SPACE = SAMSUNG_UNIT

SAMSUNG_AVERAGE_DURATION = 55_000
SAMSUNG_REPEAT_DURATION = (
    SAMSUNG_HEADER_MARK + SAMSUNG_HEADER_SPACE + SAMSUNG_BIT_MARK + SAMSUNG_ZERO_SPACE + SAMSUNG_BIT_MARK
)
SAMSUNG_REPEAT_PERIOD = 110_000
SAMSUNG_MAXIMUM_REPEAT_DISTANCE = SAMSUNG_REPEAT_PERIOD + SAMSUNG_REPEAT_PERIOD // 4

LEGACY_REPEAT_SPACE = 2250
LEGACY_REPEAT_VALUE = 0xFFFFFFFF

FRAME32_LENGTH = 2 * SAMSUNG_BITS + 4
FRAME48_LENGTH = 2 * SAMSUNG48_BITS + 4
LG_REPEAT_FRAME_LENGTH = 6


def send_samsung_lg_repeat(sender: IRSender) -> None:
    """Send the special repeat frame used by SamsungLG remotes."""
    sender.enable_ir_out(SAMSUNG_KHZ)
    sender.mark(SAMSUNG_HEADER_MARK)
    sender.space(SAMSUNG_HEADER_SPACE)
    sender.mark(SAMSUNG_BIT_MARK)
    sender.space(SAMSUNG_ZERO_SPACE)
    sender.mark(SAMSUNG_BIT_MARK)


SAMSUNG_CONSTANTS = ProtocolConstants(
    Protocol.SAMSUNG, SAMSUNG_KHZ, SAMSUNG_HEADER_MARK, SAMSUNG_HEADER_SPACE,
    SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_BIT_MARK, SAMSUNG_ZERO_SPACE, False,
    SAMSUNG_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, None,
)

SAMSUNG_LG_CONSTANTS = ProtocolConstants(
    Protocol.SAMSUNGLG, SAMSUNG_KHZ, SAMSUNG_HEADER_MARK, SAMSUNG_HEADER_SPACE,
    SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_BIT_MARK, SAMSUNG_ZERO_SPACE, False,
    SAMSUNG_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, send_samsung_lg_repeat,
)

_SAMSUNG_MSB_CONSTANTS = ProtocolConstants(
    Protocol.SAMSUNG, SAMSUNG_KHZ, SAMSUNG_HEADER_MARK, SAMSUNG_HEADER_SPACE,
    SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_BIT_MARK, SAMSUNG_ZERO_SPACE, True,
    SAMSUNG_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, None,
)


def _byte(value: int, index: int) -> int:
    return (value >> (8 * index)) & 0xFF


def _with_inverse(value: int) -> int:
    """A byte followed by its bitwise inverse, as a 16 bit LSB first word."""
    value &= 0xFF
    return value | (~value & 0xFF) << 8


def send_samsung_lg(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a SamsungLG frame followed by special repeat frames.

    An 8 bit address is sent twice; the command byte is followed by its
    inverse. With negative ``repeats`` only a special repeat frame is sent.
    """
    if repeats < 0:
        send_samsung_lg_repeat(sender)
        return
    address &= 0xFFFF
    low_word = address | address << 8 if address < 0x100 else address
    raw = low_word | _with_inverse(command) << 16
    sender.send_pulse_distance_width(SAMSUNG_LG_CONSTANTS, raw, SAMSUNG_BITS, repeats)


def send_samsung(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a Samsung32 frame, repeating the full frame.

    An address below 0x100 is sent twice as 8 bits; a command below 0x100 is
    sent as 8 bits followed by its inverse, a larger one as 16 bits.
    """
    address &= 0xFFFF
    command &= 0xFFFF
    low_word = address | address << 8 if address < 0x100 else address
    high_word = _with_inverse(command) if command < 0x100 else command
    sender.send_pulse_distance_width(SAMSUNG_CONSTANTS, low_word | high_word << 16, SAMSUNG_BITS, repeats)


def send_samsung_16bit_address_8bit_command(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a full 16 bit address and an 8 bit command followed by its inverse."""
    raw = (address & 0xFFFF) | _with_inverse(command) << 16
    sender.send_pulse_distance_width(SAMSUNG_CONSTANTS, raw, SAMSUNG_BITS, repeats)


def send_samsung_16bit_address_and_command(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a full 16 bit address and a full 16 bit command."""
    raw = (address & 0xFFFF) | (command & 0xFFFF) << 16
    sender.send_pulse_distance_width(SAMSUNG_CONSTANTS, raw, SAMSUNG_BITS, repeats)


def send_samsung48(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send a Samsung48 frame.

    A command below 0x10000 is sent as its low byte and inverse followed by
    its high byte and inverse; a larger one is sent unchanged as 32 bits.
    """
    address &= 0xFFFF
    command &= 0xFFFFFFFF
    if command < 0x10000:
        raw = address | _with_inverse(command) << 16 | _with_inverse(command >> 8) << 32
    else:
        raw = (address | command << 16) & 0xFFFF_FFFF_FFFF
    sender.send_pulse_distance_width(SAMSUNG_CONSTANTS, raw, SAMSUNG48_BITS, repeats)


def decode_samsung(frame: RawFrame, history: Optional[ReceiveHistory] = None) -> Optional[IRData]:
    """Decode Samsung32, Samsung48 and SamsungLG repeat frames, or return None.

    A SamsungLG repeat frame takes address and command from ``history``;
    every successful decode is remembered in it.
    """
    if history is None:
        history = ReceiveHistory()
    length = len(frame)
    if length not in (FRAME32_LENGTH, FRAME48_LENGTH, LG_REPEAT_FRAME_LENGTH):
        return None
    if not check_header(frame, SAMSUNG_CONSTANTS):
        return None

    if length == LG_REPEAT_FRAME_LENGTH:
        data = IRData(
            protocol=Protocol.SAMSUNGLG,
            address=history.address,
            command=history.command,
            flags=Flags.IS_REPEAT | Flags.IS_PROTOCOL_WITH_DIFFERENT_REPEAT | Flags.IS_LSB_FIRST,
        )
        history.remember(data)
        return data

    raw = decode_pulse_distance_width_data(frame, SAMSUNG_CONSTANTS, SAMSUNG_BITS, 3)
    if raw is None:
        return None
    address = raw & 0xFFFF
    high_word = raw >> 16

    if length == FRAME48_LENGTH:
        upper = decode_pulse_distance_width_data(
            frame, SAMSUNG_CONSTANTS, SAMSUNG_COMMAND32_BITS - SAMSUNG_COMMAND16_BITS, 3 + 2 * SAMSUNG_BITS
        )
        if upper is None:
            return None
        flags = Flags.IS_LSB_FIRST
        low_ok = _byte(high_word, 0) == (~_byte(high_word, 1) & 0xFF)
        high_ok = _byte(upper, 0) == (~_byte(upper, 1) & 0xFF)
        if not low_ok and not high_ok:
            flags = Flags.PARITY_FAILED | Flags.IS_LSB_FIRST
        data = IRData(
            protocol=Protocol.SAMSUNG48,
            address=address,
            command=_byte(upper, 0) << 8 | _byte(high_word, 0),
            decoded_raw_data=upper << 32 | high_word << 16 | address,
            number_of_bits=SAMSUNG48_BITS,
            flags=flags,
        )
    else:
        command = high_word
        if _byte(raw, 2) == (~_byte(raw, 3) & 0xFF):
            command = _byte(raw, 2)
        if _byte(raw, 1) == _byte(raw, 0):
            address = _byte(raw, 0)
        else:
            command = high_word
        data = IRData(
            protocol=Protocol.SAMSUNG,
            address=address,
            command=command,
            decoded_raw_data=raw,
            number_of_bits=SAMSUNG_BITS,
            flags=Flags.IS_LSB_FIRST,
        )

    if repeat_gap_within(frame, SAMSUNG_MAXIMUM_REPEAT_DISTANCE):
        data.flags |= Flags.IS_REPEAT
    history.remember(data)
    return data


def decode_samsung_msb(frame: RawFrame) -> Optional[IRData]:
    """Decode a 32 bit Samsung frame MSB first, as older code expects, or return None.

    An NEC style repeat frame yields the value 0xFFFFFFFF with zero bits.
    """
    if len(frame) < 3 or not match_mark(frame[1], SAMSUNG_HEADER_MARK):
        return None
    if (
        len(frame) == 4
        and match_space(frame[2], LEGACY_REPEAT_SPACE)
        and match_mark(frame[3], SAMSUNG_BIT_MARK)
    ):
        return IRData(
            protocol=Protocol.SAMSUNG,
            decoded_raw_data=LEGACY_REPEAT_VALUE,
            number_of_bits=0,
            flags=Flags.IS_REPEAT,
        )
    if len(frame) < FRAME32_LENGTH:
        return None
    if not match_space(frame[2], SAMSUNG_HEADER_SPACE):
        return None
    raw = decode_pulse_distance_width_data(frame, _SAMSUNG_MSB_CONSTANTS, SAMSUNG_BITS, 3)
    if raw is None:
        return None
    return IRData(
        protocol=Protocol.SAMSUNG,
        decoded_raw_data=raw,
        number_of_bits=SAMSUNG_BITS,
        flags=Flags.IS_MSB_FIRST,
    )


def send_samsung_msb(sender: IRSender, data: int, bits: int = SAMSUNG_BITS) -> None:
    """Send old style MSB first Samsung data with header and stop bit."""
    sender.enable_ir_out(SAMSUNG_KHZ)
    sender.mark(SAMSUNG_HEADER_MARK)
    sender.space(SAMSUNG_HEADER_SPACE)
    sender.send_pulse_distance_width_data(
        SAMSUNG_BIT_MARK, SAMSUNG_ONE_SPACE, SAMSUNG_BIT_MARK, SAMSUNG_ZERO_SPACE, data, bits, True
    )