"""NEC, NEC2, Onkyo and Apple remote protocols."""
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
    decode_pulse_distance_width_data,
    match_mark,
    match_space,
    repeat_gap_within,
)

NEC_KHZ = 38
NEC_ADDRESS_BITS = 16
NEC_COMMAND_BITS = 16
NEC_BITS = NEC_ADDRESS_BITS + NEC_COMMAND_BITS
NEC_UNIT = 560

NEC_HEADER_MARK = 16 * NEC_UNIT
NEC_HEADER_SPACE = 8 * NEC_UNIT
NEC_BIT_MARK = NEC_UNIT
NEC_ONE_SPACE = 3 * NEC_UNIT
NEC_ZERO_SPACE = NEC_UNIT
NEC_REPEAT_HEADER_SPACE = 4 * NEC_UNIT

NEC_AVERAGE_DURATION = 62_000
NEC_MINIMAL_DURATION = 49_900
NEC_REPEAT_DURATION = NEC_HEADER_MARK + NEC_REPEAT_HEADER_SPACE + NEC_BIT_MARK
NEC_REPEAT_PERIOD = 110_000
NEC_REPEAT_DISTANCE = NEC_REPEAT_PERIOD - NEC_AVERAGE_DURATION
NEC_MAXIMUM_REPEAT_DISTANCE = NEC_REPEAT_PERIOD - NEC_MINIMAL_DURATION + 10_000

APPLE_ADDRESS = 0x87EE

FULL_FRAME_LENGTH = 2 * NEC_BITS + 4
REPEAT_FRAME_LENGTH = 4
LEGACY_REPEAT_VALUE = 0xFFFFFFFF


def send_nec_repeat(sender: IRSender) -> None:
    """Send the special NEC repeat frame: header mark, short space, stop mark."""
    sender.enable_ir_out(NEC_KHZ)
    sender.mark(NEC_HEADER_MARK)
    sender.space(NEC_REPEAT_HEADER_SPACE)
    sender.mark(NEC_BIT_MARK)


NEC_CONSTANTS = ProtocolConstants(
    Protocol.NEC, NEC_KHZ, NEC_HEADER_MARK, NEC_HEADER_SPACE, NEC_BIT_MARK,
    NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, False,
    NEC_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, send_nec_repeat,
)

NEC2_CONSTANTS = ProtocolConstants(
    Protocol.NEC2, NEC_KHZ, NEC_HEADER_MARK, NEC_HEADER_SPACE, NEC_BIT_MARK,
    NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, False,
    NEC_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, None,
)

_NEC_MSB_CONSTANTS = ProtocolConstants(
    Protocol.NEC, NEC_KHZ, NEC_HEADER_MARK, NEC_HEADER_SPACE, NEC_BIT_MARK,
    NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, True,
    NEC_REPEAT_PERIOD // MICROS_IN_ONE_MILLI, None,
)


def _byte(value: int, index: int) -> int:
    return (value >> (8 * index)) & 0xFF


def compute_nec_raw_data(address: int, command: int) -> int:
    """Build the 32 bit LSB first NEC word from address and command.

    An address below 0x100 is sent as 8 bits followed by its inverse; a larger
    one is sent as 16 bits. The low byte of the command is sent followed by
    its inverse.
    """
    address &= 0xFFFF
    command &= 0xFFFF
    if address & 0xFF00 == 0:
        low_word = address | ((~address & 0xFF) << 8)
    else:
        low_word = address
    return low_word | (command & 0xFF) << 16 | (~command & 0xFF) << 24


def send_nec(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send an NEC frame followed by special repeat frames.

    With negative ``repeats`` only a special repeat frame is sent.
    """
    sender.send_pulse_distance_width(NEC_CONSTANTS, compute_nec_raw_data(address, command), NEC_BITS, repeats)


def send_onkyo(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send 16 independent address bits and 16 command bits with NEC timing."""
    raw = (command & 0xFFFF) << 16 | (address & 0xFFFF)
    sender.send_pulse_distance_width(NEC_CONSTANTS, raw, NEC_BITS, repeats)


def send_nec2(sender: IRSender, address: int, command: int, repeats: int) -> None:
    """Send an NEC frame and repeat the full frame; nothing for negative ``repeats``."""
    sender.send_pulse_distance_width(NEC2_CONSTANTS, compute_nec_raw_data(address, command), NEC_BITS, repeats)


def send_apple(sender: IRSender, device_id: int, command: int, repeats: int) -> None:
    """Send an NEC frame with the fixed Apple address, the command and the device id."""
    raw = APPLE_ADDRESS | (command & 0xFF) << 16 | (device_id & 0xFF) << 24
    sender.send_pulse_distance_width(NEC_CONSTANTS, raw, NEC_BITS, repeats)


def send_nec_raw(sender: IRSender, raw_data: int, repeats: int) -> None:
    """Send a ready-made 32 bit NEC word."""
    sender.send_pulse_distance_width(NEC_CONSTANTS, raw_data & 0xFFFFFFFF, NEC_BITS, repeats)


def decode_nec(frame: RawFrame, history: Optional[ReceiveHistory] = None) -> Optional[IRData]:
    """Decode NEC, NEC2, Onkyo and Apple frames, or return None.

    A special repeat frame takes address, command and protocol from
    ``history``; every successful decode is remembered in it.
    """
    if history is None:
        history = ReceiveHistory()
    length = len(frame)
    if length not in (FULL_FRAME_LENGTH, REPEAT_FRAME_LENGTH):
        return None
    if not match_mark(frame[1], NEC_HEADER_MARK):
        return None

    if length == REPEAT_FRAME_LENGTH:
        if match_space(frame[2], NEC_REPEAT_HEADER_SPACE) and match_mark(frame[3], NEC_BIT_MARK):
            data = IRData(
                protocol=history.protocol,
                address=history.address,
                command=history.command,
                flags=Flags.IS_REPEAT | Flags.IS_LSB_FIRST,
            )
            history.remember(data)
            return data
        return None

    if not match_space(frame[2], NEC_HEADER_SPACE):
        return None
    raw = decode_pulse_distance_width_data(frame, NEC_CONSTANTS, NEC_BITS)
    if raw is None:
        return None

    low_word = raw & 0xFFFF
    high_word = raw >> 16
    data = IRData(
        command=_byte(raw, 2),
        decoded_raw_data=raw,
        number_of_bits=NEC_BITS,
        flags=Flags.IS_LSB_FIRST,
    )
    if low_word == APPLE_ADDRESS:
        data.protocol = Protocol.APPLE
        data.address = _byte(raw, 3)
    else:
        if _byte(raw, 0) == (~_byte(raw, 1) & 0xFF):
            data.address = _byte(raw, 0)
        else:
            data.address = low_word
        if _byte(raw, 2) == (~_byte(raw, 3) & 0xFF):
            data.protocol = Protocol.NEC
        else:
            data.protocol = Protocol.ONKYO
            data.command = high_word

    if repeat_gap_within(frame, NEC_MAXIMUM_REPEAT_DISTANCE):
        data.protocol = Protocol.NEC2
        data.flags |= Flags.IS_REPEAT | Flags.IS_PROTOCOL_WITH_DIFFERENT_REPEAT
    history.remember(data)
    return data


def decode_nec_msb(frame: RawFrame) -> Optional[IRData]:
    """Decode a 32 bit NEC frame MSB first, as older code expects, or return None.

    A special repeat frame yields the value 0xFFFFFFFF with zero bits.
    """
    if len(frame) < 3 or not match_mark(frame[1], NEC_HEADER_MARK):
        return None
    if (
        len(frame) == REPEAT_FRAME_LENGTH
        and match_space(frame[2], NEC_REPEAT_HEADER_SPACE)
        and match_mark(frame[3], NEC_BIT_MARK)
    ):
        return IRData(
            protocol=Protocol.NEC,
            decoded_raw_data=LEGACY_REPEAT_VALUE,
            number_of_bits=0,
            flags=Flags.IS_REPEAT,
        )
    if len(frame) != FULL_FRAME_LENGTH:
        return None
    if not match_space(frame[2], NEC_HEADER_SPACE):
        return None
    raw = decode_pulse_distance_width_data(frame, _NEC_MSB_CONSTANTS, NEC_BITS)
    if raw is None:
        return None
    if not match_mark(frame[3 + 2 * NEC_BITS], NEC_BIT_MARK):
        return None
    return IRData(
        protocol=Protocol.NEC,
        decoded_raw_data=raw,
        number_of_bits=NEC_BITS,
        flags=Flags.IS_MSB_FIRST,
    )


def send_nec_msb(sender: IRSender, data: int, bits: int = NEC_BITS, repeat: bool = False) -> None:
    """Send old style MSB first NEC data; 0xFFFFFFFF or ``repeat`` sends a repeat frame."""
    sender.enable_ir_out(NEC_KHZ)
    if data == LEGACY_REPEAT_VALUE or repeat:
        send_nec_repeat(sender)
        return
    sender.mark(NEC_HEADER_MARK)
    sender.space(NEC_HEADER_SPACE)
    sender.send_pulse_distance_width_data(
        NEC_BIT_MARK, NEC_ONE_SPACE, NEC_BIT_MARK, NEC_ZERO_SPACE, data, bits, True
    )