"""Philips RC5, RC5X, RC6 and RC6A remote protocols (Manchester coded)."""
from __future__ import annotations

import weakref
from typing import Optional

from .pulse import (
    MARK,
    MICROS_IN_ONE_MILLI,
    SPACE,
    BiphaseReader,
    Flags,
    IRData,
    IRSender,
    Protocol,
    RawFrame,
    match_mark,
    match_space,
    repeat_gap_within,
)

RC5_RC6_KHZ = 36

RC5_ADDRESS_BITS = 5
RC5_COMMAND_BITS = 6
RC5_COMMAND_FIELD_BIT = 1
RC5_TOGGLE_BIT = 1
RC5_BITS = RC5_COMMAND_FIELD_BIT + RC5_TOGGLE_BIT + RC5_ADDRESS_BITS + RC5_COMMAND_BITS
RC5_UNIT = 889

RC5_DURATION = 15 * RC5_UNIT
RC5_REPEAT_PERIOD = 128 * RC5_UNIT
RC5_REPEAT_DISTANCE = RC5_REPEAT_PERIOD - RC5_DURATION
RC5_MAXIMUM_REPEAT_DISTANCE = RC5_REPEAT_DISTANCE + RC5_REPEAT_DISTANCE // 4

_RC5_FIELD_MASK = 1 << (RC5_TOGGLE_BIT + RC5_ADDRESS_BITS + RC5_COMMAND_BITS)
_RC5_TOGGLE_MASK = 1 << (RC5_ADDRESS_BITS + RC5_COMMAND_BITS)

RC6_LEADING_BIT = 1
RC6_MODE_BITS = 3
RC6_TOGGLE_BIT = 1
RC6_TOGGLE_BIT_INDEX = RC6_MODE_BITS
RC6_ADDRESS_BITS = 8
RC6_COMMAND_BITS = 8
RC6_CUSTOMER_BITS = 14

RC6_BITS = RC6_LEADING_BIT + RC6_MODE_BITS + RC6_TOGGLE_BIT + RC6_ADDRESS_BITS + RC6_COMMAND_BITS
RC6A_BITS = (
    RC6_LEADING_BIT + RC6_MODE_BITS + RC6_TOGGLE_BIT + 1
    + RC6_CUSTOMER_BITS + RC6_ADDRESS_BITS + RC6_COMMAND_BITS
)

RC6_UNIT = 444
RC6_HEADER_MARK = 6 * RC6_UNIT
RC6_HEADER_SPACE = 2 * RC6_UNIT
RC6_TRAILING_SPACE = 6 * RC6_UNIT

RC6_REPEAT_DISTANCE = 107_000
RC6_MAXIMUM_REPEAT_DISTANCE = RC6_REPEAT_DISTANCE + RC6_REPEAT_DISTANCE // 4

_RC6A_MODE_BITS = 0x06_0000_0000
_RC6A_CONSTANT_CUSTOMER_BIT = 0x400

# Toggle state of the legacy extended RC5 sender, kept separately per sender.
_EXT_TOGGLE: "weakref.WeakKeyDictionary[IRSender, int]" = weakref.WeakKeyDictionary()


def _number_of_frames(repeats: int) -> int:
    return max(repeats + 1, 0)


def _send_biphase_bit(sender: IRSender, unit: int, one_is_space_first: bool, bit: int) -> None:
    if bool(bit) == one_is_space_first:
        sender.space(unit)
        sender.mark(unit)
    else:
        sender.mark(unit)
        sender.space(unit)


def send_rc5(sender: IRSender, address: int, command: int, repeats: int = 0, auto_toggle: bool = True) -> None:
    """Send an RC5 frame; a command of 0x40 or more switches to RC5X.

    With ``auto_toggle`` the toggle bit follows the sender's shared toggle state.
    Frames are repeated in a fixed raster without a delay after the last one.
    """
    sender.enable_ir_out(RC5_RC6_KHZ)
    command &= 0xFF
    data = (address & 0x1F) << RC5_COMMAND_BITS
    if command < 0x40:
        data |= _RC5_FIELD_MASK
    else:
        command &= 0x3F
    data |= command
    if auto_toggle and sender.next_toggle():
        data |= _RC5_TOGGLE_MASK

    frames = _number_of_frames(repeats)
    for number in range(frames):
        sender.send_biphase_data(RC5_UNIT, data, RC5_BITS)
        if number < frames - 1:
            sender.delay(RC5_REPEAT_DISTANCE // MICROS_IN_ONE_MILLI)


def decode_rc5(frame: RawFrame) -> Optional[IRData]:
    """Decode an RC5 or RC5X frame, or return None if the frame is not one."""
    reader = BiphaseReader(frame, 1, RC5_UNIT)
    if reader.next_level() != MARK:
        return None

    raw = 0
    bits = 0
    while not reader.exhausted():
        start = reader.next_level()
        end = reader.next_level()
        if start == SPACE and end == MARK:
            bit = 1
        elif start == MARK and end == SPACE:
            bit = 0
        else:
            return None
        raw = ((raw << 1) | bit) & 0xFFFFFFFF
        bits += 1

    command = raw & 0x3F
    if raw & _RC5_FIELD_MASK == 0:
        command += 0x40
    flags = Flags.IS_MSB_FIRST
    if raw & _RC5_TOGGLE_MASK:
        flags |= Flags.TOGGLE_BIT
    data = IRData(
        protocol=Protocol.RC5,
        address=(raw >> RC5_COMMAND_BITS) & 0x1F,
        command=command,
        decoded_raw_data=raw,
        number_of_bits=bits,
        flags=flags,
    )
    if repeat_gap_within(frame, RC5_MAXIMUM_REPEAT_DISTANCE):
        data.flags |= Flags.IS_REPEAT
    return data


def send_rc6_raw(sender: IRSender, raw_data: int, bits: int) -> None:
    """Send header, leading bit and ``bits`` data bits MSB first; the fourth data bit is double wide."""
    sender.enable_ir_out(RC5_RC6_KHZ)
    sender.mark(RC6_HEADER_MARK)
    sender.space(RC6_HEADER_SPACE)
    sender.mark(RC6_UNIT)
    sender.space(RC6_UNIT)
    for index, position in enumerate(range(bits - 1, -1, -1), start=1):
        width = 2 * RC6_UNIT if index == RC6_TOGGLE_BIT_INDEX + 1 else RC6_UNIT
        _send_biphase_bit(sender, width, False, (raw_data >> position) & 1)


def send_rc6(sender: IRSender, address: int, command: int, repeats: int = 0, auto_toggle: bool = True) -> None:
    """Send an RC6 frame with mode 0; the trailing space is not waited for."""
    raw = (command & 0xFF) | (address & 0xFF) << 8
    if auto_toggle and sender.next_toggle():
        raw |= 1 << 16

    frames = _number_of_frames(repeats)
    for number in range(frames):
        send_rc6_raw(sender, raw, RC6_BITS - 1)
        if number < frames - 1:
            sender.delay(RC6_REPEAT_DISTANCE // MICROS_IN_ONE_MILLI)


def send_rc6a(
    sender: IRSender,
    address: int,
    command: int,
    repeats: int = 0,
    customer: int = 0,
    auto_toggle: bool = True,
) -> None:
    """Send an RC6A frame with mode 6 and a customer code."""
    high_word = (customer | _RC6A_CONSTANT_CUSTOMER_BIT) & 0xFFFF
    raw32 = (command & 0xFF) | (address & 0xFF) << 8 | high_word << 16
    if auto_toggle and sender.next_toggle():
        raw32 |= 0x8000_0000
    raw = raw32 + _RC6A_MODE_BITS

    frames = _number_of_frames(repeats)
    for number in range(frames):
        send_rc6_raw(sender, raw, RC6A_BITS - 1)
        if number < frames - 1:
            sender.delay(RC6_REPEAT_DISTANCE // MICROS_IN_ONE_MILLI)


def decode_rc6(frame: RawFrame) -> Optional[IRData]:
    """Decode an RC6 or RC6A frame, or return None if the frame is not one."""
    if len(frame) < 3:
        return None
    if not match_mark(frame[1], RC6_HEADER_MARK) or not match_space(frame[2], RC6_HEADER_SPACE):
        return None

    reader = BiphaseReader(frame, 3, RC6_UNIT)
    if reader.next_level() != MARK:
        return None
    if reader.next_level() != SPACE:
        return None

    raw = 0
    bits = 0
    while not reader.exhausted():
        is_toggle = bits == RC6_TOGGLE_BIT_INDEX
        start = reader.next_level()
        if is_toggle and start != reader.next_level():
            return None
        end = reader.next_level()
        if is_toggle and end != reader.next_level():
            return None
        if start == MARK and end == SPACE:
            bit = 1
        elif start == SPACE and end == MARK:
            bit = 0
        else:
            return None
        raw = ((raw << 1) | bit) & 0xFFFFFFFF
        bits += 1

    data = IRData(
        command=raw & 0xFF,
        address=(raw >> 8) & 0xFF,
        decoded_raw_data=raw,
        number_of_bits=bits,
    )
    if bits < 35:
        data.flags = Flags.IS_MSB_FIRST
        if (raw >> 16) & 1:
            data.flags |= Flags.TOGGLE_BIT
        if bits > 20:
            data.flags |= Flags.EXTRA_INFO
        data.protocol = Protocol.RC6
    else:
        data.flags = Flags.IS_MSB_FIRST | Flags.EXTRA_INFO
        data.extra = (raw >> 16) & 0x3FFF
        if raw & 0x8000_0000:
            data.flags |= Flags.TOGGLE_BIT
        data.protocol = Protocol.RC6A

    if repeat_gap_within(frame, RC6_MAXIMUM_REPEAT_DISTANCE):
        data.flags |= Flags.IS_REPEAT
    return data


def send_rc5_raw(sender: IRSender, data: int, bits: int) -> None:
    """Send old style RC5 data MSB first after two start bits."""
    sender.enable_ir_out(RC5_RC6_KHZ)
    sender.mark(RC5_UNIT)
    sender.space(RC5_UNIT)
    sender.mark(RC5_UNIT)
    for position in range(bits - 1, -1, -1):
        _send_biphase_bit(sender, RC5_UNIT, True, (data >> position) & 1)


def send_rc5_ext(sender: IRSender, address: int, command: int, toggle: bool) -> None:
    """Send an RC5X frame with 5 address and 7 command bits.

    The toggle bit keeps its own state per sender and flips on each call
    with ``toggle`` set.
    """
    sender.enable_ir_out(RC5_RC6_KHZ)
    address_bits = 5
    command_bits = 7

    sender.mark(RC5_UNIT)

    # The seventh command bit is sent inverted as the field bit.
    if command & (1 << (command_bits - 1)):
        sender.mark(RC5_UNIT)
        sender.space(RC5_UNIT)
    else:
        sender.space(RC5_UNIT)
        sender.mark(RC5_UNIT)
    command_bits -= 1

    toggle_bit = _EXT_TOGGLE.get(sender, 1)
    if toggle:
        toggle_bit = 0 if toggle_bit else 1
        _EXT_TOGGLE[sender] = toggle_bit
    _send_biphase_bit(sender, RC5_UNIT, True, toggle_bit)

    for position in range(address_bits - 1, -1, -1):
        _send_biphase_bit(sender, RC5_UNIT, True, (address >> position) & 1)
    for position in range(command_bits - 1, -1, -1):
        _send_biphase_bit(sender, RC5_UNIT, True, (command >> position) & 1)