import pytest

from ircodec.pulse import Flags, IRSender, Protocol, RawFrame
from ircodec.sony import (
    LEGACY_REPEAT_VALUE,
    SONY_HEADER_MARK,
    SONY_KHZ,
    SONY_SPACE,
    decode_sony,
    decode_sony_msb,
    send_sony,
    send_sony_msb,
)


def _sent(address, command, bits, repeats=0):
    sender = IRSender()
    send_sony(sender, address, command, repeats, bits)
    return sender


def test_send_starts_with_header_and_carrier():
    sender = _sent(0x1, 0x15, 12)
    assert sender.khz == SONY_KHZ
    assert sender.timings[:2] == [SONY_HEADER_MARK, SONY_SPACE]


@pytest.mark.parametrize(
    "address, command, bits",
    [(0x1, 0x15, 12), (0x1F, 0x7F, 12), (0xA5, 0x2A, 15), (0x4B9, 0x07, 20), (0, 0, 12)],
)
def test_round_trip(address, command, bits):
    frame = _sent(address, command, bits).frame()
    assert len(frame) == 2 * bits + 2
    data = decode_sony(frame)
    assert data.protocol is Protocol.SONY
    assert data.address == address
    assert data.command == command
    assert data.number_of_bits == bits
    assert not data.flags & Flags.IS_REPEAT


def test_documented_example_raw_data():
    data = decode_sony(_sent(0x4B9, 0x7, 20).frame())
    assert data.decoded_raw_data == 0x25C87


def test_command_masked_to_seven_bits():
    data = decode_sony(_sent(0x3, 0xFF, 12).frame())
    assert data.command == 0x7F
    assert data.address == 0x3


def test_short_gap_sets_repeat_flag():
    frame = _sent(0x2, 0x10, 12).frame()
    repeated = RawFrame((10_000, *frame.timings[1:]))
    data = decode_sony(repeated)
    assert data.flags & Flags.IS_REPEAT
    assert data.command == 0x10


def test_invalid_length_is_rejected():
    frame = _sent(0x2, 0x10, 13).frame()
    assert decode_sony(frame) is None


def test_wrong_header_is_rejected():
    frame = _sent(0x2, 0x10, 12).frame()
    timings = list(frame.timings)
    timings[1] = 9000
    assert decode_sony(RawFrame(tuple(timings))) is None


def test_corrupted_bit_is_rejected():
    frame = _sent(0x2, 0x10, 12).frame()
    timings = list(frame.timings)
    timings[5] = 3000
    assert decode_sony(RawFrame(tuple(timings))) is None


def test_repeats_send_one_header_per_frame():
    sender = _sent(0x2, 0x10, 12, repeats=2)
    assert sender.timings.count(SONY_HEADER_MARK) == 3


def test_negative_repeats_send_nothing():
    sender = _sent(0x2, 0x10, 12, repeats=-1)
    assert sender.timings == []


@pytest.mark.parametrize("value, bits", [(0xABC, 12), (0x5A5A, 15), (0xF0F0F, 20)])
def test_msb_round_trip(value, bits):
    sender = IRSender()
    send_sony_msb(sender, value, bits)
    assert sender.khz == SONY_KHZ
    data = decode_sony_msb(sender.frame())
    assert data.decoded_raw_data == value & ((1 << bits) - 1)
    assert data.number_of_bits == bits
    assert data.protocol is Protocol.SONY


def test_msb_fast_repeat_gap():
    sender = IRSender(initial_gap=100)
    send_sony_msb(sender, 0x123, 12)
    data = decode_sony_msb(sender.frame())
    assert data.decoded_raw_data == LEGACY_REPEAT_VALUE
    assert data.number_of_bits == 0
    assert data.flags & Flags.IS_REPEAT


def test_msb_too_short_is_rejected():
    sender = IRSender()
    send_sony_msb(sender, 0x12, 8)
    assert decode_sony_msb(sender.frame()) is None


def test_msb_bad_mark_is_rejected():
    sender = IRSender()
    send_sony_msb(sender, 0xABC, 12)
    timings = list(sender.frame().timings)
    timings[3] = 3000
    assert decode_sony_msb(RawFrame(tuple(timings))) is None


def test_msb_and_lsb_bit_orders_differ():
    sender = IRSender()
    send_sony(sender, 0x1, 0x0, 0, 12)
    lsb = decode_sony(sender.frame())
    msb = decode_sony_msb(sender.frame())
    assert lsb.decoded_raw_data == 0x80
    assert msb.decoded_raw_data == 0x010