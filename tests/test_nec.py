import pytest

from ircodec.nec import (
    NEC_BIT_MARK,
    NEC_HEADER_MARK,
    NEC_REPEAT_HEADER_SPACE,
    NEC_REPEAT_PERIOD,
    compute_nec_raw_data,
    decode_nec,
    decode_nec_msb,
    send_apple,
    send_nec,
    send_nec2,
    send_nec_msb,
    send_nec_raw,
    send_nec_repeat,
    send_onkyo,
)
from ircodec.pulse import Flags, IRSender, Protocol, RawFrame, ReceiveHistory

# Recorded frame: Address=0x4 Command=0x8 Raw-Data=0xF708FB04
RECORDED_NEC = (
    500_000,
    8950, 4450,
    600, 500, 650, 500, 600, 1650, 600, 550,
    600, 500, 600, 500, 650, 500, 600, 500,
    650, 1650, 600, 1600, 650, 500, 600, 1650,
    600, 1650, 600, 1650, 600, 1600, 650, 1600,
    650, 500, 600, 550, 600, 500, 600, 1650,
    600, 550, 600, 500, 600, 550, 600, 500,
    600, 1650, 600, 1650, 600, 1650, 600, 550,
    600, 1650, 600, 1650, 600, 1650, 600, 1600,
    650,
)

RECORDED_REPEAT = (40_900, 10_450, 2250, 700)


def _sent(send, *args, initial_gap=500_000):
    sender = IRSender(initial_gap=initial_gap)
    send(sender, *args)
    return sender


def test_compute_raw_data_matches_recorded_example():
    assert compute_nec_raw_data(0x4, 0x8) == 0xF708FB04


def test_send_nec_produces_recorded_raw_word():
    frame = _sent(send_nec, 0x4, 0x8, 0).frame()
    data = decode_nec(frame)
    assert data.decoded_raw_data == 0xF708FB04


def test_decode_recorded_frame():
    data = decode_nec(RawFrame(RECORDED_NEC))
    assert data.protocol is Protocol.NEC
    assert data.address == 0x4
    assert data.command == 0x8
    assert data.number_of_bits == 32
    assert not data.flags & Flags.IS_REPEAT


def test_decode_recorded_repeat_uses_history():
    history = ReceiveHistory(address=0x8, command=0x7, protocol=Protocol.NEC)
    data = decode_nec(RawFrame(RECORDED_REPEAT), history)
    assert data.protocol is Protocol.NEC
    assert data.address == 0x8
    assert data.command == 0x7
    assert data.flags & Flags.IS_REPEAT


def test_history_is_updated_by_full_frame():
    history = ReceiveHistory()
    decode_nec(_sent(send_nec, 0x21, 0x43, 0).frame(), history)
    repeat = decode_nec(_sent(send_nec_repeat).frame(), history)
    assert (repeat.address, repeat.command, repeat.protocol) == (0x21, 0x43, Protocol.NEC)


@pytest.mark.parametrize("address,command", [(0x00, 0x00), (0x04, 0x08), (0xFF, 0xFF), (0x7A, 0x13)])
def test_nec_round_trip_8bit_address(address, command):
    data = decode_nec(_sent(send_nec, address, command, 0).frame())
    assert data.protocol is Protocol.NEC
    assert data.address == address
    assert data.command == command


def test_nec_round_trip_16bit_address():
    data = decode_nec(_sent(send_nec, 0x1234, 0x56, 0).frame())
    assert data.protocol is Protocol.NEC
    assert data.address == 0x1234
    assert data.command == 0x56


def test_onkyo_round_trip():
    data = decode_nec(_sent(send_onkyo, 0x1234, 0x5678, 0).frame())
    assert data.protocol is Protocol.ONKYO
    assert data.address == 0x1234
    assert data.command == 0x5678


def test_apple_round_trip():
    data = decode_nec(_sent(send_apple, 0xD7, 0x02, 0).frame())
    assert data.protocol is Protocol.APPLE
    assert data.address == 0xD7
    assert data.command == 0x02


def test_send_nec_raw_round_trip():
    raw = compute_nec_raw_data(0x10, 0x20)
    data = decode_nec(_sent(send_nec_raw, raw, 0).frame())
    assert data.decoded_raw_data == raw
    assert (data.address, data.command) == (0x10, 0x20)


def test_short_gap_marks_nec2_repeat():
    frame = _sent(send_nec2, 0x4, 0x8, 0, initial_gap=40_000).frame()
    data = decode_nec(frame)
    assert data.protocol is Protocol.NEC2
    assert data.flags & Flags.IS_REPEAT
    assert data.flags & Flags.IS_PROTOCOL_WITH_DIFFERENT_REPEAT
    assert (data.address, data.command) == (0x4, 0x8)


def test_negative_repeats_send_only_special_repeat():
    sender = _sent(send_nec, 0x4, 0x8, -1)
    assert sender.khz == 38
    assert sender.frame().timings == (500_000, NEC_HEADER_MARK, NEC_REPEAT_HEADER_SPACE, NEC_BIT_MARK)


def test_nec2_negative_repeats_send_nothing():
    sender = _sent(send_nec2, 0x4, 0x8, -1)
    with pytest.raises(ValueError):
        sender.frame()


def test_nec_repeat_uses_special_frame_in_raster():
    sender = _sent(send_nec, 0x4, 0x8, 1)
    assert sender.timings[-3:] == [NEC_HEADER_MARK, NEC_REPEAT_HEADER_SPACE, NEC_BIT_MARK]
    assert sum(sender.timings[:-3]) == NEC_REPEAT_PERIOD


def test_nec2_repeat_resends_full_frame():
    sender = _sent(send_nec2, 0x4, 0x8, 1)
    frame_length = 67
    assert sender.timings[-frame_length:] == sender.timings[:frame_length]
    assert sum(sender.timings[:frame_length + 1]) == NEC_REPEAT_PERIOD


def test_decode_rejects_wrong_length():
    timings = RECORDED_NEC[:-2]
    assert decode_nec(RawFrame(timings)) is None


def test_decode_rejects_wrong_header_mark():
    timings = (RECORDED_NEC[0], 3000) + RECORDED_NEC[2:]
    assert decode_nec(RawFrame(timings)) is None


def test_decode_rejects_repeat_header_space_in_full_frame():
    timings = RECORDED_NEC[:2] + (2250,) + RECORDED_NEC[3:]
    assert decode_nec(RawFrame(timings)) is None


def test_msb_example_from_documentation():
    frame = _sent(send_nec_msb, 0xCB340102).frame()
    assert decode_nec(frame).decoded_raw_data == 0x40802CD3


@pytest.mark.parametrize("value", [0x00000000, 0xCB340102, 0x12345678, 0xFFFFFFFE])
def test_msb_round_trip(value):
    data = decode_nec_msb(_sent(send_nec_msb, value).frame())
    assert data.decoded_raw_data == value
    assert data.number_of_bits == 32
    assert data.protocol is Protocol.NEC


def test_msb_repeat_value():
    frame = _sent(send_nec_msb, 0x12345678, 32, True).frame()
    data = decode_nec_msb(frame)
    assert data.decoded_raw_data == 0xFFFFFFFF
    assert data.number_of_bits == 0
    assert data.flags & Flags.IS_REPEAT


def test_msb_all_ones_sends_repeat_frame():
    sender = _sent(send_nec_msb, 0xFFFFFFFF)
    assert sender.frame().timings == (500_000, NEC_HEADER_MARK, NEC_REPEAT_HEADER_SPACE, NEC_BIT_MARK)


def test_msb_decode_rejects_bad_stop_bit():
    timings = _sent(send_nec_msb, 0x12345678).frame().timings
    broken = timings[:-1] + (3000,)
    assert decode_nec_msb(RawFrame(broken)) is None