# ircodec

Encoders and decoders for common infrared remote control protocols. Frames are
sequences of mark and space durations in microseconds, so the package can be
used with any transmitter or receiver that produces or consumes such timings.

Supported protocols:

- NEC, NEC2, Onkyo and Apple (`ircodec.nec`)
- Samsung, SamsungLG and Samsung48 (`ircodec.samsung`)
- Sony SIRCS with 12, 15 and 20 bits (`ircodec.sony`)
- RC5, RC5X, RC6 and RC6A (`ircodec.rc5_rc6`)
- Dish (send only), Whynter and a simple pulse distance example protocol
  (`send_shuzu` / `decode_shuzu`) in `ircodec.others`

Shared building blocks live in `ircodec.pulse`: `IRSender`, `RawFrame`,
`IRData`, `ReceiveHistory`, `Protocol`, `Flags`, `ProtocolConstants`,
`BiphaseReader` and the matching helpers `match_mark`, `match_space`,
`check_header` and `decode_pulse_distance_width_data`. Measured durations
match when they lie within 25 % of the expected value.

## Installation

```
pip install .
```

## Sending

An `IRSender` records what a transmitter would emit: the carrier frequency
set by `enable_ir_out` (in `sender.khz`) and the marks and spaces in
`sender.timings`. Adjacent durations of the same level are merged, and delays
between repeated frames are recorded as spaces. Each protocol's `send_*`
function writes into a sender.

```python
from ircodec.pulse import IRSender
from ircodec.nec import send_nec

sender = IRSender()
send_nec(sender, 0x04, 0x08, 0)
frame = sender.frame()
```

`sender.frame()` returns a `RawFrame`: the leading gap (`initial_gap`,
500 000 µs by default) followed by everything sent so far, as a receiver
would record it.

The RC5 and RC6 senders flip a toggle bit on every call when `auto_toggle`
is set; the toggle state belongs to the sender.

## Decoding

Decoders take a `RawFrame` and return an `IRData` with the protocol, address,
command, extra data, raw value, number of bits and flags, or `None` when the
frame does not belong to the protocol.

`decode_nec` and `decode_samsung` also accept a `ReceiveHistory`. Special
repeat frames carry no data of their own, so these decoders fill them in from
the history, and every successful decode is stored in it.

```python
from ircodec.pulse import ReceiveHistory
from ircodec.nec import decode_nec

history = ReceiveHistory()
data = decode_nec(frame, history)
if data is not None:
    print(data.protocol, hex(data.address), hex(data.command))
```

A short gap before a frame sets `Flags.IS_REPEAT`. For NEC a full frame
repeated quickly is reported as `Protocol.NEC2`.

Older MSB first variants are available as `send_nec_msb` / `decode_nec_msb`,
`send_samsung_msb` / `decode_samsung_msb`, `send_sony_msb` /
`decode_sony_msb`, and `send_rc5_raw` / `send_rc5_ext`.

## What the package does not do

It does not drive infrared hardware: there is no transmitter or receiver
interface, only timings in and out. There is no command-line tool, and no
function that tries every decoder on a frame to detect its protocol; call
the decoder for the protocol you expect. Dish frames can be sent but not
decoded.

## Running the tests

```
pip install .[test]
pytest
```