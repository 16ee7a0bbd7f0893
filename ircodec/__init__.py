"""Encoders and decoders for infrared remote control protocols as mark/space timings."""

__version__ = "0.1.0"
__all__ = ["pulse", "others", "nec", "rc5_rc6", "samsung", "sony"]