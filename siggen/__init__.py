"""Periodic waveform generator that fans samples out to TCP subscribers."""

__version__ = "0.1.0"
