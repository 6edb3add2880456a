"""Byte-level helpers for fixed-size binary values."""

from __future__ import annotations

import struct

_BYTE_ORDER_PREFIXES = "@=<>!"


def _normalise(fmt: str) -> str:
    """Use native byte order with standard sizes unless the format names one."""
    if fmt and fmt[0] in _BYTE_ORDER_PREFIXES:
        return fmt
    return "=" + fmt


def hex_bytes(value, fmt: str) -> str:
    """Return the bytes of ``value`` packed with ``fmt`` as upper-case hex pairs."""
    packed = struct.pack(_normalise(fmt), value)
    return " ".join(f"{byte:02X}" for byte in packed)


def bit_swap(value, fmt: str):
    """Reverse the byte order of ``value`` packed with ``fmt`` and unpack it again."""
    layout = _normalise(fmt)
    packed = struct.pack(layout, value)
    (swapped,) = struct.unpack(layout, packed[::-1])
    return swapped