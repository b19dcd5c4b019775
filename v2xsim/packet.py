"""V2X packet codec — fixed 72-byte little-endian wire layout.

Layout:
     0-7   latitude    float64
     8-15  longitude   float64
    16-23  speed       float64  km/h
    24-31  heading     float64  degrees
    32-39  timestamp   float64  epoch ms, captured at encode time
    40-41  flags       uint16   bit0 eebl, bit1 lightBar, bit2 siren,
                                bit3 flasher, bit4 foglight, bit5 drl
    42     wiper       uint8
    43     leftSignal  uint8    0|1
    44     rightSignal uint8    0|1
    45-71  reserved, zero-filled

Downstream receivers parse this byte-for-byte; do not reorder fields.
"""

from __future__ import annotations

import struct
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interpolate import Tick
    from .schema import V2XState

PACKET_FORMAT = struct.Struct("<dddddHBBB27x")
PACKET_SIZE = PACKET_FORMAT.size  # 72

FLAG_EEBL = 1 << 0
FLAG_LIGHT_BAR = 1 << 1
FLAG_SIREN = 1 << 2
FLAG_FLASHER = 1 << 3
FLAG_FOGLIGHT = 1 << 4
FLAG_DRL = 1 << 5

_FLAG_FIELDS = (
    ("eebl", FLAG_EEBL),
    ("light_bar", FLAG_LIGHT_BAR),
    ("siren", FLAG_SIREN),
    ("flasher", FLAG_FLASHER),
    ("foglight", FLAG_FOGLIGHT),
    ("drl", FLAG_DRL),
)


def flags_for(v2x: V2XState | None) -> int:
    """Bitwise OR of the indicator flags that are set."""
    if v2x is None:
        return 0
    flags = 0
    for name, bit in _FLAG_FIELDS:
        if getattr(v2x, name, False):
            flags |= bit
    return flags


def encode(state: Tick, timestamp_ms: float | None = None) -> bytes:
    """Pack a simulated vehicle state into a 72-byte packet.

    *timestamp_ms* defaults to the current wall clock.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time() * 1000.0
    v2x = state.v2x
    return PACKET_FORMAT.pack(
        state.lat,
        state.lng,
        state.speed or 0.0,
        state.heading or 0.0,
        timestamp_ms,
        flags_for(v2x),
        (v2x.wiper or 0) if v2x is not None else 0,
        1 if v2x is not None and v2x.left_signal else 0,
        1 if v2x is not None and v2x.right_signal else 0,
    )


def decode(data: bytes) -> dict:
    """Unpack a packet into a plain dict (receiver side, diagnostics)."""
    if len(data) != PACKET_SIZE:
        raise ValueError(f"Expected {PACKET_SIZE}-byte packet, got {len(data)}")
    lat, lng, speed, heading, ts, flags, wiper, left, right = PACKET_FORMAT.unpack(data)
    decoded = {
        "lat": lat,
        "lng": lng,
        "speed": speed,
        "heading": heading,
        "timestamp": ts,
        "flags": flags,
        "wiper": wiper,
        "left_signal": bool(left),
        "right_signal": bool(right),
    }
    for name, bit in _FLAG_FIELDS:
        decoded[name] = bool(flags & bit)
    return decoded
