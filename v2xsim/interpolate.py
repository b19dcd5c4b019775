"""Per-segment motion interpolation.

A segment runs from one waypoint to the next and is split into
``to.hops`` ticks.  Everything that describes the motion of a segment
(speed, V2X signalling, frequency, tick count) is read from the
*destination* waypoint; heading is the single great-circle bearing of the
segment and is not re-derived per tick.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .geo import bearing_degrees
from .schema import V2XState, Waypoint


@dataclass(frozen=True)
class Tick:
    """One simulated instant: a packet to send and a record to log."""

    lat: float
    lng: float
    speed: float  # km/h
    heading: float  # degrees, 0 = north
    v2x: V2XState
    interval_ms: float  # pause before the next tick

    @property
    def interval(self) -> float:
        """Pause before the next tick, in seconds."""
        return self.interval_ms / 1000.0


def segment_frequency(to_wp: Waypoint, default_freq: float) -> float:
    return to_wp.freq or default_freq


def interpolate_segment(from_wp: Waypoint, to_wp: Waypoint, default_freq: float) -> Iterator[Tick]:
    """Yield ``to_wp.tick_count`` ticks moving from *from_wp* to *to_wp*.

    Tick t (1-based) sits at ``from + t * delta``, so the last tick lands
    on the destination coordinate.
    """
    hops = to_wp.tick_count
    interval_ms = 1000.0 / segment_frequency(to_wp, default_freq)

    lat_step = (to_wp.lat - from_wp.lat) / hops
    lng_step = (to_wp.lng - from_wp.lng) / hops

    heading = bearing_degrees(from_wp.coordinate, to_wp.coordinate)
    v2x = to_wp.v2x
    speed = v2x.velocity_kmh or 0.0

    for t in range(1, hops + 1):
        yield Tick(
            lat=from_wp.lat + lat_step * t,
            lng=from_wp.lng + lng_step * t,
            speed=speed,
            heading=heading,
            v2x=v2x,
            interval_ms=interval_ms,
        )
