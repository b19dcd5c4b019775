"""VehicleDriver — drives one vehicle along its path, one tick at a time.

Lifecycle
---------
  idle -> resolving -> running -> draining -> done
                    `-> skipped   (no usable inline or saved path)

While running, every consecutive waypoint pair is one segment:

  1. If the departure waypoint has a positive ``wait_time`` the driver
     pauses for that long (wall clock) before the first tick.
  2. Each tick is encoded and sent to the vehicle's ``ip:port``, then
     logged, then the driver pauses for the tick interval.  Tick t is fully
     sent, logged and paced before tick t+1 is produced.

Send failures are the one error class absorbed here: UDP delivery is
best-effort, so an ``OSError`` from the socket is counted and dropped.
Anything else propagates after the socket is released.

Suspension points are the pre-segment wait, the tick pause and the send.
A shared ``asyncio.Event`` stops the driver cooperatively: it is checked at
each of them, remaining ticks are skipped and the driver drains.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from loguru import logger

from .interpolate import Tick, interpolate_segment
from .packet import encode
from .paths import resolve_path
from .schema import DriverState, SavedPath, TickRecord, Vehicle, VehicleOutcome, Waypoint
from .transport import DatagramSender

if TYPE_CHECKING:
    from .recorder import TickRecorder


def iso_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-01-01T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def tick_record(vehicle_id: str, tick: Tick) -> TickRecord:
    v2x = tick.v2x
    return TickRecord(
        timestamp=iso_timestamp(),
        vehicle_id=vehicle_id,
        lat=tick.lat,
        lng=tick.lng,
        speed=tick.speed,
        heading=tick.heading,
        eebl=bool(v2x.eebl),
        light_bar=bool(v2x.light_bar),
        siren=bool(v2x.siren),
        flasher=bool(v2x.flasher),
        foglight=bool(v2x.foglight),
        drl=bool(v2x.drl),
        wiper=v2x.wiper or 0,
        left_signal=bool(v2x.left_signal),
        right_signal=bool(v2x.right_signal),
    )


class VehicleDriver:
    """Runs one vehicle for one repeat of a scenario."""

    def __init__(
        self,
        vehicle: Vehicle,
        saved_paths: Sequence[SavedPath],
        frequency: float,
        recorder: TickRecorder,
        *,
        repeat: int = 1,
        sender_factory: Callable[[], DatagramSender] = DatagramSender,
        stop_event: asyncio.Event | None = None,
        verbose: bool = False,
    ) -> None:
        self.vehicle = vehicle
        self.repeat = repeat
        self.state = DriverState.IDLE
        self.ticks = 0
        self.send_failures = 0

        self._saved_paths = saved_paths
        self._frequency = frequency
        self._recorder = recorder
        self._sender_factory = sender_factory
        self._stop_event = stop_event
        self._level = "INFO" if verbose else "DEBUG"

    @property
    def stopped(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()

    def outcome(self) -> VehicleOutcome:
        return VehicleOutcome(
            vehicle_id=self.vehicle.id,
            repeat=self.repeat,
            state=self.state,
            ticks=self.ticks,
            send_failures=self.send_failures,
        )

    async def run(self) -> VehicleOutcome:
        vid = self.vehicle.id
        self.state = DriverState.RESOLVING
        path = resolve_path(self.vehicle, self._saved_paths)
        if path is None:
            self.state = DriverState.SKIPPED
            logger.log(self._level, f"[SKIP] {vid}: no valid path")
            return self.outcome()

        sender = self._sender_factory()
        self.state = DriverState.RUNNING
        logger.log(
            self._level,
            f"[START] {vid} -> {self.vehicle.ip}:{self.vehicle.port}  ({len(path)} waypoints)",
        )
        try:
            await self._drive(path, sender)
        finally:
            self.state = DriverState.DRAINING
            await sender.close()

        self.state = DriverState.DONE
        logger.log(self._level, f"[DONE] {vid}  ({self.ticks} ticks, {self.send_failures} failed sends)")
        return self.outcome()

    async def _drive(self, path: list[Waypoint], sender: DatagramSender) -> None:
        vid = self.vehicle.id
        for from_wp, to_wp in zip(path, path[1:]):
            if from_wp.wait_time and from_wp.wait_time > 0:
                logger.log(self._level, f"  [WAIT] {vid} waiting {from_wp.wait_time}s")
                if await self._pause(from_wp.wait_time):
                    return

            for tick in interpolate_segment(from_wp, to_wp, self._frequency):
                if self.stopped:
                    return
                await self._transmit(sender, tick)
                self._recorder.log(tick_record(vid, tick))
                self.ticks += 1
                logger.log(
                    self._level,
                    f"  [TICK] {vid}  lat={tick.lat:.6f} lng={tick.lng:.6f}"
                    f"  spd={tick.speed} hdg={tick.heading:.1f}",
                )
                if await self._pause(tick.interval):
                    return

    async def _transmit(self, sender: DatagramSender, tick: Tick) -> None:
        try:
            await sender.send(encode(tick), self.vehicle.ip, self.vehicle.port)
        except OSError as e:
            # Best-effort delivery: a failed datagram is dropped, never retried.
            self.send_failures += 1
            logger.debug(f"Send to {self.vehicle.ip}:{self.vehicle.port} failed for {self.vehicle.id}: {e}")

    async def _pause(self, seconds: float) -> bool:
        """Sleep for *seconds*; return True if the stop event fired instead."""
        if self._stop_event is None:
            await asyncio.sleep(seconds)
            return False
        if self._stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
