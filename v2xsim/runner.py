"""SimulationRunner — runs every vehicle of a scenario, repeat after repeat."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from .driver import VehicleDriver
from .schema import Scenario, SimulationResult, VehicleOutcome
from .transport import DatagramSender

if TYPE_CHECKING:
    from .recorder import TickRecorder


class SimulationRunner:
    """Runs a scenario's vehicles concurrently on the current event loop.

    Within a repeat every vehicle gets its own VehicleDriver task; the
    repeat ends when all of them are done or skipped.  Repeats run one
    after another and never overlap.  Setting *stop_event* ends the run
    cooperatively: drivers drain at their next suspension point and no
    further repeats start.
    """

    def __init__(
        self,
        scenario: Scenario,
        recorder: TickRecorder,
        *,
        frequency: int = 10,
        repeat: int = 1,
        verbose: bool = False,
        sender_factory: Callable[[], DatagramSender] = DatagramSender,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        if frequency <= 0:
            raise ValueError(f"frequency must be positive, got {frequency}")
        if repeat < 1:
            raise ValueError(f"repeat must be at least 1, got {repeat}")
        self._scenario = scenario
        self._recorder = recorder
        self._frequency = frequency
        self._repeat = repeat
        self._verbose = verbose
        self._sender_factory = sender_factory
        self._stop_event = stop_event
        self._drivers: list[VehicleDriver] = []
        self._result: SimulationResult | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def result(self) -> SimulationResult | None:
        return self._result

    @property
    def drivers(self) -> list[VehicleDriver]:
        """Drivers of the repeat in progress (or the last one)."""
        return list(self._drivers)

    async def run(self) -> SimulationResult:
        """Execute all repeats and return the run summary."""
        level = "INFO" if self._verbose else "DEBUG"
        result = SimulationResult()
        self._result = result
        self._running = True
        t0 = time.monotonic()

        try:
            for r in range(1, self._repeat + 1):
                if self._stopped:
                    break
                logger.log(level, f"=== Repeat {r}/{self._repeat} ===")
                self._drivers = [
                    VehicleDriver(
                        vehicle,
                        self._scenario.saved_paths,
                        self._frequency,
                        self._recorder,
                        repeat=r,
                        sender_factory=self._sender_factory,
                        stop_event=self._stop_event,
                        verbose=self._verbose,
                    )
                    for vehicle in self._scenario.vehicles
                ]
                result.vehicles.extend(await self._run_repeat(self._drivers))
                if not self._stopped:
                    result.repeats_completed = r
        finally:
            self._running = False
            result.duration_actual = time.monotonic() - t0
            result.stopped = self._stopped

        return result

    async def _run_repeat(self, drivers: list[VehicleDriver]) -> list[VehicleOutcome]:
        """Run *drivers* as sibling tasks.

        If one driver fails the others are cancelled, and each releases its
        socket before the first failure is re-raised.
        """
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [
                    tg.create_task(d.run(), name=f"vehicle-{d.vehicle.id}") for d in drivers
                ]
        except ExceptionGroup as eg:
            logger.error(f"Simulation aborted: {len(eg.exceptions)} vehicle(s) failed")
            raise eg.exceptions[0] from eg
        return [t.result() for t in tasks]

    @property
    def _stopped(self) -> bool:
        return self._stop_event is not None and self._stop_event.is_set()


async def run_simulation(
    scenario: Scenario,
    recorder: TickRecorder,
    *,
    frequency: int = 10,
    repeat: int = 1,
    verbose: bool = False,
    sender_factory: Callable[[], DatagramSender] = DatagramSender,
    stop_event: asyncio.Event | None = None,
) -> SimulationResult:
    """Convenience wrapper: build a SimulationRunner and run it."""
    runner = SimulationRunner(
        scenario,
        recorder,
        frequency=frequency,
        repeat=repeat,
        verbose=verbose,
        sender_factory=sender_factory,
        stop_event=stop_event,
    )
    return await runner.run()
