"""Command-line entry point.

Usage:
    v2xsim --scenario routesim-export.json [--freq 10] [--repeat 1]
           [--output FILE] [--format csv|json] [--verbose]
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
import time
from pathlib import Path

from loguru import logger

from .config import settings
from .library import ScenarioError, default_output_path, load_scenario
from .recorder import FORMATS, TickRecorder
from .runner import SimulationRunner
from .schema import Scenario, SimulationResult


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="v2xsim",
        description="Replay Routesim vehicle paths as V2X UDP telemetry",
    )
    parser.add_argument("--scenario", required=True, help="Routesim export JSON file")
    parser.add_argument(
        "--freq", type=_positive_int, default=settings.frequency,
        help=f"Transmission frequency in Hz (default {settings.frequency})",
    )
    parser.add_argument(
        "--repeat", type=_positive_int, default=settings.repeat,
        help=f"Repeat the simulation N times (default {settings.repeat})",
    )
    parser.add_argument("--output", default=None, help="Tick log path (default sim-output-<time>.<ext>)")
    parser.add_argument(
        "--format", default=settings.output_format, choices=list(FORMATS),
        help="Tick log format",
    )
    parser.add_argument(
        "--verbose", action="store_true", default=settings.verbose,
        help="Narrate every tick on the console",
    )
    parser.add_argument(
        "--log-level", default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    args = parser.parse_args(argv)
    if args.output is None:
        args.output = str(default_output_path(args.format))
    return args


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format="{time:HH:mm:ss.SSS} | {level: <7} | {message}")


async def simulate(args: argparse.Namespace, scenario: Scenario) -> SimulationResult:
    """Run *scenario* with the CLI options; SIGINT/SIGTERM stop it cleanly."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Windows loops and non-main threads do not support signal handlers
            pass

    recorder = TickRecorder(args.output, args.format)
    try:
        runner = SimulationRunner(
            scenario,
            recorder,
            frequency=args.freq,
            repeat=args.repeat,
            verbose=args.verbose,
            stop_event=stop_event,
        )
        return await runner.run()
    finally:
        await recorder.close()
        for sig in installed:
            loop.remove_signal_handler(sig)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    scenario_path = Path(args.scenario).resolve()
    try:
        scenario = load_scenario(scenario_path)
    except (FileNotFoundError, ScenarioError) as e:
        logger.error(str(e))
        return 1

    if args.verbose:
        logger.info(f"Scenario: {scenario_path}")
        logger.info(f"Vehicles: {len(scenario.vehicles)}")
        logger.info(f"RSUs:     {len(scenario.rsus)}")
        logger.info(f"Freq:     {args.freq} Hz")
        logger.info(f"Repeat:   {args.repeat}")
        logger.info(f"Output:   {args.output} ({args.format})")

    start = time.monotonic()
    result = asyncio.run(simulate(args, scenario))
    elapsed = time.monotonic() - start

    if result.stopped:
        logger.warning(f"Simulation stopped after {result.repeats_completed}/{args.repeat} repeats")
    if result.skipped:
        logger.info(f"Skipped (no path): {', '.join(sorted(set(result.skipped)))}")
    print(f"Simulation complete in {elapsed:.2f}s ({result.ticks} ticks) - output: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
