"""v2xsim — replay vehicle paths as V2X UDP telemetry.

Reads Routesim scenario exports, interpolates each vehicle's motion between
waypoints, sends one fixed-layout packet per tick over UDP and logs every
tick to CSV or JSON lines.
"""

from .geo import bearing_degrees, distance_meters
from .interpolate import Tick, interpolate_segment
from .library import ScenarioError, load_scenario
from .packet import PACKET_SIZE, decode, encode
from .paths import resolve_path
from .recorder import TickRecorder
from .runner import SimulationRunner, run_simulation
from .schema import (
    DriverState,
    SavedPath,
    Scenario,
    SimulationResult,
    TickRecord,
    V2XState,
    Vehicle,
    VehicleOutcome,
    Waypoint,
)

__all__ = [
    "bearing_degrees",
    "distance_meters",
    "Tick",
    "interpolate_segment",
    "ScenarioError",
    "load_scenario",
    "PACKET_SIZE",
    "decode",
    "encode",
    "resolve_path",
    "TickRecorder",
    "SimulationRunner",
    "run_simulation",
    "DriverState",
    "SavedPath",
    "Scenario",
    "SimulationResult",
    "TickRecord",
    "V2XState",
    "Vehicle",
    "VehicleOutcome",
    "Waypoint",
]
