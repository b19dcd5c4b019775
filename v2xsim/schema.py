"""Pydantic models for scenario input, tick records and run results.

Scenario files are Routesim exports and use camelCase keys
(``waitTime``, ``velocityKmh``, ``savedPaths``).  Models expose snake_case
attributes and accept either spelling on input.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from .config import settings


class _RoutesimModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class V2XState(_RoutesimModel):
    """Signalling state and road speed for one segment. Absent means off."""

    eebl: bool = False  # emergency electronic brake light
    light_bar: bool = False
    siren: bool = False
    flasher: bool = False
    foglight: bool = False
    drl: bool = False  # daytime running lights
    wiper: int = Field(default=0, ge=0, le=255)  # one byte on the wire
    left_signal: bool = False
    right_signal: bool = False
    velocity_kmh: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_off(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class Waypoint(_RoutesimModel):
    """A scripted stop along a path.

    ``hops``, ``freq`` and ``v2x`` describe the segment *arriving* at this
    waypoint; ``wait_time`` is the pause before departing it.
    """

    lat: float
    lng: float
    hops: int | None = None
    freq: float | None = None
    wait_time: float | None = None
    v2x: V2XState = Field(default_factory=V2XState, alias="v2x")  # to_camel would give "v2X"

    @field_validator("v2x", mode="before")
    @classmethod
    def _null_v2x(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.lat, self.lng)

    @property
    def tick_count(self) -> int:
        """Ticks needed to reach this waypoint; missing or zero means 1."""
        return self.hops or 1


class Vehicle(_RoutesimModel):
    """A simulated vehicle. Missing ip or port falls back to the settings."""

    id: str
    path: list[Waypoint] = Field(default_factory=list)
    ip: str = Field(default_factory=lambda: settings.default_ip)
    port: int = Field(default_factory=lambda: settings.default_port)

    @field_validator("path", mode="before")
    @classmethod
    def _null_path(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("ip", mode="before")
    @classmethod
    def _default_ip(cls, value: Any) -> Any:
        return value or settings.default_ip

    @field_validator("port", mode="before")
    @classmethod
    def _default_port(cls, value: Any) -> Any:
        return value or settings.default_port


class SavedPath(_RoutesimModel):
    """Fallback path for a vehicle, keyed by ``vehicle_id`` or ``vehicleId``."""

    vehicle_id: str
    path: list[Waypoint] = Field(default_factory=list)

    @field_validator("path", mode="before")
    @classmethod
    def _null_path(cls, value: Any) -> Any:
        return [] if value is None else value


class Scenario(_RoutesimModel):
    """A complete Routesim export: vehicles plus saved paths."""

    vehicles: list[Vehicle] = Field(default_factory=list)
    saved_paths: list[SavedPath] = Field(default_factory=list)
    rsus: list[dict[str, Any]] = Field(default_factory=list)  # road-side units, not simulated


class TickRecord(_RoutesimModel):
    """One logged tick. Serialized with camelCase keys."""

    timestamp: str  # ISO-8601, captured when the tick is emitted
    vehicle_id: str
    lat: float
    lng: float
    speed: float
    heading: float
    eebl: bool = False
    light_bar: bool = False
    siren: bool = False
    flasher: bool = False
    foglight: bool = False
    drl: bool = False
    wiper: int = 0
    left_signal: bool = False
    right_signal: bool = False


class DriverState(str, Enum):
    """Lifecycle of one vehicle within one repeat."""

    IDLE = "idle"
    RESOLVING = "resolving"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"
    SKIPPED = "skipped"


class VehicleOutcome(BaseModel):
    vehicle_id: str
    repeat: int
    state: DriverState
    ticks: int = 0
    send_failures: int = 0


class SimulationResult(BaseModel):
    """Summary of a simulation run."""

    started_at: float = Field(default_factory=time.time)
    duration_actual: float = 0.0
    repeats_completed: int = 0
    stopped: bool = False
    vehicles: list[VehicleOutcome] = Field(default_factory=list)

    @property
    def ticks(self) -> int:
        return sum(v.ticks for v in self.vehicles)

    @property
    def send_failures(self) -> int:
        return sum(v.send_failures for v in self.vehicles)

    @property
    def skipped(self) -> list[str]:
        return [v.vehicle_id for v in self.vehicles if v.state == DriverState.SKIPPED]
