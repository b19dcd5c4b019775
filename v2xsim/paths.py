"""Pick the waypoint list a vehicle will drive."""

from __future__ import annotations

from collections.abc import Iterable

from .schema import SavedPath, Vehicle, Waypoint

MIN_PATH_LENGTH = 2


def resolve_path(vehicle: Vehicle, saved_paths: Iterable[SavedPath] | None) -> list[Waypoint] | None:
    """Return the path for *vehicle*, or None if it cannot be simulated.

    An inline path of two or more waypoints wins.  Otherwise the first saved
    path keyed by the vehicle id is used if it is long enough.  A single
    waypoint is never a path.
    """
    if len(vehicle.path) >= MIN_PATH_LENGTH:
        return vehicle.path
    for saved in saved_paths or ():
        if saved.vehicle_id == vehicle.id:
            if len(saved.path) >= MIN_PATH_LENGTH:
                return saved.path
            return None
    return None
