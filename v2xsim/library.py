"""Scenario loading and output file naming."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from .schema import Scenario


class ScenarioError(ValueError):
    """A scenario file exists but cannot be parsed or validated."""


def load_scenario(path: str | Path) -> Scenario:
    """Load a Routesim export JSON file.

    Raises FileNotFoundError if *path* does not exist and ScenarioError if it
    is not valid JSON or does not describe a scenario.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path.resolve()}")
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ScenarioError(f"Failed to parse scenario JSON: {e}") from e
    if not isinstance(data, dict):
        raise ScenarioError(f"Scenario must be a JSON object, got {type(data).__name__}")
    try:
        return Scenario.model_validate(data)
    except ValidationError as e:
        raise ScenarioError(f"Invalid scenario {path.name}: {e}") from e


def default_output_path(fmt: str, now: datetime | None = None) -> Path:
    """``sim-output-<timestamp>.csv`` (or ``.jsonl``) in the working directory."""
    now = now or datetime.now(timezone.utc)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    stamp = stamp.replace(":", "-").replace(".", "-")
    ext = "jsonl" if fmt == "json" else "csv"
    return Path(f"sim-output-{stamp}.{ext}")
