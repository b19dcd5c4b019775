"""TickRecorder -- durable per-tick log in CSV or JSON-lines format."""

from __future__ import annotations

import asyncio
import csv
import queue
import threading
from pathlib import Path

from loguru import logger

from .schema import TickRecord

FORMATS = ("csv", "json")

CSV_COLUMNS = [
    "timestamp",
    "vehicleId",
    "lat",
    "lng",
    "speed",
    "heading",
    "eebl",
    "lightBar",
    "siren",
    "flasher",
    "foglight",
    "drl",
    "wiper",
    "leftSignal",
    "rightSignal",
]

_BOOL_COLUMNS = {"eebl", "lightBar", "siren", "flasher", "foglight", "drl", "leftSignal", "rightSignal"}

_STOP = object()


def _csv_value(column: str, value):
    """Booleans as 0/1; whole floats without a trailing .0 (60.0 -> 60)."""
    if column in _BOOL_COLUMNS:
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class TickRecorder:
    """Appends TickRecords to a file from a single writer thread.

    ``log()`` only enqueues, so any number of concurrent vehicle drivers can
    call it; the writer thread turns each record into exactly one line.
    ``close()`` drains the queue, flushes and releases the file.
    """

    def __init__(self, path: str | Path, fmt: str = "csv"):
        if fmt not in FORMATS:
            raise ValueError(f"Unknown log format {fmt!r}, expected one of {FORMATS}")
        self.path = Path(path).resolve()
        self.format = fmt
        self.records_written = 0

        self._queue: queue.Queue = queue.Queue()
        self._file = open(self.path, "w", newline="", encoding="utf-8")
        self._csv = csv.writer(self._file, lineterminator="\n") if fmt == "csv" else None
        if self._csv is not None:
            self._csv.writerow(CSV_COLUMNS)

        self._closed = False
        self._thread = threading.Thread(target=self._run, daemon=True, name="tick-recorder")
        self._thread.start()

    def log(self, record: TickRecord) -> None:
        """Queue *record* for writing. Never blocks on disk I/O."""
        if self._closed:
            raise RuntimeError("log() on closed TickRecorder")
        self._queue.put(record)

    async def close(self) -> None:
        """Write everything queued so far, then close the file."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        await asyncio.to_thread(self._thread.join)
        self._file.close()
        logger.debug(f"Tick log closed: {self.records_written} records -> {self.path}")

    def _run(self) -> None:
        while True:
            record = self._queue.get()
            if record is _STOP:
                break
            self._write(record)
        self._file.flush()

    def _write(self, record: TickRecord) -> None:
        row = record.model_dump(by_alias=True)
        if self._csv is not None:
            self._csv.writerow([_csv_value(col, row[col]) for col in CSV_COLUMNS])
        else:
            self._file.write(record.model_dump_json(by_alias=True) + "\n")
        self.records_written += 1
