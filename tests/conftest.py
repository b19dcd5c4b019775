"""Shared fixtures for v2xsim tests."""

from __future__ import annotations

import pytest

from v2xsim.schema import Vehicle, Waypoint


class FakeSender:
    """In-memory DatagramSender: records packets instead of sending them."""

    def __init__(self, error: Exception | None = None):
        self.sent: list[tuple[bytes, str, int]] = []
        self.closed = False
        self._error = error

    async def send(self, packet: bytes, ip: str, port: int) -> None:
        if self.closed:
            raise OSError("send on closed sender")
        if self._error is not None:
            raise self._error
        self.sent.append((packet, ip, port))

    async def close(self) -> None:
        self.closed = True


class MemoryRecorder:
    """TickRecorder stand-in that keeps records in a list."""

    def __init__(self) -> None:
        self.records: list = []
        self.closed = False

    def log(self, record) -> None:
        self.records.append(record)

    async def close(self) -> None:
        self.closed = True


class SenderFactory:
    """Callable sender factory that remembers every sender it created."""

    def __init__(self, error: Exception | None = None, *, only_first: bool = False):
        self.created: list[FakeSender] = []
        self._error = error
        self._only_first = only_first

    def __call__(self) -> FakeSender:
        error = None if self._only_first and self.created else self._error
        sender = FakeSender(error)
        self.created.append(sender)
        return sender


@pytest.fixture
def sender_factory() -> SenderFactory:
    return SenderFactory()


@pytest.fixture
def recorder() -> MemoryRecorder:
    return MemoryRecorder()


def make_vehicle(vid: str = "car-1", hops: int = 3, freq: float | None = 1000, **v2x) -> Vehicle:
    """Two-waypoint vehicle heading north-east; *v2x* goes on the destination."""
    return Vehicle(
        id=vid,
        path=[
            Waypoint(lat=39.925, lng=32.866),
            Waypoint(lat=39.930, lng=32.870, hops=hops, freq=freq, v2x=v2x),
        ],
    )


@pytest.fixture
def vehicle_factory():
    return make_vehicle


@pytest.fixture
def failing_sender_factory():
    """Build a SenderFactory whose senders raise *error* on every send.

    With ``only_first=True`` only the first sender created is broken.
    """
    return lambda error, only_first=False: SenderFactory(error=error, only_first=only_first)
