"""UDP transport — one non-blocking datagram socket per simulated vehicle."""

from __future__ import annotations

import asyncio
import socket

from loguru import logger


class DatagramSender:
    """Best-effort UDP sender.

    Each send is a single ``sendto``; there are no retries and no delivery
    confirmation.  Send failures surface as ``OSError`` for the caller to
    decide on.  Host names are resolved once per destination through the
    event loop's ``getaddrinfo`` and cached for the life of the sender.
    """

    def __init__(self) -> None:
        self._sock: socket.socket | None = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.setblocking(False)
        self._addresses: dict[tuple[str, int], tuple[str, int]] = {}

    @property
    def closed(self) -> bool:
        return self._sock is None

    async def resolve(self, ip: str, port: int) -> tuple[str, int]:
        """Return the IPv4 socket address for ``ip:port``. Raises OSError."""
        key = (ip, port)
        address = self._addresses.get(key)
        if address is None:
            loop = asyncio.get_running_loop()
            infos = await loop.getaddrinfo(ip, port, family=socket.AF_INET, type=socket.SOCK_DGRAM)
            if not infos:
                raise OSError(f"no IPv4 address for {ip}")
            address = infos[0][4]
            self._addresses[key] = address
            if address[0] != ip:
                logger.debug(f"Resolved {ip} -> {address[0]}")
        return address

    async def send(self, packet: bytes, ip: str, port: int) -> None:
        """Send *packet* to ``ip:port``. Raises OSError on failure."""
        if self._sock is None:
            raise OSError("send on closed DatagramSender")
        address = await self.resolve(ip, port)
        loop = asyncio.get_running_loop()
        await loop.sock_sendto(self._sock, packet, address)

    async def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as e:
            logger.debug(f"Datagram socket close failed: {e}")
        self._sock = None
