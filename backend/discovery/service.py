"""
UDP-based LAN discovery beacon.

Periodically broadcasts a HostAnnouncement so trackpad clients can find
this host and its gesture port without any configuration.
"""

import asyncio
import json
import logging
import socket

from config import BROADCAST_ADDRESS, DISCOVERY_INTERVAL, DISCOVERY_PORT, TCP_PORT
from discovery.models import HostAnnouncement, HostIdentity

logger = logging.getLogger(__name__)


class BeaconProtocol(asyncio.DatagramProtocol):
    """asyncio UDP protocol for the send-only beacon socket."""

    def __init__(self, beacon: "DiscoveryBeacon"):
        self.beacon = beacon

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        # Send-only socket; clients never answer a beacon.
        pass

    def error_received(self, exc: Exception) -> None:
        logger.warning(f"Discovery UDP error: {exc}")
        self.beacon.failed_sends += 1


class DiscoveryBeacon:
    """Broadcasts the host announcement every `interval` seconds."""

    def __init__(
        self,
        identity: HostIdentity,
        tcp_port: int = TCP_PORT,
        broadcast_port: int = DISCOVERY_PORT,
        interval: float = DISCOVERY_INTERVAL,
        broadcast_address: str = BROADCAST_ADDRESS,
    ) -> None:
        self._identity = identity
        self._tcp_port = tcp_port
        self._broadcast_port = broadcast_port
        self._interval = interval
        self._broadcast_address = broadcast_address
        self._transport: asyncio.DatagramTransport | None = None
        self._broadcast_task: asyncio.Task | None = None
        self.attempts = 0  # one per tick, including ones that later fail
        self.failed_sends = 0

    @property
    def announcement(self) -> HostAnnouncement:
        return HostAnnouncement(
            name=self._identity.name,
            ip=self._identity.ip,
            port=self._tcp_port,
        )

    @property
    def interval(self) -> float:
        return self._interval

    def payload(self) -> bytes:
        """The exact datagram sent on every tick."""
        return json.dumps(self.announcement.model_dump()).encode("utf-8")

    async def _open_transport(self) -> None:
        loop = asyncio.get_running_loop()

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.setblocking(False)

        transport, _ = await loop.create_datagram_endpoint(
            lambda: BeaconProtocol(self),
            sock=sock,
        )
        self._transport = transport

    async def start(self) -> None:
        """Open the broadcast socket and start the beacon loop in the background."""
        if self._transport is None:
            await self._open_transport()
        logger.info(
            f"Broadcasting {self._identity.name}@{self._identity.ip}:{self._tcp_port} "
            f"to {self._broadcast_address}:{self._broadcast_port} every {self._interval}s"
        )
        self._broadcast_task = asyncio.create_task(self._broadcast_loop())

    async def stop(self) -> None:
        """Stop broadcasting and close the socket."""
        if self._broadcast_task:
            self._broadcast_task.cancel()
            try:
                await self._broadcast_task
            except asyncio.CancelledError:
                pass
            self._broadcast_task = None
        if self._transport:
            self._transport.close()
            self._transport = None
        logger.info("Discovery beacon stopped")

    async def run(self) -> None:
        """Broadcast until cancelled."""
        if self._transport is None:
            await self._open_transport()
        await self._broadcast_loop()

    def send_once(self) -> bool:
        """Send a single announcement. Failures are logged, never raised."""
        if self._transport is None:
            return False
        self.attempts += 1
        try:
            self._transport.sendto(
                self.payload(), (self._broadcast_address, self._broadcast_port)
            )
        except OSError as e:
            logger.warning(f"Broadcast failed: {e}")
            self.failed_sends += 1
            return False
        return True

    async def _broadcast_loop(self) -> None:
        """One send attempt per tick; a failed tick is just skipped."""
        while True:
            self.send_once()
            await asyncio.sleep(self._interval)
