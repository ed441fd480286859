"""UDP send probe."""

import asyncio
import socket
import time

from ..utils.metrics import ProbeOutcome
from .base import BaseProbe, safe_probe


class UdpProbe(BaseProbe):
    """
    Sends a zero-length datagram to address:port.

    UDP has no handshake, so success only means the datagram left the local
    socket without error; remote receipt is not verified.
    """

    @safe_probe
    async def probe(self, address: str, port: int, timeout_ms: int = None) -> ProbeOutcome:
        start_time = time.perf_counter()
        loop = asyncio.get_running_loop()

        try:
            infos = await loop.getaddrinfo(address, port, type=socket.SOCK_DGRAM)
        except socket.gaierror as e:
            return ProbeOutcome(success=False, message=f"Domain Resolution Error: {e}")
        except OSError as e:
            return ProbeOutcome(success=False, message=f"Local Socket Error: {e}")

        try:
            family, _, _, _, sockaddr = infos[0]
            sock = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as e:
            return ProbeOutcome(success=False, message=f"Local Socket Error: {e}")

        with sock:
            try:
                sock.setblocking(False)
                sock.bind(("::" if family == socket.AF_INET6 else "0.0.0.0", 0))
            except OSError as e:
                return ProbeOutcome(success=False, message=f"Local Socket Error: {e}")

            try:
                await loop.sock_sendto(sock, b"", sockaddr)
            except OSError as e:
                self.logger.debug(f"UDP send to {address}:{port} failed: {e}")
                return ProbeOutcome(success=False, message="UDP Broadcast Failure")

        return ProbeOutcome(
            success=True,
            latency_ms=(time.perf_counter() - start_time) * 1000,
            message="UDP Probe Transmitted"
        )
