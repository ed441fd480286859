"""ICMP-blocked discovery fallback."""

import asyncio
import logging
from typing import Optional, Sequence, Tuple

from ..utils.metrics import ProbeOutcome
from .tcp_probe import TcpProbe


# Well-known ports covering remote access, web, database and game servers
DISCOVERY_PORTS: Tuple[Tuple[int, str], ...] = (
    (22, "SSH"),
    (3389, "RDP"),
    (80, "HTTP"),
    (443, "HTTPS"),
    (3306, "MySQL"),
    (30120, "FXServer"),
    (8080, "Web-Alt"),
    (5900, "VNC"),
    (27015, "Source"),
    (25565, "Minecraft"),
)

DISCOVERY_TIMEOUT_MS = 1200


class DiscoveryFallback:
    """
    Distinguishes "host down" from "ICMP filtered".

    When a ping fails, every discovery port is tried in parallel. The first
    port that accepts a connection turns the ping result into a success;
    remaining attempts are cancelled.
    """

    def __init__(
        self,
        tcp_probe: TcpProbe,
        logger: logging.Logger,
        ports: Sequence[Tuple[int, str]] = DISCOVERY_PORTS,
        timeout_ms: int = DISCOVERY_TIMEOUT_MS
    ):
        self.tcp_probe = tcp_probe
        self.ports = ports
        self.timeout_ms = timeout_ms
        self.logger = logger.getChild(self.__class__.__name__)

    async def discover(self, address: str) -> Optional[Tuple[str, ProbeOutcome]]:
        """
        Try all discovery ports concurrently.

        Args:
            address: Host that failed its ICMP probe

        Returns:
            (service name, TCP outcome) of the first responding port, or None
        """
        async def attempt(port: int, name: str) -> Tuple[str, ProbeOutcome]:
            outcome = await self.tcp_probe.probe(address, port=port, timeout_ms=self.timeout_ms)
            return name, outcome

        tasks = [asyncio.create_task(attempt(port, name)) for port, name in self.ports]

        try:
            for next_done in asyncio.as_completed(tasks):
                name, outcome = await next_done
                if outcome.success:
                    return name, outcome
            return None
        finally:
            for task in tasks:
                task.cancel()

    async def verify(self, address: str, failed: ProbeOutcome) -> ProbeOutcome:
        """
        Reclassify a failed ping if any well-known service answers.

        Args:
            address: Host that failed its ICMP probe
            failed: The failed ping outcome

        Returns:
            ProbeOutcome: Masked success, or the original failure
        """
        found = await self.discover(address)
        if found is None:
            return failed

        name, outcome = found
        if outcome.latency_ms is None:
            port_latency = "N/A"
        else:
            port_latency = f"{outcome.latency_ms:.1f}"

        self.logger.debug(f"{address} is filtering ICMP, {name} answered")

        return ProbeOutcome(
            success=True,
            latency_ms=None,
            packet_loss=0.0,
            message=f"ICMP Filtered (Verified via {name} [{port_latency}ms])"
        )
