"""ICMP echo probe backed by the system ping utility."""

import asyncio
import contextlib
import logging
import math
import platform
import re
import shutil
import time
from typing import List, Optional

from ..services.resolver import DnsResolver, ResolutionError
from ..utils.metrics import ProbeOutcome
from .base import BaseProbe, safe_probe


class ProbeStartupError(RuntimeError):
    """Raised when the ICMP client cannot be initialized."""


class PingProbe(BaseProbe):
    """
    Sends up to `count` ICMP echo requests, one at a time.

    The first reply ends the probe with 0% loss; if every request times out
    the probe fails with 100% loss. Each echo runs as its own `ping`
    subprocess so that many probes can be in flight without blocking the
    event loop.
    """

    RETRY_DELAY_SECONDS = 0.05
    # Grace on top of the per-request timeout for process startup/teardown
    PROCESS_GRACE_SECONDS = 0.5
    RTT_PATTERN = re.compile(r"time[=<]\s*([\d.]+)\s*ms", re.IGNORECASE)

    def __init__(
        self,
        resolver: DnsResolver,
        logger: logging.Logger,
        ping_binary: Optional[str] = None
    ):
        """
        Initialize ICMP probe.

        Args:
            resolver: Resolver used to turn hostnames into IPs
            logger: Logger instance
            ping_binary: Explicit path to the ping executable

        Raises:
            ProbeStartupError: If no ping executable is available
        """
        super().__init__(logger)
        self.resolver = resolver
        self.ping_binary = ping_binary or shutil.which("ping")
        self.system = platform.system().lower()

        if not self.ping_binary:
            raise ProbeStartupError(
                "Failed to create ICMP client: 'ping' executable not found on PATH"
            )

    @safe_probe
    async def probe(self, address: str, count: int = 1, timeout_ms: int = 3500) -> ProbeOutcome:
        """
        Ping an address.

        Args:
            address: Literal IP or hostname
            count: Maximum echo requests to send
            timeout_ms: Per-request timeout in milliseconds

        Returns:
            ProbeOutcome: First reply, resolution failure, or total loss
        """
        try:
            ip = await self.resolver.resolve(address)
        except ResolutionError as e:
            return ProbeOutcome(success=False, message=f"Domain Resolution Error: {e}")

        for attempt in range(count):
            rtt_ms = await self._echo(ip, timeout_ms)
            if rtt_ms is not None:
                return ProbeOutcome(
                    success=True,
                    latency_ms=rtt_ms,
                    packet_loss=0.0,
                    message="ICMP Response OK"
                )

            if attempt < count - 1:
                await asyncio.sleep(self.RETRY_DELAY_SECONDS)

        return ProbeOutcome(
            success=False,
            packet_loss=100.0,
            message="Request Timeout (Packet Loss 100%)"
        )

    def _build_command(self, ip: str, timeout_ms: int) -> List[str]:
        """Return platform-specific ping arguments for a single echo."""
        if self.system == "windows":
            # -n count, -w timeout(ms)
            return [self.ping_binary, "-n", "1", "-w", str(timeout_ms), ip]
        if self.system == "darwin":
            # macOS: -W timeout(ms)
            return [self.ping_binary, "-c", "1", "-W", str(timeout_ms), ip]
        # Linux: -W timeout(s), whole seconds only
        timeout_s = max(1, math.ceil(timeout_ms / 1000))
        return [self.ping_binary, "-c", "1", "-W", str(timeout_s), ip]

    async def _echo(self, ip: str, timeout_ms: int) -> Optional[float]:
        """
        Send one echo request.

        Returns:
            Round-trip time in milliseconds, or None if no reply arrived
        """
        start_time = time.perf_counter()
        proc = await asyncio.create_subprocess_exec(
            *self._build_command(ip, timeout_ms),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, _ = await asyncio.wait_for(
                proc.communicate(),
                timeout=timeout_ms / 1000.0 + self.PROCESS_GRACE_SECONDS
            )
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            return None

        elapsed_ms = (time.perf_counter() - start_time) * 1000

        if proc.returncode != 0:
            return None

        output = stdout.decode(errors="ignore")

        # Windows ping exits 0 on "Destination host unreachable"; only a TTL line is a reply
        if self.system == "windows" and "TTL=" not in output.upper():
            return None

        match = self.RTT_PATTERN.search(output)
        rtt_ms = float(match.group(1)) if match else elapsed_ms

        # Linux -W only takes whole seconds; late replies count as lost
        if rtt_ms > timeout_ms:
            return None
        return rtt_ms
