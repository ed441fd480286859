"""TCP connect probe."""

import asyncio
import contextlib
import time

from ..utils.metrics import ProbeOutcome
from .base import BaseProbe, safe_probe


class TcpProbe(BaseProbe):
    """Checks that a TCP handshake to address:port completes in time."""

    @safe_probe
    async def probe(self, address: str, port: int, timeout_ms: int) -> ProbeOutcome:
        """
        Attempt one TCP connection.

        Args:
            address: Host or IP
            port: Destination port
            timeout_ms: Connect timeout in milliseconds

        Returns:
            ProbeOutcome: success with handshake latency, or failure
        """
        start_time = time.perf_counter()

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(address, port),
                timeout=timeout_ms / 1000.0
            )
        except asyncio.TimeoutError:
            return ProbeOutcome(success=False, message="Port Timeout")
        except OSError as e:
            return ProbeOutcome(success=False, message=f"Connection Refused: {e}")

        latency_ms = (time.perf_counter() - start_time) * 1000

        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()

        return ProbeOutcome(
            success=True,
            latency_ms=latency_ms,
            message="TCP Handshake Success"
        )
