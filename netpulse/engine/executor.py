"""Check execution: runs the right probe for an instance, with retries."""

import logging
from datetime import datetime, timezone

from ..config.models import MonitorSystemConfig, PingCheck, TcpPortCheck, UdpPortCheck
from ..probes.discovery import DiscoveryFallback
from ..probes.ping_probe import PingProbe
from ..probes.tcp_probe import TcpProbe
from ..probes.udp_probe import UdpProbe
from ..services.resolver import DnsResolver
from ..services.retry_handler import RetryHandler
from ..utils.metrics import CheckResult
from .topology import ProbeInstance


class CheckExecutor:
    """Turns a ProbeInstance into a CheckResult."""

    def __init__(
        self,
        ping_probe: PingProbe,
        tcp_probe: TcpProbe,
        udp_probe: UdpProbe,
        discovery: DiscoveryFallback,
        logger: logging.Logger
    ):
        self.ping_probe = ping_probe
        self.tcp_probe = tcp_probe
        self.udp_probe = udp_probe
        self.discovery = discovery
        self.logger = logger.getChild(self.__class__.__name__)

    @classmethod
    def create(cls, config: MonitorSystemConfig, logger: logging.Logger) -> "CheckExecutor":
        """
        Build an executor with the process-wide resolver and probe clients.

        Raises:
            ProbeStartupError: If the ICMP client cannot be initialized
        """
        resolver = DnsResolver(config.dns_nameservers, logger=logger.getChild("DnsResolver"))
        tcp_probe = TcpProbe(logger)
        return cls(
            ping_probe=PingProbe(resolver, logger),
            tcp_probe=tcp_probe,
            udp_probe=UdpProbe(logger),
            discovery=DiscoveryFallback(tcp_probe, logger),
            logger=logger
        )

    async def execute(self, instance: ProbeInstance) -> CheckResult:
        """
        Run a single attempt of the instance's check.

        A failed ping is handed to the discovery fallback before the result
        is built.
        """
        timestamp = datetime.now(timezone.utc)
        check = instance.check
        address = instance.address

        if isinstance(check, PingCheck):
            outcome = await self.ping_probe.probe(
                address, count=check.count, timeout_ms=check.timeout_ms
            )
            if not outcome.success:
                outcome = await self.discovery.verify(address, outcome)
        elif isinstance(check, TcpPortCheck):
            outcome = await self.tcp_probe.probe(
                address, port=check.port, timeout_ms=check.timeout_ms
            )
        elif isinstance(check, UdpPortCheck):
            outcome = await self.udp_probe.probe(address, port=check.port)
        else:
            raise TypeError(f"Unsupported check type: {type(check).__name__}")

        return CheckResult(
            category=instance.category,
            server_name=instance.server.name,
            target_address=address,
            check_label=check.label,
            success=outcome.success,
            message=outcome.message,
            latency_ms=outcome.latency_ms,
            packet_loss=outcome.packet_loss,
            timestamp=timestamp
        )

    async def execute_with_retry(self, instance: ProbeInstance) -> CheckResult:
        """Run the check, retrying up to the server's max_retries on failure."""
        return await RetryHandler.until_success(
            lambda: self.execute(instance),
            max_retries=instance.server.max_retries,
            logger=self.logger
        )
