"""Shared pytest configuration and fixtures."""

import pytest

from netpulse.config.models import MonitorSystemConfig
from netpulse.utils.logger import setup_logger
from netpulse.utils.metrics import CheckResult


SAMPLE_CONFIG = {
    "check_interval": 30,
    "max_concurrency": 10,
    "categories": [
        {
            "name": "Core",
            "servers": [
                {
                    "name": "core-sw1",
                    "address": "10.0.0.0/30",
                    "checks": [{"type": "TcpPort", "port": 443}]
                }
            ]
        },
        {
            "name": "Edge",
            "servers": [
                {
                    "name": "edge-gw",
                    "address": "192.0.2.10",
                    "max_retries": 2,
                    "checks": [
                        {"type": "Ping", "count": 2, "timeout_ms": 500},
                        {"type": "UdpPort", "port": 53}
                    ]
                }
            ]
        }
    ]
}


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def config():
    """Monitor configuration with a CIDR server and a single-host server."""
    return MonitorSystemConfig(**SAMPLE_CONFIG)


@pytest.fixture
def make_result():
    """Factory for CheckResult records with sensible defaults."""
    def _make(
        success=True,
        server_name="core-sw1",
        target_address="10.0.0.1",
        check_label="TCP:443",
        category="Core",
        message="TCP Handshake Success",
        latency_ms=1.5,
        packet_loss=None
    ):
        return CheckResult(
            category=category,
            server_name=server_name,
            target_address=target_address,
            check_label=check_label,
            success=success,
            message=message,
            latency_ms=latency_ms,
            packet_loss=packet_loss
        )
    return _make
