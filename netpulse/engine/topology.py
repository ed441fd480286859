"""Topology expansion: servers and CIDR blocks into probe instances."""

import ipaddress
from dataclasses import dataclass
from typing import List

from ..config.models import CheckConfig, MonitorSystemConfig, ServerConfig
from ..utils.metrics import tracked_key


@dataclass(frozen=True)
class ProbeInstance:
    """One unit of scheduling: a server, a concrete address and a check."""

    category: str
    server: ServerConfig
    address: str
    check: CheckConfig

    @property
    def label(self) -> str:
        return self.check.label

    @property
    def key(self) -> str:
        return tracked_key(self.server.name, self.address, self.check.label)


def expand_address(raw_address: str) -> List[str]:
    """
    Expand a configured address into the concrete addresses to probe.

    A CIDR block yields every usable host address (network and broadcast
    excluded, following ipaddress host enumeration). Anything else, including
    a bare IP or a hostname, is returned unchanged as the only address.

    Args:
        raw_address: Host, IP or CIDR block

    Returns:
        List[str]: Addresses to probe
    """
    if "/" not in raw_address:
        return [raw_address]

    try:
        network = ipaddress.ip_network(raw_address, strict=False)
    except ValueError:
        return [raw_address]

    return [str(host) for host in network.hosts()]


def build_instances(config: MonitorSystemConfig) -> List[ProbeInstance]:
    """Expand the whole configured topology into probe instances."""
    instances = []
    for category in config.categories:
        for server in category.servers:
            for address in expand_address(server.address):
                for check in server.checks:
                    instances.append(ProbeInstance(
                        category=category.name,
                        server=server,
                        address=address,
                        check=check
                    ))
    return instances
