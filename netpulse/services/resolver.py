"""Async DNS resolution for probe targets."""

import ipaddress
import logging
from typing import List, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver


class ResolutionError(Exception):
    """Raised when a hostname cannot be resolved to an IP address."""


class DnsResolver:
    """
    Resolve probe targets to IP addresses.

    Literal IPv4/IPv6 addresses are returned without any I/O. Hostnames are
    looked up with dnspython against the configured nameservers, A records
    first, then AAAA.
    """

    RECORD_TYPES = ("A", "AAAA")

    def __init__(
        self,
        nameservers: Optional[List[str]] = None,
        lifetime: float = 5.0,
        logger: logging.Logger = None
    ):
        """
        Initialize resolver.

        Args:
            nameservers: Upstream nameserver IPs; system configuration when empty
            lifetime: Total time budget for one lookup in seconds
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

        if nameservers:
            self._resolver = dns.asyncresolver.Resolver(configure=False)
            self._resolver.nameservers = list(nameservers)
            self.logger.info(f"DNS resolver configured: {' / '.join(nameservers)}")
        else:
            self._resolver = dns.asyncresolver.Resolver()
            self.logger.info("DNS resolver configured from system settings")

        self._resolver.lifetime = lifetime

    async def resolve(self, address: str) -> str:
        """
        Resolve an address to a single IP string.

        Args:
            address: Literal IP or hostname

        Returns:
            str: First IP address found

        Raises:
            ResolutionError: If no address could be obtained
        """
        try:
            return str(ipaddress.ip_address(address))
        except ValueError:
            pass

        for rdtype in self.RECORD_TYPES:
            try:
                answer = await self._resolver.resolve(address, rdtype)
            except dns.resolver.NoAnswer:
                continue
            except dns.resolver.NXDOMAIN:
                raise ResolutionError(f"DNS Resolution Failed: {address} does not exist")
            except dns.exception.Timeout:
                raise ResolutionError(f"DNS Resolution Failed: lookup of {address} timed out")
            except dns.exception.DNSException as e:
                raise ResolutionError(f"DNS Resolution Failed: {e}")

            for record in answer:
                return record.address

        raise ResolutionError("No IP Address Found")
