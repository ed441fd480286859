"""Pydantic configuration models for the reachability monitor."""

from pydantic import BaseModel, Field, field_validator
from typing import Annotated, List, Literal, Optional, Union


DEFAULT_TIMEOUT_MS = 3500


class PingCheck(BaseModel):
    """ICMP echo check."""
    type: Literal["Ping"] = "Ping"
    count: int = Field(default=1, ge=1)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, ge=1)

    @property
    def label(self) -> str:
        return "Ping"


class TcpPortCheck(BaseModel):
    """TCP connect check against a single port."""
    type: Literal["TcpPort"] = "TcpPort"
    port: int = Field(ge=1, le=65535)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, ge=1)

    @property
    def label(self) -> str:
        return f"TCP:{self.port}"


class UdpPortCheck(BaseModel):
    """UDP datagram send check against a single port."""
    type: Literal["UdpPort"] = "UdpPort"
    port: int = Field(ge=1, le=65535)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, ge=1)  # Unused by the UDP probe

    @property
    def label(self) -> str:
        return f"UDP:{self.port}"


CheckConfig = Annotated[
    Union[PingCheck, TcpPortCheck, UdpPortCheck],
    Field(discriminator="type")
]


class ServerConfig(BaseModel):
    """A monitored server: a single host or a CIDR block."""
    name: str
    address: str
    checks: List[CheckConfig] = Field(default_factory=list)
    max_retries: int = Field(default=1, ge=0)

    @field_validator('address')
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Reject blank addresses."""
        v = v.strip()
        if not v:
            raise ValueError('Server address must not be empty')
        return v


class CategoryConfig(BaseModel):
    """Named group of servers."""
    name: str
    servers: List[ServerConfig] = Field(default_factory=list)


class MonitorSystemConfig(BaseModel):
    """Root configuration model for the monitor."""
    categories: List[CategoryConfig] = Field(default_factory=list)
    check_interval: int = Field(ge=1)  # Seconds between cycle starts
    webhook_url: Optional[str] = None
    api_port: int = Field(default=3000, ge=1, le=65535)
    max_concurrency: int = Field(default=1500, ge=1)
    dns_nameservers: List[str] = Field(default_factory=lambda: ["1.1.1.1", "1.0.0.1"])

    @field_validator('webhook_url')
    @classmethod
    def validate_webhook_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty URL (e.g. unset ${WEBHOOK_URL}) as no webhook."""
        if v is None or not v.strip():
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Webhook URL must start with http:// or https://')
        return v
