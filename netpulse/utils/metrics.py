"""Result data structures for probes and checks."""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from .status import Status


@dataclass
class ProbeOutcome:
    """Raw outcome of a single protocol probe."""

    success: bool
    latency_ms: Optional[float] = None
    packet_loss: Optional[float] = None
    message: str = ""


@dataclass(frozen=True)
class CheckResult:
    """Standard result format for one (server, address, check) measurement."""

    category: str
    server_name: str
    target_address: str
    check_label: str  # e.g. "Ping", "TCP:443", "UDP:53"
    success: bool
    message: str
    latency_ms: Optional[float] = None
    packet_loss: Optional[float] = None
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            object.__setattr__(self, "timestamp", datetime.now(timezone.utc))

    @property
    def key(self) -> str:
        """Stable identity correlating this result across cycles."""
        return tracked_key(self.server_name, self.target_address, self.check_label)

    @property
    def status(self) -> Status:
        return Status.from_success(self.success)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize for the query surface.

        Returns:
            Dict[str, Any]: JSON-compatible record
        """
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


def tracked_key(server_name: str, target_address: str, check_label: str) -> str:
    """Build the TrackedKey for a server/address/check triple."""
    return f"{server_name}-{target_address}-{check_label}"
