"""Shared monitor state and Up/Down transition detection."""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from ..utils.metrics import CheckResult
from ..utils.status import Status
from .topology import ProbeInstance


SYNC_MESSAGE = "Synchronizing status..."


@dataclass(frozen=True)
class Transition:
    """A change of derived status for one tracked key."""

    result: CheckResult
    old: Status
    new: Status


class MonitorState:
    """
    Latest CheckResult per TrackedKey.

    Single writer (the reconciler), any number of snapshot readers. All
    access goes through one lock, and stored results are immutable, so a
    reader never observes a partially written entry.

    Placeholder entries inserted by `seed` are sentinels: until a key gets
    its first real result it compares as if it had no prior entry.
    """

    def __init__(self):
        self._results: Dict[str, CheckResult] = {}
        self._placeholders: Set[str] = set()
        self._lock = threading.Lock()

    def seed(self, instances: Iterable[ProbeInstance]) -> int:
        """
        Insert a "synchronizing" placeholder for every key not yet tracked.

        Args:
            instances: Expanded topology

        Returns:
            int: Number of tracked keys after seeding
        """
        now = datetime.now(timezone.utc)
        with self._lock:
            for instance in instances:
                if instance.key in self._results:
                    continue
                self._results[instance.key] = CheckResult(
                    category=instance.category,
                    server_name=instance.server.name,
                    target_address=instance.address,
                    check_label=instance.label,
                    success=False,
                    message=SYNC_MESSAGE,
                    timestamp=now
                )
                self._placeholders.add(instance.key)
            return len(self._results)

    def reconcile(self, result: CheckResult) -> Optional[Transition]:
        """
        Store a result and report whether its status changed.

        A key with no prior real result counts as previously Up, so a first
        failure is a transition and a first success is not.

        Args:
            result: Completed check result

        Returns:
            Transition if the derived status changed, else None
        """
        key = result.key
        with self._lock:
            if key in self._placeholders:
                previous = None
                self._placeholders.discard(key)
            else:
                previous = self._results.get(key)
            self._results[key] = result

        old = previous.status if previous is not None else Status.UP
        if old == result.status:
            return None
        return Transition(result=result, old=old, new=result.status)

    def get(self, key: str) -> Optional[CheckResult]:
        with self._lock:
            return self._results.get(key)

    def snapshot(self) -> List[CheckResult]:
        """Return a copy of every tracked result."""
        with self._lock:
            return list(self._results.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
