"""Base probe abstract class for all protocol probes."""

from abc import ABC, abstractmethod
from functools import wraps
import logging

from ..utils.metrics import ProbeOutcome


class BaseProbe(ABC):
    """Abstract base class for all reachability probes."""

    def __init__(self, logger: logging.Logger):
        """
        Initialize base probe.

        Args:
            logger: Logger instance
        """
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    async def probe(self, address: str, **params) -> ProbeOutcome:
        """
        Probe a single address.

        Args:
            address: Concrete host or IP to test
            **params: Protocol parameters (port, count, timeout_ms)

        Returns:
            ProbeOutcome: Result of the probe, failures included

        Note:
            Implementations should use the @safe_probe decorator so that
            unexpected errors come back as failed outcomes.
        """
        pass


def safe_probe(func):
    """
    Decorator converting unexpected probe exceptions into failed outcomes.

    Args:
        func: Probe method to wrap

    Returns:
        Wrapped coroutine that never raises Exception subclasses
    """
    @wraps(func)
    async def wrapper(self, address, *args, **kwargs):
        try:
            return await func(self, address, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Probe of {address} failed: {e}", exc_info=True)
            return ProbeOutcome(success=False, message=f"Probe error: {e}")
    return wrapper
