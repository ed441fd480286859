"""Reachability status enumeration."""

from enum import Enum


class Status(Enum):
    """Derived Up/Down status of a tracked check."""

    UP = "Up"
    DOWN = "Down"

    @classmethod
    def from_success(cls, success: bool) -> "Status":
        """Derive status from a result's success flag."""
        return cls.UP if success else cls.DOWN

    def to_color(self) -> int:
        """
        Convert status to the embed color used in webhook notifications.

        Returns:
            int: RGB color (green for Up, red for Down)
        """
        return {
            Status.UP: 0x2ECC71,
            Status.DOWN: 0xE74C3C
        }[self]

    def __str__(self) -> str:
        return self.value
