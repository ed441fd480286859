"""Fire-and-forget notification dispatch for status transitions."""

import asyncio
import logging
from typing import Optional, Set

from ..services.webhook_client import WebhookClient
from ..utils.status import Status
from .state import Transition


class NotificationDispatcher:
    """
    Logs every transition and, when a webhook is configured, sends it in
    a background task that the reconciler never awaits.
    """

    def __init__(self, webhook: Optional[WebhookClient], logger: logging.Logger):
        """
        Initialize dispatcher.

        Args:
            webhook: Webhook client, or None to only log transitions
            logger: Logger instance
        """
        self.webhook = webhook
        self.logger = logger.getChild(self.__class__.__name__)
        self._pending: Set[asyncio.Task] = set()

    def dispatch(self, transition: Transition) -> Optional[asyncio.Task]:
        """
        Report a transition.

        Returns:
            The background send task, or None when no webhook is configured
        """
        result = transition.result
        message = (
            f"[CHANGE] {result.server_name}/{result.check_label} "
            f"({result.target_address}) -> {transition.new}"
        )
        if transition.new == Status.DOWN:
            self.logger.error(message)
        else:
            self.logger.warning(message)

        if self.webhook is None:
            return None

        task = asyncio.create_task(
            self.webhook.send_transition(result, transition.old, transition.new)
        )
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.logger.warning(f"Notification dispatch failed: {error}")

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self):
        """Wait for in-flight notifications (used by run-once mode)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self):
        await self.drain()
        if self.webhook is not None:
            await self.webhook.aclose()
