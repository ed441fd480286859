"""Webhook client for status transition notifications."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

import httpx

from ..utils.metrics import CheckResult
from ..utils.status import Status


class WebhookClient:
    """
    Posts embed-style JSON notifications to a webhook endpoint.

    Delivery is best effort: failures are logged and reported through the
    return value, never raised and never retried.
    """

    USERNAME = "NetPulse Engine"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient = None,
        logger: logging.Logger = None
    ):
        """
        Initialize webhook client.

        Args:
            url: Destination webhook URL
            timeout: Request timeout in seconds
            client: Optional preconfigured httpx client (shared for all sends)
            logger: Optional logger instance
        """
        self.url = url
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def build_payload(cls, result: CheckResult, old: Status, new: Status) -> Dict[str, Any]:
        """
        Build the notification document for a transition.

        Args:
            result: Result that caused the transition
            old: Previous status
            new: New status

        Returns:
            Dict[str, Any]: JSON payload
        """
        if result.latency_ms is None:
            latency = "N/A"
        else:
            latency = f"{result.latency_ms:.2f}ms"

        return {
            "username": cls.USERNAME,
            "embeds": [{
                "title": "Protocol Status Transition",
                "color": new.to_color(),
                "fields": [
                    {"name": "Cluster", "value": result.server_name, "inline": True},
                    {"name": "Node IP", "value": result.target_address, "inline": True},
                    {"name": "Transition", "value": f"{old} → {new}", "inline": True},
                    {"name": "Metric", "value": result.check_label, "inline": True},
                    {"name": "Sync Latency", "value": latency, "inline": True},
                    {"name": "Reason", "value": result.message, "inline": False}
                ],
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "footer": {"text": "NetPulse Infrastructure Intelligence"}
            }]
        }

    async def send_transition(self, result: CheckResult, old: Status, new: Status) -> bool:
        """
        Send a transition notification.

        Returns:
            bool: True if the endpoint accepted the payload with a 2xx status
        """
        payload = self.build_payload(result, old, new)

        try:
            response = await self.client.post(self.url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.warning(f"Webhook delivery failed for {result.key}: {e}")
            return False

        self.logger.debug(f"Webhook delivered for {result.key}")
        return True

    async def aclose(self):
        await self.client.aclose()
