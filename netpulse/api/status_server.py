"""Read-only HTTP status surface over the monitor state."""

import logging

from aiohttp import web

from ..engine.state import MonitorState


class StatusServer:
    """
    Small aiohttp server exposing the state snapshot.

    Endpoints:
        GET /api/stats  -> JSON list of every tracked check result
        GET /health     -> liveness with the number of tracked keys
    """

    def __init__(
        self,
        state: MonitorState,
        port: int,
        host: str = "0.0.0.0",
        logger: logging.Logger = None
    ):
        self.state = state
        self.host = host
        self.port = port
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)
        self._runner = None

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/stats", self._handle_stats)
        app.router.add_get("/health", self._handle_health)
        return app

    async def _handle_stats(self, request: web.Request) -> web.Response:
        return web.json_response([result.to_dict() for result in self.state.snapshot()])

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "ok", "tracked": len(self.state)})

    async def start(self):
        """
        Bind and start serving.

        Raises:
            OSError: If the listening port cannot be bound
        """
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)

        try:
            await site.start()
        except OSError:
            await self._runner.cleanup()
            self._runner = None
            raise

        self.logger.info(f"Dashboard: http://localhost:{self.port}")

    async def stop(self):
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
