"""aiohttp server exposing the liveness and readiness endpoints."""

import asyncio
from typing import Any, Optional

from aiohttp import web

from healthgate.core.exceptions import ShutdownTimeoutError
from healthgate.core.health.state import ReadinessState
from healthgate.core.logging import logger

HEALTH_CHECK_PATH = "/health-check"
READY_CHECK_PATH = "/ready-check"


class HealthServer:
    """Async health server backed by its own ``web.Application``.

    Routes are bound on the per-instance application, never on a global
    router, so several servers can coexist in one process.
    """

    def __init__(self, state: ReadinessState):
        """Initialize the health server.

        Args:
            state: The readiness flag read by ``/ready-check``.
        """
        self.state = state
        self.app = web.Application()
        self.app.add_routes(
            [
                web.get(HEALTH_CHECK_PATH, self.health_handler),
                web.get(READY_CHECK_PATH, self.ready_handler),
            ]
        )
        self.runner: Optional[web.AppRunner] = None
        self.site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(context_base="healthgate", operation="health_server")

    async def health_handler(self, request: web.Request) -> web.Response:
        """Liveness probe: the process is up and serving HTTP."""
        return web.Response(status=200)

    async def ready_handler(self, request: web.Request) -> web.Response:
        """Readiness probe: 200 when the last evaluation pass was ready, 503 otherwise.

        Only reads the shared flag; never runs probes.
        """
        if self.state.get():
            return web.Response(status=200)
        return web.Response(status=503)

    @property
    def bound_addresses(self) -> list[Any]:
        """Socket addresses the listener is bound to (empty before ``start``)."""
        if self.runner is None:
            return []
        return list(self.runner.addresses)

    async def start(self, host: str = "0.0.0.0", port: int = 8080) -> None:
        """Bind the listener and start serving.

        Args:
            host: The host to listen on.
            port: The port to listen on; ``0`` picks a free port.

        Raises:
            OSError: If the address cannot be bound.
        """
        self.runner = web.AppRunner(self.app, access_log=None)
        await self.runner.setup()
        self.site = web.TCPSite(self.runner, host=host, port=port)
        try:
            await self.site.start()
        except BaseException:
            await self.runner.cleanup()
            self.runner = None
            self.site = None
            raise
        self.logger.info("Health server listening", extra={"addresses": self.bound_addresses})

    async def stop(self, grace_period: float) -> None:
        """Stop accepting connections and drain in-flight requests.

        Args:
            grace_period: Seconds allowed for the graceful shutdown.

        Raises:
            ShutdownTimeoutError: If the shutdown did not finish in time.
        """
        runner = self.runner
        self.runner = None
        self.site = None
        if runner is None:
            return

        try:
            await asyncio.wait_for(runner.cleanup(), timeout=grace_period)
        except asyncio.TimeoutError:
            raise ShutdownTimeoutError(grace_period) from None
