"""Periodic readiness evaluation.

The evaluator owns the registered probes and refreshes the shared
``ReadinessState`` on a fixed cadence until the shutdown signal fires.
"""

import asyncio
from collections.abc import Sequence

from healthgate.core.config import settings
from healthgate.core.exceptions import ProbeRegistrationError
from healthgate.core.health.state import ReadinessState
from healthgate.core.logging import logger
from healthgate.core.protocols.readiness import ReadinessProbe


class ReadinessEvaluator:
    """Computes the AND of all registered probes on a fixed interval.

    Probes must be registered before ``run()``; afterwards the probe list is
    read without locking, so ``add_probe`` refuses late registrations.

    There is no per-probe timeout: a probe that never returns stalls its
    pass (and every later one) indefinitely.  Probes are run in a worker
    thread so a blocking probe never stalls the event loop serving HTTP.
    """

    def __init__(
        self,
        state: ReadinessState | None = None,
        interval: float | None = None,
    ) -> None:
        """Initialize the evaluator.

        Args:
            state: Shared readiness flag. A fresh one is created if omitted.
            interval: Seconds between passes. Defaults to ``settings.CHECK_INTERVAL``.
        """
        self.state = state or ReadinessState()
        self.interval = settings.CHECK_INTERVAL if interval is None else interval
        self._probes: list[ReadinessProbe] = []
        self._started = False
        self._last_ready: bool | None = None
        self.logger = logger.with_context(context_base="healthgate", operation="evaluator")

    @property
    def probes(self) -> Sequence[ReadinessProbe]:
        return tuple(self._probes)

    def add_probe(self, probe: ReadinessProbe) -> None:
        """Register a probe.

        Raises:
            ProbeRegistrationError: If the evaluation loop has already started.
        """
        if self._started:
            raise ProbeRegistrationError("readiness probes must be registered before run()")
        self._probes.append(probe)

    def _check_probes(self) -> bool:
        # Stops at the first failing probe; later probes are not queried this pass.
        for probe in self._probes:
            if not probe.is_ready():
                return False
        return True

    async def evaluate(self) -> bool:
        """Run a single evaluation pass and publish the result.

        Returns:
            The readiness computed by this pass.
        """
        if not self._probes:
            ready = True
        else:
            try:
                ready = await asyncio.to_thread(self._check_probes)
            except Exception:
                self.logger.exception("Readiness probe raised; marking pass as not ready")
                ready = False

        self.state.set(ready)

        if ready != self._last_ready:
            self.logger.info(
                "Readiness changed to %s", "ready" if ready else "not ready", extra={"ready": ready}
            )
        else:
            self.logger.debug("Readiness unchanged", extra={"ready": ready})
        self._last_ready = ready

        return ready

    async def run(self, shutdown: asyncio.Event) -> None:
        """Evaluate forever, sleeping ``interval`` between passes, until ``shutdown`` is set."""
        self._started = True
        self.logger.info(
            "Readiness evaluation loop started",
            extra={"probe_count": len(self._probes), "interval": self.interval},
        )

        while not shutdown.is_set():
            await self.evaluate()
            try:
                await asyncio.wait_for(shutdown.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        self.logger.info("Readiness evaluation loop stopped")
