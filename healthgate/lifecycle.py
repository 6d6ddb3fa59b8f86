"""Lifecycle orchestration for the embedded health check.

``HealthCheck`` wires the readiness evaluator and the HTTP server together
and coordinates three concurrent activities on the caller's event loop:

* the readiness evaluation loop,
* the serve activity, which owns the listener and the completion barrier,
* the shutdown watcher, which reacts to the caller's shutdown signal.

Typical usage::

    done = WaitGroup()
    shutdown = asyncio.Event()

    health = HealthCheck()
    health.init("0.0.0.0:8080", done)
    health.add_readiness_probe(db_probe)
    health.run(shutdown)
    ...
    shutdown.set()
    await done.wait()
"""

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Optional

from healthgate.core.config import parse_listen_address, settings
from healthgate.core.exceptions import (
    LifecycleError,
    ListenerError,
    ProbeRegistrationError,
    ShutdownTimeoutError,
)
from healthgate.core.health.evaluator import ReadinessEvaluator
from healthgate.core.health.state import ReadinessState
from healthgate.core.logging import logger
from healthgate.core.protocols.readiness import ReadinessProbe
from healthgate.core.sync import WaitGroup
from healthgate.http.health_server import HealthServer


class LifecycleState(str, Enum):
    """States of a ``HealthCheck``; transitions only move forward."""

    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


def _exit_process(exc: BaseException) -> None:
    """Default fatal handler.

    ``SystemExit`` raised inside a task propagates out of the event loop, so
    the process stops loudly instead of running without its health surface.
    """
    raise SystemExit(1) from exc


class HealthCheck:
    """Liveness/readiness endpoint embedded in a long-running service."""

    def __init__(
        self,
        *,
        interval: float | None = None,
        grace_period: float | None = None,
        on_fatal: Callable[[BaseException], None] | None = None,
    ) -> None:
        """Create the health check.

        Args:
            interval: Seconds between readiness passes. Defaults to ``settings.CHECK_INTERVAL``.
            grace_period: Seconds allowed for graceful HTTP shutdown.
                Defaults to ``settings.GRACE_PERIOD``.
            on_fatal: Called with a ``ListenerError`` when the listener dies
                unexpectedly. Defaults to exiting the process.
        """
        self.readiness = ReadinessState()
        self.evaluator = ReadinessEvaluator(self.readiness, interval)
        self.grace_period = settings.GRACE_PERIOD if grace_period is None else grace_period
        self.on_fatal = on_fatal or _exit_process
        self.server: Optional[HealthServer] = None
        self.fatal_error: Optional[ListenerError] = None

        self._state = LifecycleState.CREATED
        self._host = ""
        self._port = 0
        self._barrier: Optional[WaitGroup] = None
        self._start_attempted: Optional[asyncio.Event] = None
        self._evaluator_task: Optional[asyncio.Task] = None
        self._serve_task: Optional[asyncio.Task] = None
        self._watcher_task: Optional[asyncio.Task] = None
        self.logger = logger.with_context(context_base="healthgate")

    @property
    def state(self) -> LifecycleState:
        return self._state

    def init(self, listen_address: str | None, completion_barrier: WaitGroup) -> None:
        """Bind the listen address and register the HTTP routes.

        Args:
            listen_address: ``host:port`` to serve on. Defaults to ``settings.LISTEN_ADDRESS``.
            completion_barrier: Decremented exactly once when the serve activity ends.

        Raises:
            LifecycleError: If called more than once.
            ConfigurationError: If the listen address is malformed.
        """
        if self._state is not LifecycleState.CREATED:
            raise LifecycleError(f"init() called in state {self._state.value}")

        log = self.logger.with_context(operation="init")
        address = listen_address or settings.LISTEN_ADDRESS
        self._host, self._port = parse_listen_address(address)
        self._barrier = completion_barrier
        self.server = HealthServer(self.readiness)
        self._state = LifecycleState.INITIALIZED

        log.info("Health check initialized", extra={"listen_address": address})

    def add_readiness_probe(self, probe: ReadinessProbe) -> None:
        """Register a readiness probe. Only valid before ``run()``.

        Raises:
            ProbeRegistrationError: If the health check is already running.
        """
        if self._state not in (LifecycleState.CREATED, LifecycleState.INITIALIZED):
            raise ProbeRegistrationError("readiness probes must be registered before run()")
        self.evaluator.add_probe(probe)

    def is_ready(self) -> bool:
        """Point-in-time readiness, read under the same lock as ``/ready-check``."""
        return self.readiness.get()

    def run(self, shutdown: asyncio.Event) -> None:
        """Launch the evaluation loop, the listener and the shutdown watcher.

        Returns as soon as the tasks are scheduled; bind failures surface
        later through ``on_fatal``.  Must be called from a running event loop.

        Args:
            shutdown: Set by the caller to request a graceful shutdown.

        Raises:
            LifecycleError: If ``init()`` has not been called or ``run()`` was already called.
        """
        if self._state is not LifecycleState.INITIALIZED:
            raise LifecycleError(f"run() called in state {self._state.value}")

        loop = asyncio.get_running_loop()
        self.logger.with_context(operation="run").info("Health check starting")

        handoff: asyncio.Future[None] = loop.create_future()
        self._start_attempted = asyncio.Event()

        assert self._barrier is not None
        self._barrier.add(1)

        self._evaluator_task = loop.create_task(
            self.evaluator.run(shutdown), name="healthgate-evaluator"
        )
        self._serve_task = loop.create_task(self._serve(handoff), name="healthgate-serve")
        self._watcher_task = loop.create_task(
            self._watch_shutdown(shutdown, handoff), name="healthgate-shutdown-watcher"
        )
        self._state = LifecycleState.RUNNING

    async def wait_stopped(self) -> None:
        """Wait for the serve activity to end.

        Raises:
            LifecycleError: If ``run()`` has not been called.
            ListenerError: If the listener terminated unexpectedly.
        """
        if self._serve_task is None:
            raise LifecycleError("wait_stopped() called before run()")
        await asyncio.shield(self._serve_task)
        if self.fatal_error is not None:
            raise self.fatal_error

    async def _serve(self, handoff: "asyncio.Future[None]") -> None:
        assert self.server is not None and self._barrier is not None
        assert self._start_attempted is not None
        log = self.logger.with_context(operation="serve")

        try:
            try:
                await self.server.start(self._host, self._port)
            except Exception as exc:
                self.fatal_error = ListenerError(
                    f"health listener on {self._host}:{self._port} terminated: {exc}"
                )
                self.fatal_error.__cause__ = exc
            finally:
                self._start_attempted.set()

            if self.fatal_error is None:
                # Rendezvous with the watcher: the listener is closed once this resolves.
                await handoff
                log.info("Health check shutdown complete")
        finally:
            self._state = LifecycleState.STOPPED
            self._barrier.done()

        if self.fatal_error is not None:
            log.critical("Health listener terminated unexpectedly", exc_info=self.fatal_error)
            self.on_fatal(self.fatal_error)

    async def _watch_shutdown(self, shutdown: asyncio.Event, handoff: "asyncio.Future[None]") -> None:
        assert self.server is not None and self._start_attempted is not None
        log = self.logger.with_context(operation="shutdown")

        await shutdown.wait()
        # Don't race a listener that is still binding.
        await self._start_attempted.wait()

        log.info("Health check shutdown initiated", extra={"grace_period": self.grace_period})
        if self._state is LifecycleState.RUNNING:
            self._state = LifecycleState.SHUTTING_DOWN

        try:
            await self.server.stop(self.grace_period)
        except ShutdownTimeoutError as exc:
            log.warning(str(exc))
        except Exception:
            log.exception("Error while shutting down health server")
        finally:
            # The serve task may have been cancelled while awaiting the handoff.
            if not handoff.done():
                handoff.set_result(None)
