"""Standalone runner for the health check."""

import asyncio
import signal

from healthgate.core.config import settings
from healthgate.core.logging import LoggerConfigurator
from healthgate.core.sync import WaitGroup
from healthgate.lifecycle import HealthCheck


def install_signal_handlers(shutdown: asyncio.Event) -> None:
    """Set ``shutdown`` on SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)


async def main() -> None:
    """Serve the health endpoints until SIGINT/SIGTERM."""
    LoggerConfigurator.configure_root(settings.LOG_LEVEL, settings.LOG_JSON)
    logger = LoggerConfigurator.configure_logger(__name__, {"context_base": "healthgate", "operation": "runner"})

    shutdown = asyncio.Event()
    install_signal_handlers(shutdown)

    done = WaitGroup()
    health = HealthCheck()
    health.init(settings.LISTEN_ADDRESS, done)
    health.run(shutdown)

    await done.wait()
    logger.info("Exiting")


def run() -> None:
    """Console-script entrypoint."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
