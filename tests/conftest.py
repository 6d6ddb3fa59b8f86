"""Shared fixtures for healthgate tests."""

import asyncio

import aiohttp
import pytest

from healthgate.core.sync import WaitGroup


class SpyWaitGroup(WaitGroup):
    """WaitGroup that records every add/done call."""

    def __init__(self) -> None:
        super().__init__()
        self.add_calls: list[int] = []
        self.done_calls = 0

    def add(self, delta: int = 1) -> None:
        if delta > 0:
            self.add_calls.append(delta)
        super().add(delta)

    def done(self) -> None:
        self.done_calls += 1
        super().done()


async def _wait_until(predicate, timeout: float = 2.0, step: float = 0.01) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() >= deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(step)


async def _get_status(base_url: str, path: str) -> int:
    async with aiohttp.ClientSession() as session:
        async with session.get(f"{base_url}{path}") as response:
            await response.read()
            return response.status


def _base_url(server) -> str:
    host, port = server.bound_addresses[0][:2]
    return f"http://{host}:{port}"


@pytest.fixture
def spy_wait_group():
    """A WaitGroup that counts add/done calls."""
    return SpyWaitGroup()


@pytest.fixture
def wait_until():
    """Async poller: ``await wait_until(lambda: cond, timeout=...)``."""
    return _wait_until


@pytest.fixture
def get_status():
    """Async helper returning the HTTP status of ``GET base_url + path``."""
    return _get_status


@pytest.fixture
def base_url():
    """Build ``http://host:port`` from a started HealthServer."""
    return _base_url
