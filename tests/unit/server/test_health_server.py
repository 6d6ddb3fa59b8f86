"""Unit tests for the aiohttp health server."""

import aiohttp
import pytest

from healthgate.core.health import ReadinessState
from healthgate.http import HEALTH_CHECK_PATH, READY_CHECK_PATH, HealthServer


class TestHealthServer:
    """Endpoint behaviour against a real listener on an ephemeral port."""

    @pytest.mark.asyncio
    async def test_health_check_always_200(self, get_status, base_url):
        state = ReadinessState()
        server = HealthServer(state)
        await server.start(host="127.0.0.1", port=0)
        try:
            url = base_url(server)
            assert await get_status(url, HEALTH_CHECK_PATH) == 200
            state.set(True)
            assert await get_status(url, HEALTH_CHECK_PATH) == 200
        finally:
            await server.stop(grace_period=1.0)

    @pytest.mark.asyncio
    async def test_ready_check_follows_state(self, get_status, base_url):
        state = ReadinessState()
        server = HealthServer(state)
        await server.start(host="127.0.0.1", port=0)
        try:
            url = base_url(server)
            assert await get_status(url, READY_CHECK_PATH) == 503
            state.set(True)
            assert await get_status(url, READY_CHECK_PATH) == 200
            state.set(False)
            assert await get_status(url, READY_CHECK_PATH) == 503
        finally:
            await server.stop(grace_period=1.0)

    @pytest.mark.asyncio
    async def test_bodies_are_empty(self, base_url):
        server = HealthServer(ReadinessState())
        await server.start(host="127.0.0.1", port=0)
        try:
            async with aiohttp.ClientSession() as session:
                for path in (HEALTH_CHECK_PATH, READY_CHECK_PATH):
                    async with session.get(base_url(server) + path) as response:
                        assert await response.read() == b""
        finally:
            await server.stop(grace_period=1.0)

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, get_status, base_url):
        server = HealthServer(ReadinessState())
        await server.start(host="127.0.0.1", port=0)
        try:
            assert await get_status(base_url(server), "/metrics") == 404
        finally:
            await server.stop(grace_period=1.0)

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self, get_status, base_url):
        ready_state = ReadinessState()
        ready_state.set(True)
        ready = HealthServer(ready_state)
        not_ready = HealthServer(ReadinessState())

        await ready.start(host="127.0.0.1", port=0)
        await not_ready.start(host="127.0.0.1", port=0)
        try:
            assert await get_status(base_url(ready), READY_CHECK_PATH) == 200
            assert await get_status(base_url(not_ready), READY_CHECK_PATH) == 503
        finally:
            await ready.stop(grace_period=1.0)
            await not_ready.stop(grace_period=1.0)

    @pytest.mark.asyncio
    async def test_stop_closes_listener(self, get_status, base_url):
        server = HealthServer(ReadinessState())
        await server.start(host="127.0.0.1", port=0)
        url = base_url(server)

        await server.stop(grace_period=1.0)

        assert server.bound_addresses == []
        with pytest.raises(aiohttp.ClientConnectionError):
            await get_status(url, HEALTH_CHECK_PATH)

    @pytest.mark.asyncio
    async def test_stop_before_start_is_noop(self):
        server = HealthServer(ReadinessState())
        await server.stop(grace_period=0.1)

    @pytest.mark.asyncio
    async def test_bind_failure_raises_and_resets(self, base_url):
        first = HealthServer(ReadinessState())
        await first.start(host="127.0.0.1", port=0)
        port = first.bound_addresses[0][1]
        second = HealthServer(ReadinessState())
        try:
            with pytest.raises(OSError):
                await second.start(host="127.0.0.1", port=port)
            assert second.runner is None
        finally:
            await first.stop(grace_period=1.0)
