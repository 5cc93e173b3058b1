"""
WebSocketHealthChecker tests against local loopback servers.
"""

import asyncio
import time

import pytest
import pytest_asyncio
from websockets.asyncio.server import serve

from x402_dot.networks.health import WebSocketHealthChecker
from x402_dot.networks.profiles import Endpoint


def endpoint_for(address: str) -> Endpoint:
    return Endpoint(identifier="local", address=address, display_name="Local")


@pytest_asyncio.fixture
async def ws_server():
    connections = []

    async def handler(websocket):
        connections.append(websocket)
        await websocket.wait_closed()

    async with serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        yield f"ws://127.0.0.1:{port}", connections


@pytest_asyncio.fixture
async def silent_tcp_server():
    """Accepts TCP connections but never answers the handshake."""
    writers = []

    async def handler(reader, writer):
        writers.append(writer)
        await reader.read()

    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"ws://127.0.0.1:{port}"
    for writer in writers:
        writer.close()
    server.close()
    await server.wait_closed()


@pytest.mark.asyncio
async def test_reachable_endpoint_is_healthy_and_closed(ws_server):
    address, connections = ws_server
    checker = WebSocketHealthChecker()

    assert await checker.check(endpoint_for(address), timeout_ms=2000) is True

    assert len(connections) == 1
    await asyncio.wait_for(connections[0].wait_closed(), timeout=2)


@pytest.mark.asyncio
async def test_refused_connection_is_unhealthy():
    server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()

    checker = WebSocketHealthChecker()
    assert await checker.check(endpoint_for(f"ws://127.0.0.1:{port}"), timeout_ms=2000) is False


@pytest.mark.asyncio
async def test_unanswered_handshake_times_out(silent_tcp_server):
    checker = WebSocketHealthChecker()

    started = time.monotonic()
    healthy = await checker.check(endpoint_for(silent_tcp_server), timeout_ms=200)
    elapsed = time.monotonic() - started

    assert healthy is False
    assert elapsed < 2


@pytest.mark.asyncio
async def test_invalid_address_is_unhealthy():
    checker = WebSocketHealthChecker()

    assert await checker.check(endpoint_for("not a websocket url"), timeout_ms=200) is False
