import asyncio
import pytest

from websockets.asyncio.server import serve

from parley.core.errors import ConnectError, SendError
from parley.core.models.config import ConnectionConfig
from parley.core.models.endpoint import Endpoint
from parley.core.models.state import SessionState
from parley.core.session import SessionCoordinator
from parley.infra.websocket import WebSocketConnector
from tests.fake.fake_console import FakeInput, RecordingSink
from tests.fake.fake_spawner import RecordingSpawner
from tests.helpers import unused_port, wait_until


async def echo_handler(websocket):
    await websocket.send(b"\x00\x01")
    await websocket.send(f"welcome to {websocket.request.path}")
    async for message in websocket:
        await websocket.send(f"echo:{message}")


async def hangup_handler(websocket):
    await websocket.close()


def endpoint_for(server, path="/"):
    port = server.sockets[0].getsockname()[1]
    return Endpoint.parse(f"ws://127.0.0.1:{port}{path}")


@pytest.mark.it
@pytest.mark.asyncio
async def test_chat_over_websocket():
    source = FakeInput()
    sink = RecordingSink()

    async with serve(echo_handler, "127.0.0.1", 0) as server:
        session = SessionCoordinator(
            WebSocketConnector(), endpoint_for(server, "/room"), source, sink
        )
        task = asyncio.create_task(session.run())

        await asyncio.wait_for(sink.wait_for(1), timeout=2)
        source.push("hello")
        source.push("")
        await asyncio.wait_for(sink.wait_for(3), timeout=2)
        source.push("exit")

        outcome = await asyncio.wait_for(task, timeout=2)

    assert sink.rendered == ["welcome to /room", "echo:hello", "echo:"]
    assert outcome.reason == "exit"
    assert outcome.sent == 2
    assert outcome.received == 3
    assert outcome.discarded == 1


@pytest.mark.it
@pytest.mark.asyncio
async def test_peer_hangup_then_send_fails():
    source = FakeInput()
    sink = RecordingSink()
    spawner = RecordingSpawner()

    async with serve(hangup_handler, "127.0.0.1", 0) as server:
        session = SessionCoordinator(
            WebSocketConnector(), endpoint_for(server), source, sink, spawner
        )
        task = asyncio.create_task(session.run())

        await wait_until(lambda: session.state is SessionState.ACTIVE)
        await asyncio.wait_for(spawner.spawned["inbound-pump"], timeout=2)
        assert not task.done()

        source.push("anyone there?")
        with pytest.raises(SendError):
            await asyncio.wait_for(task, timeout=2)

    assert session.state is SessionState.CLOSED
    assert sink.rendered == []


@pytest.mark.it
@pytest.mark.asyncio
async def test_refused_connection():
    endpoint = Endpoint.parse(f"ws://127.0.0.1:{unused_port()}/")
    session = SessionCoordinator(
        WebSocketConnector(ConnectionConfig(open_timeout=2)), endpoint, FakeInput(), RecordingSink()
    )

    with pytest.raises(ConnectError):
        await session.run()


@pytest.mark.it
@pytest.mark.asyncio
async def test_failed_handshake():
    async def not_a_websocket(reader, writer):
        await reader.readuntil(b"\r\n\r\n")
        writer.write(b"HTTP/1.1 404 Not Found\r\nContent-Length: 0\r\n\r\n")
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(not_a_websocket, "127.0.0.1", 0)
    async with server:
        port = server.sockets[0].getsockname()[1]
        connector = WebSocketConnector(ConnectionConfig(open_timeout=2))

        with pytest.raises(ConnectError):
            await connector.open(Endpoint.parse(f"ws://127.0.0.1:{port}/"))
