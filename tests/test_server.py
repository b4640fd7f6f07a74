import asyncio

import pytest
import pytest_asyncio

from gestures.models import ActionIdentifier
from gestures.server import GestureServer


async def wait_for(predicate, timeout: float = 2.0) -> None:
    async def poll():
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout)


@pytest_asyncio.fixture
async def server(executor):
    server = GestureServer(executor=executor, host="127.0.0.1", port=0, max_connections=2)
    await server.start()
    yield server
    await server.stop()


async def connect(server: GestureServer):
    return await asyncio.open_connection("127.0.0.1", server.port)


@pytest.mark.asyncio
async def test_dispatches_tokens_from_client(server, executor):
    reader, writer = await connect(server)
    writer.write(b"zoom-in\n")
    await writer.drain()
    writer.write(b"zoom-out\n")
    await writer.drain()

    await wait_for(lambda: len(executor.history) == 2)
    assert executor.history == [ActionIdentifier.ZOOM_IN, ActionIdentifier.ZOOM_OUT]

    writer.close()
    await writer.wait_closed()
    await wait_for(lambda: server.connections() == [])


@pytest.mark.asyncio
async def test_concurrent_connections_are_isolated(server):
    dispatched: dict[str, list[str]] = {}
    peers: dict[str, str] = {}

    async def record(event_type, data):
        if event_type == "client_connected":
            peers[data["peer_address"]] = data["connection_id"]
        elif event_type == "gesture_received":
            dispatched.setdefault(data["connection_id"], []).append(data["token"])

    server.on_event(record)

    reader_a, writer_a = await connect(server)
    reader_b, writer_b = await connect(server)
    await wait_for(lambda: len(server.connections()) == 2)

    for _ in range(3):
        writer_a.write(b"zoom-in\n")
        writer_b.write(b"scroll-v-up\n")
        await writer_a.drain()
        await writer_b.drain()

    await wait_for(lambda: sum(len(v) for v in dispatched.values()) == 6)

    host_a, port_a = writer_a.get_extra_info("sockname")[:2]
    host_b, port_b = writer_b.get_extra_info("sockname")[:2]
    assert dispatched[peers[f"{host_a}:{port_a}"]] == ["zoom-in"] * 3
    assert dispatched[peers[f"{host_b}:{port_b}"]] == ["scroll-v-up"] * 3

    for writer in (writer_a, writer_b):
        writer.close()
        await writer.wait_closed()


@pytest.mark.asyncio
async def test_connection_over_limit_is_closed(server, executor):
    _, writer_a = await connect(server)
    _, writer_b = await connect(server)
    await wait_for(lambda: len(server.connections()) == 2)

    reader_c, writer_c = await connect(server)
    # Server closes the extra connection without writing anything
    assert await asyncio.wait_for(reader_c.read(), 2.0) == b""
    assert server.rejected_count == 1
    assert len(server.connections()) == 2

    # Existing connections keep working
    writer_a.write(b"scroll-h-right\n")
    await writer_a.drain()
    await wait_for(lambda: executor.history == [ActionIdentifier.SCROLL_RIGHT])

    for writer in (writer_a, writer_b, writer_c):
        writer.close()


@pytest.mark.asyncio
async def test_slot_is_released_when_client_disconnects(server):
    _, writer_a = await connect(server)
    _, writer_b = await connect(server)
    await wait_for(lambda: len(server.connections()) == 2)

    writer_a.close()
    await writer_a.wait_closed()
    await wait_for(lambda: len(server.connections()) == 1)

    _, writer_c = await connect(server)
    await wait_for(lambda: len(server.connections()) == 2)
    assert server.rejected_count == 0

    for writer in (writer_b, writer_c):
        writer.close()


@pytest.mark.asyncio
async def test_stop_closes_active_connections(executor):
    server = GestureServer(executor=executor, host="127.0.0.1", port=0)
    await server.start()
    reader, writer = await connect(server)
    await wait_for(lambda: len(server.connections()) == 1)

    await server.stop()

    assert await asyncio.wait_for(reader.read(), 2.0) == b""
    assert server.connections() == []
    writer.close()


@pytest.mark.asyncio
async def test_start_fails_when_port_in_use(server, executor):
    other = GestureServer(executor=executor, host="127.0.0.1", port=server.port)
    with pytest.raises(OSError):
        await other.start()


@pytest.mark.asyncio
async def test_stop_discards_half_received_token(executor):
    server = GestureServer(executor=executor, host="127.0.0.1", port=0)
    await server.start()
    reader, writer = await connect(server)
    writer.write(b"scroll-v-up\nzoom-in")
    await writer.drain()
    await wait_for(lambda: executor.history == [ActionIdentifier.SCROLL_UP])
    await asyncio.sleep(0.05)

    await server.stop()

    assert executor.history == [ActionIdentifier.SCROLL_UP]
    writer.close()
