import pytest

from gestures.handler import GestureConnectionHandler
from gestures.interpreter import GestureInterpreter
from gestures.models import ActionIdentifier

from conftest import ChunkReader, FakeWriter


def make_handler(executor, **kwargs) -> GestureConnectionHandler:
    return GestureConnectionHandler(GestureInterpreter(), executor, **kwargs)


@pytest.mark.asyncio
async def test_tokens_across_two_reads_dispatch_in_order(executor):
    handler = make_handler(executor)
    writer = FakeWriter()

    await handler.handle(ChunkReader([b"zoom-in\n", b"zoom-out\n"]), writer)

    assert executor.history == [ActionIdentifier.ZOOM_IN, ActionIdentifier.ZOOM_OUT]
    assert writer.closed
    assert writer.written == b""


@pytest.mark.asyncio
async def test_empty_connection_terminates_without_actions(executor):
    handler = make_handler(executor)
    writer = FakeWriter()

    await handler.handle(ChunkReader([]), writer)

    assert executor.history == []
    assert writer.closed
    assert handler.info.active is False


@pytest.mark.asyncio
async def test_unknown_token_is_ignored_and_connection_continues(executor):
    handler = make_handler(executor)
    reader = ChunkReader([b"unknown-gesture\n", b"scroll-v-up\n"])

    await handler.handle(reader, FakeWriter())

    assert executor.history == [ActionIdentifier.SCROLL_UP]
    assert handler.info.tokens_received == 2
    assert handler.info.actions_dispatched == 1
    # Third read is the one that saw EOF
    assert len(reader.read_sizes) == 3


@pytest.mark.asyncio
async def test_read_error_ends_handler(executor):
    handler = make_handler(executor)
    writer = FakeWriter()
    reader = ChunkReader([b"zoom-in\n"], error=ConnectionResetError("reset by peer"))

    await handler.handle(reader, writer)

    assert executor.history == [ActionIdentifier.ZOOM_IN]
    assert writer.closed


@pytest.mark.asyncio
async def test_split_token_is_reassembled(executor):
    handler = make_handler(executor)

    await handler.handle(ChunkReader([b"five-finger-", b"pinch-open\nzo", b"om-out\n"]), FakeWriter())

    assert executor.history == [ActionIdentifier.OVERVIEW_OPEN, ActionIdentifier.ZOOM_OUT]


@pytest.mark.asyncio
async def test_unterminated_final_token_is_dispatched_on_close(executor):
    handler = make_handler(executor)

    await handler.handle(ChunkReader([b"zoom-in\nscroll-h-left"]), FakeWriter())

    assert executor.history == [ActionIdentifier.ZOOM_IN, ActionIdentifier.SCROLL_LEFT]


@pytest.mark.asyncio
async def test_legacy_framing_accepts_bare_tokens(executor):
    handler = make_handler(executor, framing="legacy")
    legacy_zoom = "\U0001f50d Zoom+".encode("utf-8")

    await handler.handle(ChunkReader([legacy_zoom, b"scroll-v-down"]), FakeWriter())

    assert executor.history == [ActionIdentifier.ZOOM_IN, ActionIdentifier.SCROLL_DOWN]


@pytest.mark.asyncio
async def test_reads_use_configured_chunk_size(executor):
    handler = make_handler(executor, chunk_size=64)
    reader = ChunkReader([b"zoom-in\n"])

    await handler.handle(reader, FakeWriter())

    assert reader.read_sizes == [64, 64]


@pytest.mark.asyncio
async def test_executor_failure_does_not_end_connection():
    class FailingExecutor:
        def __init__(self):
            self.calls = []

        async def execute(self, action):
            self.calls.append(action)
            return False

    failing = FailingExecutor()
    handler = make_handler(failing)

    await handler.handle(ChunkReader([b"zoom-in\n", b"zoom-out\n"]), FakeWriter())

    assert failing.calls == [ActionIdentifier.ZOOM_IN, ActionIdentifier.ZOOM_OUT]


@pytest.mark.asyncio
async def test_lifecycle_events(executor):
    events = []

    async def record(event_type, data):
        events.append((event_type, data))

    async def broken(event_type, data):
        raise RuntimeError("subscriber went away")

    handler = make_handler(executor)
    handler.on_event(broken)
    handler.on_event(record)

    await handler.handle(ChunkReader([b"zoom-in\n"]), FakeWriter(("192.168.1.20", 40000)))

    assert [e[0] for e in events] == ["client_connected", "gesture_received", "client_disconnected"]
    assert events[0][1]["peer_address"] == "192.168.1.20:40000"
    assert events[1][1]["token"] == "zoom-in"
    assert events[1][1]["action"] == "zoom-in"
    assert events[2][1]["active"] is False
