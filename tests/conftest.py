import asyncio

import pytest

from actions.executor import LoggingActionExecutor


class ChunkReader:
    """Stream reader stand-in returning one queued chunk per read call."""

    def __init__(self, chunks, error: Exception | None = None):
        self._chunks = list(chunks)
        self._error = error
        self.read_sizes: list[int] = []

    async def read(self, n: int) -> bytes:
        self.read_sizes.append(n)
        await asyncio.sleep(0)
        if self._chunks:
            return self._chunks.pop(0)
        if self._error is not None:
            raise self._error
        return b""


class FakeWriter:
    def __init__(self, peername=("10.0.0.5", 50123)):
        self._peername = peername
        self.closed = False
        self.written = b""

    def get_extra_info(self, name, default=None):
        if name == "peername":
            return self._peername
        return default

    def write(self, data: bytes) -> None:
        self.written += data

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        pass


@pytest.fixture
def executor():
    return LoggingActionExecutor()
