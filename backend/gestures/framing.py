"""
Incremental frame reader for the gesture stream.

TCP gives no message boundaries, so bytes are buffered until a newline
arrives. Only complete, trimmed, non-empty lines come out as tokens.
"""

import codecs
import logging

from config import MAX_LINE_LENGTH

logger = logging.getLogger(__name__)


class LineFramer:
    """Splits a byte stream into newline-delimited text tokens."""

    def __init__(self, max_line_length: int = MAX_LINE_LENGTH, legacy: bool = False):
        self._max_line_length = max_line_length
        self._legacy = legacy
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._discarding = False
        self.dropped_lines = 0

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a newline."""
        return self._buffer

    def feed(self, data: bytes) -> list[str]:
        """Consume a chunk of bytes and return every token it completes."""
        self._buffer += self._decoder.decode(data)
        tokens: list[str] = []

        while True:
            newline = self._buffer.find("\n")
            if newline < 0:
                break
            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1:]
            if self._discarding:
                # Tail of an oversize line
                self._discarding = False
                continue
            self._emit(line, tokens)

        if self._discarding:
            self._buffer = ""
        elif len(self._buffer) > self._max_line_length:
            logger.warning(
                f"Dropping gesture line longer than {self._max_line_length} characters"
            )
            self.dropped_lines += 1
            self._buffer = ""
            self._discarding = True
        elif self._legacy and self._buffer:
            # Older clients write one bare token per send with no terminator.
            self._emit(self._buffer, tokens)
            self._buffer = ""

        return tokens

    def flush(self) -> list[str]:
        """Return the unterminated remainder as a final token, at end of stream."""
        self._buffer += self._decoder.decode(b"", final=True)
        tokens: list[str] = []
        if not self._discarding:
            self._emit(self._buffer, tokens)
        self._buffer = ""
        self._discarding = False
        return tokens

    def _emit(self, line: str, tokens: list[str]) -> None:
        if len(line) > self._max_line_length:
            logger.warning(
                f"Dropping gesture line longer than {self._max_line_length} characters"
            )
            self.dropped_lines += 1
            return
        token = line.strip()
        if token:
            tokens.append(token)
