from __future__ import annotations

import sys
from typing import Protocol, TextIO


class OutputSink(Protocol):
    """Where hosts and conformers write their observable output lines."""

    def write_line(self, text: str) -> None: ...


class StreamSink:
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write_line(self, text: str) -> None:
        # Resolved per call: sys.stdout may be redirected after construction.
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(text)
        stream.write("\n")


class RecordingSink:
    """Keeps every line in memory, in write order."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, text: str) -> None:
        self.lines.append(text)
