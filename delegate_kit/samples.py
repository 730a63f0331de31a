"""Demonstration contracts and conformers.

Two of the conformers show the same contract satisfied by a value-like type
(frozen dataclass) and by a plain mutable class.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from delegate_kit.errors import ConfigError
from delegate_kit.output import OutputSink


class Handler(Protocol):
    def handle(self) -> bool: ...


class Labeled(Protocol):
    @property
    def label(self) -> str: ...


class Tallied(Protocol):
    tally: int


class LabeledHandler(Handler, Labeled, Protocol):
    """Conjunction used as the host's contract in the CLI scenario."""


@dataclass(frozen=True, slots=True)
class EchoHandler:
    label: str
    sink: OutputSink

    def handle(self) -> bool:
        self.sink.write_line(f"echo: {self.label}")
        return True

    def shout(self) -> str:
        return self.label.upper()


class CountingHandler:
    """Handles until the tally passes ``limit``.

    ``label`` is plain mutable storage here; through a Labeled reference it is
    still read-only.
    """

    def __init__(self, label: str, sink: OutputSink, *, limit: int = 1) -> None:
        self.label = label
        self.tally = 0
        self.limit = limit
        self._sink = sink

    def handle(self) -> bool:
        self.tally += 1
        self._sink.write_line(f"count: {self.tally}")
        return self.tally <= self.limit

    def reset(self) -> None:
        self.tally = 0


@dataclass(frozen=True, slots=True)
class RefusingHandler:
    label: str
    sink: OutputSink

    def handle(self) -> bool:
        self.sink.write_line(f"refusing: {self.label}")
        return False


ConformerFactory = Callable[..., LabeledHandler]

CONFORMERS: dict[str, ConformerFactory] = {
    "echo": lambda label, sink, limit: EchoHandler(label=label, sink=sink),
    "counting": lambda label, sink, limit: CountingHandler(label, sink, limit=limit),
    "refusing": lambda label, sink, limit: RefusingHandler(label=label, sink=sink),
}


def build_conformer(kind: str, *, label: str, sink: OutputSink, limit: int = 1) -> LabeledHandler:
    factory = CONFORMERS.get(kind)
    if factory is None:
        raise ConfigError(
            f"unknown conformer {kind!r}; expected one of {sorted(CONFORMERS)}",
            path="scenario.conformer",
        )
    return factory(label, sink, limit)
