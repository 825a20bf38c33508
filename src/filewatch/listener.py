"""Line listeners: downstream consumers of decoded lines and file events.

A listener receives, per file, ``opened()`` once, then any number of
``accept(line)`` calls, then exactly one of ``eof()`` or ``error()``.
``deleted()`` may follow ``eof()`` to signal that the file's content stream
is closed for good.
"""

from __future__ import annotations

import queue
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Protocol


class LineListener(Protocol):
    """Receiver of a single file's lines and lifecycle events."""

    def opened(self) -> None: ...

    def accept(self, line: str) -> None: ...

    def eof(self) -> None: ...

    def error(self) -> None: ...

    def deleted(self) -> None: ...


class EventKind(Enum):
    OPENED = "opened"
    LINE = "line"
    EOF = "eof"
    ERROR = "error"
    DELETED = "deleted"


class ListenerEvent(NamedTuple):
    kind: EventKind
    path: str
    line: str | None = None


class ListenerProtocolError(RuntimeError):
    """Raised when listener calls arrive out of order."""


class QueueListener:
    """Forwards every call as a ``ListenerEvent`` onto a queue.

    Lets a consumer thread process lines from many files in arrival order.
    """

    def __init__(self, path: str | Path, events: queue.Queue[ListenerEvent]):
        self.path = str(path)
        self.events = events

    def _put(self, kind: EventKind, line: str | None = None) -> None:
        self.events.put(ListenerEvent(kind, self.path, line))

    def opened(self) -> None:
        self._put(EventKind.OPENED)

    def accept(self, line: str) -> None:
        self._put(EventKind.LINE, line)

    def eof(self) -> None:
        self._put(EventKind.EOF)

    def error(self) -> None:
        self._put(EventKind.ERROR)

    def deleted(self) -> None:
        self._put(EventKind.DELETED)


class CollectingListener:
    """Keeps lines and event kinds in memory, enforcing call ordering.

    A new ``opened()`` is accepted after ``error()`` so that a file retried
    on a later discovery can be collected by the same listener.

    Attributes:
        lines: Accepted lines in arrival order.
        events: Every call received, in order.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.events: list[EventKind] = []
        self._opened = False
        self._terminal: EventKind | None = None
        self._deleted = False

    def _require_open(self, kind: EventKind) -> None:
        if not self._opened:
            raise ListenerProtocolError(f"{kind.value} before opened")
        if self._terminal is not None:
            raise ListenerProtocolError(f"{kind.value} after {self._terminal.value}")

    def opened(self) -> None:
        if self._opened and self._terminal is not EventKind.ERROR:
            raise ListenerProtocolError("opened received twice")
        self._opened = True
        self._terminal = None
        self.events.append(EventKind.OPENED)

    def accept(self, line: str) -> None:
        self._require_open(EventKind.LINE)
        self.events.append(EventKind.LINE)
        self.lines.append(line)

    def eof(self) -> None:
        self._require_open(EventKind.EOF)
        self._terminal = EventKind.EOF
        self.events.append(EventKind.EOF)

    def error(self) -> None:
        self._require_open(EventKind.ERROR)
        self._terminal = EventKind.ERROR
        self.events.append(EventKind.ERROR)

    def deleted(self) -> None:
        if self._terminal is not EventKind.EOF or self._deleted:
            raise ListenerProtocolError("deleted without a preceding eof")
        self._deleted = True
        self.events.append(EventKind.DELETED)

    @property
    def finished(self) -> bool:
        return self._terminal is EventKind.EOF
