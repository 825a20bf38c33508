"""Tests for line listeners."""

import queue

import pytest

from filewatch.listener import (
    CollectingListener,
    EventKind,
    LineListener,
    ListenerEvent,
    ListenerProtocolError,
    QueueListener,
)


class TestQueueListener:
    """Tests for forwarding listener calls onto a queue."""

    def test_forwards_events_in_order(self) -> None:
        events: queue.Queue[ListenerEvent] = queue.Queue()
        listener = QueueListener("/var/log/a.gz", events)

        listener.opened()
        listener.accept("x")
        listener.accept("y")
        listener.eof()
        listener.deleted()

        received = [events.get_nowait() for _ in range(events.qsize())]
        assert received == [
            ListenerEvent(EventKind.OPENED, "/var/log/a.gz"),
            ListenerEvent(EventKind.LINE, "/var/log/a.gz", "x"),
            ListenerEvent(EventKind.LINE, "/var/log/a.gz", "y"),
            ListenerEvent(EventKind.EOF, "/var/log/a.gz"),
            ListenerEvent(EventKind.DELETED, "/var/log/a.gz"),
        ]

    def test_error_event(self) -> None:
        events: queue.Queue[ListenerEvent] = queue.Queue()
        listener = QueueListener("b.gz", events)

        listener.opened()
        listener.error()

        assert events.get_nowait().kind is EventKind.OPENED
        assert events.get_nowait() == ListenerEvent(EventKind.ERROR, "b.gz", None)

    def test_satisfies_protocol(self) -> None:
        listener: LineListener = QueueListener("a.gz", queue.Queue())
        assert callable(listener.accept)


class TestCollectingListener:
    """Tests for the in-memory listener and its ordering checks."""

    def test_collects_lines(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.accept("x")
        listener.accept("y")
        listener.eof()
        listener.deleted()

        assert listener.lines == ["x", "y"]
        assert listener.events == [
            EventKind.OPENED,
            EventKind.LINE,
            EventKind.LINE,
            EventKind.EOF,
            EventKind.DELETED,
        ]
        assert listener.finished

    def test_accept_before_opened(self) -> None:
        with pytest.raises(ListenerProtocolError, match="before opened"):
            CollectingListener().accept("x")

    def test_accept_after_eof(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.eof()
        with pytest.raises(ListenerProtocolError, match="after eof"):
            listener.accept("x")

    def test_accept_after_error(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.error()
        with pytest.raises(ListenerProtocolError, match="after error"):
            listener.accept("x")

    def test_two_terminal_calls(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.eof()
        with pytest.raises(ListenerProtocolError):
            listener.error()

    def test_opened_twice(self) -> None:
        listener = CollectingListener()
        listener.opened()
        with pytest.raises(ListenerProtocolError, match="opened received twice"):
            listener.opened()

    def test_reopen_after_error_starts_new_attempt(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.accept("x")
        listener.error()

        listener.opened()
        listener.accept("x")
        listener.eof()

        assert listener.finished
        assert listener.lines == ["x", "x"]

    def test_deleted_requires_eof(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.error()
        with pytest.raises(ListenerProtocolError, match="deleted"):
            listener.deleted()

    def test_deleted_twice(self) -> None:
        listener = CollectingListener()
        listener.opened()
        listener.eof()
        listener.deleted()
        with pytest.raises(ListenerProtocolError):
            listener.deleted()
