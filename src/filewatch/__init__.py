"""Read-once ingestion of gzip compressed log files.

This package consumes compressed log files end to end, hands each decoded
line to a listener, and records in a sincedb store which files have been
fully read so they are not read again.

Key Components:
    - models: Completion markers and watch state
    - config: Configuration dataclass and YAML loading
    - sincedb: Persistent completion marker store with background writes
    - watched_file: A discovered file with its identity key
    - listener: Line listener protocol and implementations
    - handlers: Compressed file reader and teardown helpers
    - logging_manager: Console and JSON file logging setup

Example:
    >>> from filewatch import (
    ...     CollectingListener,
    ...     CompressedFileReader,
    ...     SincedbCollection,
    ...     WatchConfig,
    ...     WatchedFile,
    ... )
    >>> config = WatchConfig(check_archive_validity=True)
    >>> sincedb = SincedbCollection(config.sincedb_path, config.sincedb_write_interval)
    >>> reader = CompressedFileReader(sincedb, config)
    >>> listener = CollectingListener()
    >>> reader.handle(WatchedFile("/var/log/app.log.gz", listener))
    False
"""

from __future__ import annotations

from .config import WatchConfig, load_config
from .handlers import CompressedFileReader, Handler, handler_for
from .listener import (
    CollectingListener,
    EventKind,
    LineListener,
    ListenerEvent,
    ListenerProtocolError,
    QueueListener,
)
from .logging_manager import LoggingManager
from .models import UNSET, Complete, CompletionMarker, SincedbEntry, Unset, WatchState
from .sincedb import SincedbCollection
from .watched_file import WatchedFile

__all__ = [
    "WatchConfig",
    "load_config",
    "CompressedFileReader",
    "Handler",
    "handler_for",
    "CollectingListener",
    "EventKind",
    "LineListener",
    "ListenerEvent",
    "ListenerProtocolError",
    "QueueListener",
    "LoggingManager",
    "UNSET",
    "Complete",
    "CompletionMarker",
    "SincedbEntry",
    "Unset",
    "WatchState",
    "SincedbCollection",
    "WatchedFile",
]

__version__ = "0.1.0"
