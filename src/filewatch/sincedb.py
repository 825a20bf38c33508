"""Persistent store of per-file completion markers.

This module keeps one completion marker per file identity key and persists
them as JSON with file locking. Writes happen on a background thread when
requested, so handlers never wait for the disk.
"""

from __future__ import annotations

import fcntl
import json
import logging
import threading
import time
from pathlib import Path
from typing import Any

from .models import UNSET, Complete, CompletionMarker, SincedbEntry, Unset

logger = logging.getLogger(__name__)


class SincedbCollection:
    """Process-wide store of completion markers keyed by file identity.

    Entries live in memory behind a lock and are written to ``path`` as a
    JSON object. ``request_flush`` only wakes the writer thread; the writer
    spaces writes at least ``write_interval`` seconds apart.

    Attributes:
        path: JSON file storing all entries.
        write_interval: Minimum seconds between background writes.
        clean_after: Seconds after which an unchanged entry is dropped on write.
        _entries: In-memory entries keyed by identity key.
    """

    def __init__(
        self,
        path: str | Path = "/tmp/filewatch/sincedb.json",
        write_interval: float = 15.0,
        clean_after: float = 14 * 24 * 60 * 60,
    ):
        """Initialize the store and load any existing entries.

        Args:
            path: JSON file storing entries. Its directory is created.
            write_interval: Minimum seconds between background writes.
            clean_after: Retention in seconds for unchanged entries.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.write_interval = write_interval
        self.clean_after = clean_after
        self._entries: dict[str, SincedbEntry] = {}
        self._lock = threading.RLock()
        self._write_lock = threading.Lock()
        self._write_requested = threading.Event()
        self._stopping = threading.Event()
        self._writer: threading.Thread | None = None
        self._last_write: float | None = None
        self._dirty = False

        self._load()

    def _load(self) -> None:
        """Load entries from disk with a shared lock.

        A missing file starts an empty store; a corrupted one is logged and
        also starts empty.
        """
        if not self.path.exists():
            logger.info(
                "Sincedb file does not exist, starting fresh", extra={"sincedb": str(self.path)}
            )
            return

        try:
            with self.path.open("r") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = json.load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
            for key, raw in data.items():
                marker = raw.get("marker")
                self._entries[key] = SincedbEntry(
                    marker=UNSET if marker is None else Complete(int(marker)),
                    path=raw.get("path", ""),
                    last_changed_at=float(raw.get("last_changed_at", 0.0)),
                )
            logger.info(f"Loaded {len(self._entries)} sincedb entries from disk")
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse sincedb file: {e}, starting fresh")
            self._entries = {}
        except (OSError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Error loading sincedb: {e}, starting fresh")
            self._entries = {}

    def exists(self, key: str) -> bool:
        """Return True if an entry, set or unset, exists for ``key``."""
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> CompletionMarker | None:
        """Get the completion marker for ``key``, or None if never registered."""
        with self._lock:
            entry = self._entries.get(key)
            return entry.marker if entry is not None else None

    def register(self, key: str, path: str = "") -> None:
        """Create an unset placeholder for a first-seen file.

        An existing entry is left untouched.
        """
        with self._lock:
            if key in self._entries:
                return
            self._entries[key] = SincedbEntry(marker=UNSET, path=path, last_changed_at=time.time())
            self._dirty = True
        logger.debug(f"Registered sincedb entry for {key}", extra={"path": path})

    def put(self, key: str, marker: CompletionMarker, path: str | None = None) -> None:
        """Store ``marker`` for ``key``.

        A complete marker never moves backwards: storing a smaller size over
        a larger one is ignored.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                entry = SincedbEntry(path=path or "")
                self._entries[key] = entry
            current = entry.marker
            if isinstance(current, Complete) and (
                isinstance(marker, Unset) or marker.size < current.size
            ):
                logger.warning(
                    f"Refusing to move sincedb marker for {key} backwards",
                    extra={"current": current.size, "requested": getattr(marker, "size", None)},
                )
                return
            entry.marker = marker
            if path is not None:
                entry.path = path
            entry.last_changed_at = time.time()
            self._dirty = True

    def entries(self) -> dict[str, SincedbEntry]:
        """Return a snapshot copy of all entries."""
        with self._lock:
            return {
                key: SincedbEntry(e.marker, e.path, e.last_changed_at)
                for key, e in self._entries.items()
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def request_flush(self) -> None:
        """Ask the background writer to persist entries soon.

        Returns immediately; the write happens on the writer thread.
        """
        self._write_requested.set()
        with self._lock:
            if self._writer is None or not self._writer.is_alive():
                self._stopping.clear()
                self._writer = threading.Thread(
                    target=self._run_writer, name="sincedb-writer", daemon=True
                )
                self._writer.start()

    def _run_writer(self) -> None:
        while True:
            self._write_requested.wait()
            if self._stopping.is_set():
                return
            if self._last_write is not None:
                delay = self._last_write + self.write_interval - time.monotonic()
            else:
                delay = 0.0
            if delay > 0 and self._stopping.wait(delay):
                return
            self._write_requested.clear()
            self.flush()

    def flush(self) -> None:
        """Write entries to disk now.

        Drops entries older than ``clean_after``, then writes to a temporary
        file under an exclusive lock and atomically renames it over the
        sincedb file. Failures are logged, not raised.
        """
        with self._write_lock:
            with self._lock:
                self._expire(time.time())
                data: dict[str, Any] = {
                    key: {
                        "path": entry.path,
                        "marker": entry.marker.size if isinstance(entry.marker, Complete) else None,
                        "last_changed_at": entry.last_changed_at,
                    }
                    for key, entry in self._entries.items()
                }
                self._dirty = False
                self._last_write = time.monotonic()

            try:
                temp_file = self.path.with_suffix(".tmp")
                with temp_file.open("w") as f:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                    try:
                        json.dump(data, f, indent=2)
                        f.flush()
                    finally:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)

                temp_file.replace(self.path)
                logger.debug(f"Wrote {len(data)} sincedb entries to disk")
            except OSError as e:
                logger.error(f"Failed to write sincedb: {e}")
                with self._lock:
                    self._dirty = True

    def _expire(self, now: float) -> None:
        expired = [
            key
            for key, entry in self._entries.items()
            if now - entry.last_changed_at > self.clean_after
        ]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"Dropped {len(expired)} expired sincedb entries")

    def close(self) -> None:
        """Stop the writer thread and write any pending changes."""
        self._stopping.set()
        self._write_requested.set()
        writer = self._writer
        if writer is not None:
            writer.join()
        self._writer = None
        self._write_requested.clear()
        with self._lock:
            pending = self._dirty
        if pending:
            self.flush()
