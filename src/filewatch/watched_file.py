"""A file under observation by the watcher."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .listener import LineListener
from .models import WatchState

logger = logging.getLogger(__name__)


def identity_key(stat: os.stat_result) -> str:
    """Build a rename-stable identity key from a stat result.

    The key combines the inode with the device's major and minor numbers.
    """
    return f"{stat.st_ino} {os.major(stat.st_dev)} {os.minor(stat.st_dev)}"


class WatchedFile:
    """A discovered file with its latest stat and lifecycle state.

    Attributes:
        path: Filesystem path of the file.
        listener: Line listener receiving this file's content and events.
        identity_key: Stable key for the sincedb store.
        state: Current lifecycle state.
    """

    def __init__(self, path: str | Path, listener: LineListener):
        """Stat ``path`` and start watching it.

        Raises:
            OSError: If the file cannot be stat'ed.
        """
        self.path = Path(path)
        self.listener = listener
        self._stat = self.path.stat()
        self.identity_key = identity_key(self._stat)
        self.state = WatchState.WATCHED

    def restat(self) -> bool:
        """Refresh size and modification time from the filesystem.

        Returns:
            False if the file no longer exists, cannot be stat'ed, or the path
            now names a different file (inode or device changed).
        """
        try:
            stat = self.path.stat()
        except OSError as e:
            logger.debug(f"Failed to stat {self.path}: {e}")
            return False
        if (stat.st_ino, stat.st_dev) != (self._stat.st_ino, self._stat.st_dev):
            logger.debug(f"File at {self.path} was replaced", extra={"path": str(self.path)})
            return False
        self._stat = stat
        return True

    @property
    def current_size(self) -> int:
        return self._stat.st_size

    @property
    def modified_at(self) -> float:
        return self._stat.st_mtime

    @property
    def is_watched(self) -> bool:
        return self.state is WatchState.WATCHED

    def unwatch(self) -> None:
        """Release the file; the watcher will not revisit it."""
        if self.state is WatchState.UNWATCHED:
            return
        self.state = WatchState.UNWATCHED
        logger.debug(f"Unwatched {self.path}")

    def __repr__(self) -> str:
        return f"WatchedFile(path={str(self.path)!r}, key={self.identity_key!r}, state={self.state.value})"
