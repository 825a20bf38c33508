"""Base class for file handlers."""

from __future__ import annotations

import logging

from ..config import WatchConfig
from ..sincedb import SincedbCollection
from ..watched_file import WatchedFile

logger = logging.getLogger(__name__)


class Handler:
    """Common entry point for handlers invoked once per watched file per poll.

    Subclasses implement ``handle_specifically``.

    Attributes:
        sincedb: Store of completion markers.
        config: Watcher configuration.
    """

    def __init__(self, sincedb: SincedbCollection, config: WatchConfig | None = None):
        self.sincedb = sincedb
        self.config = config or WatchConfig()

    def handle(self, watched_file: WatchedFile) -> bool:
        """Refresh the file's stat and handle it.

        Returns:
            True if the file still has pending work this cycle, False otherwise.
        """
        if not watched_file.is_watched:
            return False
        if not watched_file.restat():
            logger.debug(f"File vanished or was replaced before handling: {watched_file.path}")
            watched_file.unwatch()
            return False
        return self.handle_specifically(watched_file)

    def handle_specifically(self, watched_file: WatchedFile) -> bool:
        raise NotImplementedError

    def add_or_update_sincedb_collection(self, watched_file: WatchedFile) -> None:
        """Register an unset entry for a file seen for the first time."""
        self.sincedb.register(watched_file.identity_key, str(watched_file.path))
