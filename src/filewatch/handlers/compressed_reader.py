"""Read-once handling of gzip compressed files.

A gzip stream can only be decoded from byte zero, so a compressed file is
read in full or not at all. The sincedb marker for such a file is either
unset or equal to the file size at the end of a successful read; there is
no partial progress to record.
"""

from __future__ import annotations

import gzip
import io
import logging
import time
import zlib
from typing import Any

from ..models import Complete
from ..watched_file import WatchedFile
from .base import Handler
from .resources import close_all

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
ENCODING = "utf-8"

# BadGzipFile is an OSError; any other OSError here means the file could
# not be opened or read at all.
DECOMPRESSION_ERRORS = (gzip.BadGzipFile, EOFError, zlib.error, OSError)


class CompressedFileReader(Handler):
    """Emits every line of a gzip file to its listener, exactly once.

    Files whose marker already covers their size are skipped. With
    ``check_archive_validity`` enabled, a full decompression pass runs first
    and corrupt archives are dropped without notifying the listener.

    If the process stops mid-read the marker stays unset and the next
    discovery reads the file again from the start, so the listener may see
    lines it already received.
    """

    def handle_specifically(self, watched_file: WatchedFile) -> bool:
        key = watched_file.identity_key
        size = watched_file.current_size

        if self.sincedb.exists(key):
            marker = self.sincedb.get(key)
            if marker is not None and marker.covers(size):
                logger.debug(
                    "Skipping already processed gzip file", extra={"path": str(watched_file.path)}
                )
                watched_file.unwatch()
                return False
        else:
            self.add_or_update_sincedb_collection(watched_file)

        if self.config.check_archive_validity and self.corrupted(watched_file):
            watched_file.unwatch()
            return False

        watched_file.listener.opened()
        self._read_pass(watched_file, size)
        # The sincedb entry is kept after a successful read so a rediscovered
        # file is recognised as done.
        return False

    def _read_pass(self, watched_file: WatchedFile, size: int) -> None:
        listener = watched_file.listener
        resources: list[Any] = []
        failure: BaseException | None = None
        try:
            # Only stream operations are guarded; listener errors propagate.
            try:
                decoder = self._open_decoder(watched_file, resources)
            except DECOMPRESSION_ERRORS as e:
                failure = e
            while failure is None:
                try:
                    line = next(decoder)
                except StopIteration:
                    break
                except DECOMPRESSION_ERRORS as e:
                    failure = e
                    break
                listener.accept(line[:-1] if line.endswith("\n") else line)

            if failure is not None:
                logger.error(
                    f"Cannot decompress the gzip file at path: {watched_file.path}",
                    extra={"exception": type(failure).__name__, "error_message": str(failure)},
                )
                listener.error()
                return

            listener.eof()
            self.sincedb.put(watched_file.identity_key, Complete(size), str(watched_file.path))
            self.sincedb.request_flush()
            listener.deleted()
            watched_file.unwatch()
        finally:
            close_all(resources)

    def _open_decoder(self, watched_file: WatchedFile, resources: list[Any]) -> io.TextIOWrapper:
        """Open the raw, gzip, buffered and text layers, appending each to ``resources``."""
        file_stream = open(watched_file.path, "rb")
        resources.append(file_stream)
        gzip_stream = gzip.GzipFile(fileobj=file_stream, mode="rb")
        resources.append(gzip_stream)
        buffered = io.BufferedReader(gzip_stream, buffer_size=CHUNK_SIZE)
        resources.append(buffered)
        decoder = io.TextIOWrapper(buffered, encoding=ENCODING, errors="replace")
        resources.append(decoder)
        return decoder

    def corrupted(self, watched_file: WatchedFile) -> bool:
        """Decompress the whole file, discarding output, to detect corruption.

        Returns:
            True if the stream is truncated or malformed.
        """
        start = time.monotonic()
        resources: list[Any] = []
        try:
            file_stream = open(watched_file.path, "rb")
            resources.append(file_stream)
            gzip_stream = gzip.GzipFile(fileobj=file_stream, mode="rb")
            resources.append(gzip_stream)
            while gzip_stream.read(CHUNK_SIZE):
                pass
            return False
        except DECOMPRESSION_ERRORS as e:
            duration = time.monotonic() - start
            logger.warning(
                f"Detected corrupted archive {watched_file.path} file won't be processed",
                extra={"error_message": str(e), "duration": round(duration, 3)},
            )
            return True
        finally:
            close_all(resources)
