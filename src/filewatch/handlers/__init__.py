"""File handlers invoked by the watcher for each discovered file."""

from __future__ import annotations

from pathlib import Path

from .base import Handler
from .compressed_reader import CompressedFileReader
from .resources import close_all, close_and_ignore

GZIP_SUFFIXES = (".gz", ".gzip")


def handler_for(path: str | Path) -> type[Handler] | None:
    """Return the handler class for ``path``, or None if no handler here applies."""
    if Path(path).suffix.lower() in GZIP_SUFFIXES:
        return CompressedFileReader
    return None


__all__ = [
    "Handler",
    "CompressedFileReader",
    "handler_for",
    "close_all",
    "close_and_ignore",
]
