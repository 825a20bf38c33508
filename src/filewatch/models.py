"""Data models for the file watching system.

This module defines the values the sincedb store keeps per file and the
lifecycle state of a watched file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class WatchState(Enum):
    """Lifecycle state of a watched file.

    Attributes:
        WATCHED: File is still eligible for handling.
        UNWATCHED: File was released and is not revisited in this process.
    """

    WATCHED = "watched"
    UNWATCHED = "unwatched"


@dataclass(frozen=True)
class Unset:
    """Marker for a file that has been seen but never fully read."""

    def covers(self, size: int) -> bool:
        return False


@dataclass(frozen=True)
class Complete:
    """Marker for a file that was read to the end.

    Attributes:
        size: File size in bytes at the moment the read completed.
    """

    size: int

    def covers(self, size: int) -> bool:
        """Return True when a file of ``size`` bytes needs no further reading."""
        return self.size >= size


CompletionMarker = Union[Unset, Complete]

UNSET = Unset()


@dataclass
class SincedbEntry:
    """A single record in the sincedb store.

    Attributes:
        marker: Completion marker for the file.
        path: Last known path of the file, kept for diagnostics.
        last_changed_at: Epoch seconds of the last marker change, used for retention.
    """

    marker: CompletionMarker = UNSET
    path: str = ""
    last_changed_at: float = field(default=0.0)
