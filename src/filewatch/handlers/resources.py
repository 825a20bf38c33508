"""Teardown helpers for layered streams."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)


def close_and_ignore(closeable: Any) -> None:
    """Close one resource, logging and swallowing any failure."""
    try:
        closeable.close()
    except Exception as e:
        logger.warning(
            f"Ignoring an error when closing an instance of {type(closeable).__name__}",
            extra={
                "resource": type(closeable).__name__,
                "exception": type(e).__name__,
                "error_message": str(e),
            },
        )


def close_all(resources: Iterable[Any]) -> None:
    """Close resources given in acquisition order, newest first.

    Every resource gets a close attempt even when an earlier close fails.
    """
    for resource in reversed(list(resources)):
        close_and_ignore(resource)
