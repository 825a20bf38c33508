"""Shared fixtures for filewatch tests."""

import gzip
import io
from collections.abc import Callable
from pathlib import Path

import pytest

from filewatch.config import WatchConfig
from filewatch.listener import CollectingListener
from filewatch.sincedb import SincedbCollection


def compress_lines(lines: list[str], name: str = "") -> bytes:
    """Compress newline-terminated ``lines`` with a fixed header timestamp."""
    buf = io.BytesIO()
    with gzip.GzipFile(filename=name, mode="wb", fileobj=buf, mtime=0) as gz:
        gz.write("".join(f"{line}\n" for line in lines).encode("utf-8"))
    return buf.getvalue()


@pytest.fixture
def gzip_bytes() -> Callable[..., bytes]:
    """Return the in-memory gzip compressor used by the file fixtures."""
    return compress_lines


@pytest.fixture
def make_gz(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a gzip file of the given lines into tmp_path."""

    def _make(name: str, lines: list[str]) -> Path:
        path = tmp_path / name
        path.write_bytes(compress_lines(lines))
        return path

    return _make


@pytest.fixture
def sample_gz(make_gz: Callable[..., Path]) -> Path:
    """Create a valid gzip log with three lines."""
    return make_gz("sample.log.gz", ["Line 1", "Line 2", "Line 3"])


@pytest.fixture
def truncated_gz(tmp_path: Path) -> Path:
    """Create a gzip log cut off before its end-of-stream marker."""
    data = compress_lines([f"Line {i}" for i in range(200)])
    path = tmp_path / "truncated.log.gz"
    path.write_bytes(data[: len(data) // 2])
    return path


@pytest.fixture
def sincedb(tmp_path: Path):
    """Create a SincedbCollection writing under tmp_path."""
    collection = SincedbCollection(tmp_path / "state" / "sincedb.json", write_interval=0)
    yield collection
    collection.close()


@pytest.fixture
def listener() -> CollectingListener:
    return CollectingListener()


@pytest.fixture
def config() -> WatchConfig:
    return WatchConfig(check_archive_validity=False)


@pytest.fixture
def validating_config() -> WatchConfig:
    return WatchConfig(check_archive_validity=True)
