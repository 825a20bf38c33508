"""Configuration for the file watching system.

This module defines the configuration dataclass that controls handler and
sincedb behavior, and loads it from YAML files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class WatchConfig:
    """Configuration for handlers and the sincedb store.

    Attributes:
        check_archive_validity: Run a full decompression pass before reading a
            compressed file (default: False).
        sincedb_path: JSON file holding completion markers
            (default: /tmp/filewatch/sincedb.json).
        sincedb_write_interval: Minimum seconds between background sincedb
            writes (default: 15).
        sincedb_clean_after: Seconds after which an unchanged sincedb entry is
            dropped (default: 14 days).
        log_dir: Directory for log files (default: /tmp/filewatch/logs).
        log_level: Console log level (default: INFO).
    """

    check_archive_validity: bool = False
    sincedb_path: str = "/tmp/filewatch/sincedb.json"
    sincedb_write_interval: float = 15.0
    sincedb_clean_after: float = 14 * 24 * 60 * 60
    log_dir: str = "/tmp/filewatch/logs"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WatchConfig:
        """Build a config from a mapping, rejecting unknown keys and wrong types.

        Integers are accepted for float fields and converted.

        Raises:
            ValueError: If the mapping contains keys that are not config fields,
                or a value of the wrong type.
        """
        types = {f.name: f.type for f in fields(cls)}
        unknown = sorted(set(data) - set(types))
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = {}
        for name, value in data.items():
            expected = types[name]
            if expected == "bool":
                ok = isinstance(value, bool)
            elif expected == "float":
                # bool is an int subclass
                ok = isinstance(value, (int, float)) and not isinstance(value, bool)
                value = float(value) if ok else value
            else:
                ok = isinstance(value, str)
            if not ok:
                raise ValueError(
                    f"Configuration key {name} must be {expected}, got {type(value).__name__}"
                )
            values[name] = value
        return cls(**values)


def load_config(config_path: str | Path) -> WatchConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed configuration; an empty document yields the defaults.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If YAML parsing fails or the document is not a mapping.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse configuration YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded configuration from {config_path}")
    return WatchConfig.from_dict(data)
