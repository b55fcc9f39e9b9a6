"""Configuration loading for dailylog.

The storage root comes from, in order: an explicit argument, the
DAILYLOG_HOME environment variable, then ~/.dailylog. Settings are read
from a .toml or .json file in that root when one exists.
"""

from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

DEFAULT_BASE_DIR_NAME = ".dailylog"
DEFAULT_MAX_NOTE_LEN = 1000
BASE_DIR_ENV = "DAILYLOG_HOME"


def default_base_dir() -> Path:
    """Get the storage root.

    Uses ~/.dailylog by default.
    Can be overridden with the DAILYLOG_HOME environment variable.
    """
    custom_dir = os.environ.get(BASE_DIR_ENV)
    if custom_dir:
        return Path(custom_dir).expanduser()
    return Path.home() / DEFAULT_BASE_DIR_NAME


@dataclass
class DailyLogConfig:
    """Configuration for the note store."""

    base_dir: Path = field(default_factory=default_base_dir)

    # Directory structure (relative to base_dir)
    notes_dir: str = "logs"
    backups_dir: str = "backups"

    max_note_len: int = DEFAULT_MAX_NOTE_LEN

    def get_notes_path(self) -> Path:
        return self.base_dir / self.notes_dir

    def get_backups_path(self) -> Path:
        return self.base_dir / self.backups_dir


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def dict_to_config(data: dict[str, Any], base_dir: Path) -> DailyLogConfig:
    """Convert dictionary to DailyLogConfig.

    Raises:
        ValueError: If max_length is not a positive integer
    """
    config = DailyLogConfig(base_dir=base_dir)

    if "directories" in data:
        dirs = data["directories"]
        if "notes" in dirs:
            config.notes_dir = dirs["notes"]
        if "backups" in dirs:
            config.backups_dir = dirs["backups"]

    if "notes" in data:
        notes = data["notes"]
        if "max_length" in notes:
            max_len = notes["max_length"]
            if not isinstance(max_len, int) or isinstance(max_len, bool) or max_len < 1:
                raise ValueError(f"notes.max_length must be a positive integer, got {max_len!r}")
            config.max_note_len = max_len

    return config


def find_config_file(base_dir: Path) -> Optional[Path]:
    """Find configuration file in the storage root.

    Search order:
    1. dailylog.toml
    2. dailylog.json
    3. config.toml
    4. config.json
    """
    candidates = [
        "dailylog.toml",
        "dailylog.json",
        "config.toml",
        "config.json",
    ]

    for name in candidates:
        path = base_dir / name
        if path.exists():
            return path

    return None


def load_config(base_dir: Optional[Path] = None, config_path: Optional[Path] = None) -> DailyLogConfig:
    """Load dailylog configuration.

    Args:
        base_dir: Storage root (default: DAILYLOG_HOME or ~/.dailylog)
        config_path: Optional explicit path to config file

    Returns:
        DailyLogConfig instance
    """
    if base_dir is None:
        base_dir = default_base_dir()

    if config_path is None:
        config_path = find_config_file(base_dir)

    if config_path is None:
        # No config file - use defaults
        return DailyLogConfig(base_dir=base_dir)

    suffix = config_path.suffix.lower()

    if suffix == ".toml":
        config_dict = load_toml_config(config_path)
        return dict_to_config(config_dict, base_dir)

    elif suffix == ".json":
        config_dict = load_json_config(config_path)
        return dict_to_config(config_dict, base_dir)

    else:
        raise ValueError(f"Unsupported config file type: {suffix}")
