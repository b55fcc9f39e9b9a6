"""Data models for daily log files and the notes written into them."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional

LOG_SUFFIX = ".md"
LOG_NAME_PATTERN = re.compile(r"^(\d{2})-(\d{2})-(\d{4})\.md$")


def log_filename(day: date) -> str:
    """Get the log filename for a day, in format MM-DD-YYYY.md."""
    return f"{day.strftime('%m-%d-%Y')}{LOG_SUFFIX}"


def parse_log_filename(name: str) -> Optional[date]:
    """Parse the date out of a daily log filename.

    Returns:
        The date, or None if the name is not a daily log or names
        an impossible date (e.g. 02-30-2024.md).
    """
    match = LOG_NAME_PATTERN.match(name)
    if not match:
        return None
    month, day, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def backup_filename(now: datetime) -> str:
    """Get the archive name for a backup taken at `now`."""
    return f"backup-{now.strftime('%Y-%m-%d-%H%M%S')}.zip"


@dataclass(frozen=True)
class LogFile:
    """One calendar day's log file."""
    date: date
    path: Path

    @property
    def title(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class NoteEntry:
    """A single journaled line."""
    timestamp: datetime
    text: str

    def to_line(self) -> str:
        """Render entry as a markdown list item."""
        return f"- [{self.timestamp.strftime('%H:%M')}] {self.text}\n"
