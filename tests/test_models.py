"""Tests for log file naming and note formatting."""

from datetime import date, datetime
from pathlib import Path

import pytest

from dailylog.models import LogFile, NoteEntry, backup_filename, log_filename, parse_log_filename


class TestLogFilename:
    """Tests for log_filename and parse_log_filename."""

    def test_format(self):
        assert log_filename(date(2024, 3, 5)) == "03-05-2024.md"

    def test_parse(self):
        assert parse_log_filename("12-31-2023.md") == date(2023, 12, 31)

    @pytest.mark.parametrize("name", [
        "2024-03-05.md",
        "03-05-2024.txt",
        "03-05-2024.md.lock",
        "3-5-2024.md",
        "13-01-2024.md",
        "02-30-2024.md",
        "notes.md",
        "",
    ])
    def test_rejects(self, name):
        assert parse_log_filename(name) is None

    def test_leap_day(self):
        assert parse_log_filename("02-29-2024.md") == date(2024, 2, 29)
        assert parse_log_filename("02-29-2023.md") is None


class TestBackupFilename:
    """Tests for backup_filename."""

    def test_format(self):
        assert backup_filename(datetime(2024, 3, 5, 9, 4, 2)) == "backup-2024-03-05-090402.zip"


class TestNoteEntry:
    """Tests for NoteEntry.to_line."""

    def test_line(self):
        entry = NoteEntry(timestamp=datetime(2024, 3, 5, 14, 7, 59), text="bought milk")
        assert entry.to_line() == "- [14:07] bought milk\n"

    def test_midnight(self):
        entry = NoteEntry(timestamp=datetime(2024, 3, 5, 0, 0), text="late")
        assert entry.to_line() == "- [00:00] late\n"


class TestLogFile:
    """Tests for LogFile."""

    def test_title_is_filename(self):
        log = LogFile(date=date(2024, 3, 5), path=Path("/x/logs/03-05-2024.md"))
        assert log.title == "03-05-2024.md"

    def test_equality_by_value(self):
        a = LogFile(date(2024, 3, 5), Path("/x/03-05-2024.md"))
        b = LogFile(date(2024, 3, 5), Path("/x/03-05-2024.md"))
        assert a == b
        assert hash(a) == hash(b)
