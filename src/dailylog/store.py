"""Note store - append-only daily log files with lock-guarded writes."""

from __future__ import annotations

import logging
import os
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from .config import DailyLogConfig
from .locking import LockError, file_lock
from .models import LogFile, NoteEntry, backup_filename, log_filename, parse_log_filename

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for note store operations."""
    pass


class ContentInvalid(StoreError):
    """Raised when a note cannot be written as one log line. Nothing is written."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class IOFailure(StoreError):
    """Raised when a filesystem operation fails.

    Carries the operation that failed (e.g. "open", "write") and the path
    it was applied to.
    """

    def __init__(self, operation: str, path: Path, cause: BaseException):
        super().__init__(f"failed to {operation} {path}: {cause}")
        self.operation = operation
        self.path = path
        self.cause = cause


class LockFailure(StoreError):
    """Raised when the advisory lock on a log file cannot be taken or released."""

    def __init__(self, path: Path, cause: BaseException):
        super().__init__(f"failed to lock {path}: {cause}")
        self.path = path
        self.cause = cause


class NoteStore:
    """Owns the daily log files under the configured storage root."""

    def __init__(self, config: DailyLogConfig):
        self.config = config

    @property
    def notes_path(self) -> Path:
        return self.config.get_notes_path()

    def path_for(self, day: date) -> Path:
        """Get path to the log file for a given day."""
        return self.notes_path / log_filename(day)

    def ensure_directories(self) -> None:
        """Create the log directory if it doesn't exist.

        Raises:
            IOFailure: If the directory cannot be created.
        """
        try:
            self.notes_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure("create directory", self.notes_path, e) from e

    def validate(self, text: str) -> str:
        """Trim a note and check it can be written as one log line.

        Returns:
            The trimmed text.

        Raises:
            ContentInvalid: If the trimmed note is empty, too long, spans
                more than one line or cannot be encoded as UTF-8.
        """
        content = text.strip()
        if not content:
            raise ContentInvalid("note is empty")
        if len(content.splitlines()) > 1:
            raise ContentInvalid("note must be a single line")
        try:
            content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ContentInvalid(f"note is not valid text: {e.reason}") from e
        if len(content) > self.config.max_note_len:
            raise ContentInvalid(
                f"note too long: maximum length is {self.config.max_note_len} characters"
            )
        return content

    # ========== Write Operations ==========

    def append(self, day: date, text: str, at: Optional[datetime] = None) -> NoteEntry:
        """Append a note to the log file for `day`.

        The file is created on first use. The write happens under an
        exclusive lock on the file, so concurrent writers never
        interleave partial lines.

        Args:
            day: Day whose log receives the note
            text: Note content; surrounding whitespace is trimmed
            at: Time used for the [HH:MM] prefix (default: now)

        Returns:
            The NoteEntry that was written.

        Raises:
            ContentInvalid: If the note is empty, too long or not one line.
            IOFailure: If the directory, open or write fails.
            LockFailure: If the file cannot be locked.
        """
        entry = NoteEntry(timestamp=at or datetime.now(), text=self.validate(text))
        path = self.path_for(day)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure("create directory", path.parent, e) from e

        try:
            f = open(path, "a", encoding="utf-8")
        except OSError as e:
            raise IOFailure("open", path, e) from e

        with f:
            try:
                with file_lock(f):
                    try:
                        f.write(entry.to_line())
                        f.flush()
                    except OSError as e:
                        raise IOFailure("write", path, e) from e
            except LockError as e:
                raise LockFailure(path, e.cause) from e

        logger.debug("Appended %d characters to %s", len(entry.text), path)
        return entry

    # ========== Read Operations ==========

    def read(self, path: Path) -> bytes:
        """Read a whole log file.

        No lock is taken; a concurrent append may or may not be visible.

        Raises:
            IOFailure: If the file is missing or unreadable.
        """
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise IOFailure("read", Path(path), e) from e

    def list(self) -> list[LogFile]:
        """List daily log files in filesystem listing order.

        Only files named MM-DD-YYYY.md are included. A missing log
        directory yields an empty list.

        Raises:
            IOFailure: If the directory exists but cannot be listed.
        """
        try:
            names = os.listdir(self.notes_path)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise IOFailure("list", self.notes_path, e) from e

        logs = []
        for name in names:
            day = parse_log_filename(name)
            if day is None:
                continue
            path = self.notes_path / name
            if not path.is_file():
                continue
            logs.append(LogFile(date=day, path=path))
        return logs

    # ========== Export Operations ==========

    def export(self, destination: Path) -> Path:
        """Write every file under the log directory into a zip archive.

        Entries keep their path relative to the storage root, so they
        start with the notes directory name (e.g. logs/03-05-2024.md).
        No lock is held during the walk. The archive is always closed,
        even when the walk fails part way.

        Returns:
            The archive path.

        Raises:
            IOFailure: If the archive cannot be created or a source
                file cannot be read.
        """
        destination = Path(destination)
        try:
            archive = zipfile.ZipFile(destination, "w", zipfile.ZIP_DEFLATED)
        except OSError as e:
            raise IOFailure("create backup file", destination, e) from e

        count = 0
        with archive:
            for root, dirs, files in os.walk(self.notes_path, onerror=self._walk_error):
                dirs.sort()
                for name in sorted(files):
                    source = Path(root) / name
                    if not source.is_file():
                        continue
                    try:
                        content = source.read_bytes()
                        archive.writestr(source.relative_to(self.config.base_dir).as_posix(), content)
                    except OSError as e:
                        raise IOFailure("archive", source, e) from e
                    count += 1

        logger.debug("Exported %d files to %s", count, destination)
        return destination

    def _walk_error(self, error: OSError) -> None:
        raise IOFailure("archive", Path(error.filename or self.notes_path), error) from error

    def backup(self, now: Optional[datetime] = None) -> Path:
        """Export the logs to a timestamped archive in the backups directory.

        Returns:
            Path of the new archive.

        Raises:
            IOFailure: If the backups directory or the archive fails.
        """
        backups_dir = self.config.get_backups_path()
        try:
            backups_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailure("create backup directory", backups_dir, e) from e

        return self.export(backups_dir / backup_filename(now or datetime.now()))
