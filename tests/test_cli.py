"""Tests for the command-line entry point."""

import logging
import zipfile
from datetime import date, datetime

import pytest

from dailylog import cli
from dailylog.config import DailyLogConfig
from dailylog.store import NoteStore


def run(argv):
    """Run main and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        cli.main(argv)
    return exc_info.value.code


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCommands:
    """Tests for one-shot commands."""

    def test_add(self, temp_root, capsys):
        assert run(["--base-dir", str(temp_root), "--add", "  from the shell  "]) == 0

        today = datetime.now().date()
        path = temp_root / "logs" / f"{today.strftime('%m-%d-%Y')}.md"
        assert path.read_text(encoding="utf-8").endswith("] from the shell\n")
        assert str(path) in capsys.readouterr().out

    def test_add_empty_fails(self, temp_root, capsys):
        assert run(["--base-dir", str(temp_root), "--add", "   "]) == 1
        assert "Error: note is empty" in capsys.readouterr().err

    def test_add_multiline_fails(self, temp_root, capsys):
        assert run(["--base-dir", str(temp_root), "--add", "a\nb"]) == 1
        assert "Error: note must be a single line" in capsys.readouterr().err
        assert list((temp_root / "logs").iterdir()) == []

    def test_list_newest_first(self, temp_root, capsys):
        store = NoteStore(DailyLogConfig(base_dir=temp_root))
        store.append(date(2024, 1, 2), "a")
        store.append(date(2024, 3, 4), "b")

        assert run(["--base-dir", str(temp_root), "--list"]) == 0

        assert capsys.readouterr().out.splitlines() == ["03-04-2024.md", "01-02-2024.md"]

    def test_search(self, temp_root, capsys):
        store = NoteStore(DailyLogConfig(base_dir=temp_root))
        store.append(date(2024, 1, 2), "Groceries")
        store.append(date(2024, 3, 4), "meeting")

        assert run(["--base-dir", str(temp_root), "--search", "GROCER"]) == 0

        assert capsys.readouterr().out.splitlines() == ["01-02-2024.md"]

    def test_backup(self, temp_root, capsys):
        NoteStore(DailyLogConfig(base_dir=temp_root)).append(date(2024, 1, 2), "a")

        assert run(["--base-dir", str(temp_root), "--backup"]) == 0

        archive = capsys.readouterr().out.strip()
        assert archive.startswith(str(temp_root / "backups" / "backup-"))
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["logs/01-02-2024.md"]

    def test_commands_are_exclusive(self, temp_root):
        assert run(["--base-dir", str(temp_root), "--list", "--backup"]) == 2

    def test_config_max_length(self, temp_root, capsys):
        (temp_root / "dailylog.toml").write_text("[notes]\nmax_length = 3\n")

        assert run(["--base-dir", str(temp_root), "--add", "four"]) == 1
        assert "maximum length is 3" in capsys.readouterr().err


class TestStartup:
    """Tests for startup failures and interactive launch."""

    def test_bad_config(self, temp_root, capsys):
        (temp_root / "dailylog.toml").write_text("[notes]\nmax_length = 0\n")

        assert run(["--base-dir", str(temp_root), "--list"]) == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_directory_failure_is_fatal(self, temp_root, capsys):
        (temp_root / "logs").write_text("in the way")

        assert run(["--base-dir", str(temp_root), "--list"]) == 1
        assert "Error creating directories" in capsys.readouterr().err

    def test_interactive_launch(self, temp_root, monkeypatch):
        launched = []
        monkeypatch.setattr(cli, "run_tui", launched.append)

        cli.main(["--base-dir", str(temp_root)])

        assert len(launched) == 1
        assert launched[0].store.config.base_dir == temp_root
        assert (temp_root / "logs").is_dir()
        assert (temp_root / cli.LOG_FILE_NAME).exists()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_file_handler(self, temp_root):
        log_file = temp_root / "sub" / "out.log"
        cli.setup_logging("DEBUG", log_file)

        logging.getLogger("dailylog.test").debug("hello log")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello log" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger().level == logging.DEBUG
