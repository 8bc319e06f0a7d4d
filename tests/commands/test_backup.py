"""Tests for the offline store commands: show, backup, backups, restore."""

import json
from pathlib import Path
from typing import Any

from typer.testing import CliRunner

from configvault.cli import app
from configvault.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, EXIT_SUCCESS
from configvault.core.backups import BackupManager

runner = CliRunner()


def _paths(config_path: Path, backup_dir: Path) -> list[str]:
    return ["--config", str(config_path), "--backup-dir", str(backup_dir)]


class TestShowCommand:
    """Tests for `configvault show`."""

    def test_prints_document(self, config_path: Path, initial_document: dict[str, Any]) -> None:
        result = runner.invoke(app, ["show", "--config", str(config_path)])

        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.output) == initial_document

    def test_prints_section(self, config_path: Path) -> None:
        result = runner.invoke(app, ["show", "limits", "-c", str(config_path)])

        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.output) == {"max": 10}

    def test_missing_section_fails(self, config_path: Path) -> None:
        result = runner.invoke(app, ["show", "nope", "-c", str(config_path)])

        assert result.exit_code == EXIT_ERROR
        assert "Section 'nope' not found" in result.output

    def test_missing_document_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["show", "-c", str(tmp_path / "absent.json")])

        assert result.exit_code == EXIT_ERROR
        assert "Failed to read config file" in result.output

    def test_uses_cwd_default(self, tmp_path: Path, write_json) -> None:
        write_json(tmp_path / "config.json", {"here": 1})

        result = runner.invoke(app, ["show"])

        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.output) == {"here": 1}

    def test_invalid_dotenv_port_is_config_error(self, tmp_path: Path, config_path: Path) -> None:
        (tmp_path / ".env").write_text("PORT=nope\n")

        result = runner.invoke(app, ["show", "-c", str(config_path)])

        assert result.exit_code == EXIT_CONFIG_ERROR


class TestBackupCommand:
    """Tests for `configvault backup`."""

    def test_creates_backup(
        self, config_path: Path, backup_dir: Path, initial_document: dict[str, Any]
    ) -> None:
        result = runner.invoke(app, ["backup", *_paths(config_path, backup_dir)])

        assert result.exit_code == EXIT_SUCCESS
        assert "Backup created: config-backup-" in result.output
        files = list(backup_dir.iterdir())
        assert len(files) == 1
        assert json.loads(files[0].read_text(encoding="utf-8")) == initial_document

    def test_unreadable_document_fails(self, config_path: Path, backup_dir: Path) -> None:
        config_path.write_text("{bad", encoding="utf-8")

        result = runner.invoke(app, ["backup", *_paths(config_path, backup_dir)])

        assert result.exit_code == EXIT_ERROR
        assert not backup_dir.exists() or not any(backup_dir.iterdir())

    def test_backup_dir_that_is_a_file_fails(self, config_path: Path, backup_dir: Path) -> None:
        backup_dir.write_text("not a directory", encoding="utf-8")

        result = runner.invoke(app, ["backup", *_paths(config_path, backup_dir)])

        assert result.exit_code == EXIT_ERROR
        assert "Failed to create backup directory" in result.output
        assert "already exists" not in result.output


class TestBackupsCommand:
    """Tests for `configvault backups`."""

    def test_empty_directory_warns(self, config_path: Path, backup_dir: Path) -> None:
        result = runner.invoke(app, ["backups", *_paths(config_path, backup_dir)])

        assert result.exit_code == EXIT_SUCCESS
        assert "No backups" in result.output

    def test_lists_backups_newest_first(
        self, config_path: Path, backup_dir: Path, backups: BackupManager
    ) -> None:
        first = backups.snapshot()
        second = backups.snapshot()

        result = runner.invoke(app, ["backups", *_paths(config_path, backup_dir)])

        assert result.exit_code == EXIT_SUCCESS
        assert first.filename in result.output
        assert second.filename in result.output
        assert result.output.index(second.filename) < result.output.index(first.filename)


class TestRestoreCommand:
    """Tests for `configvault restore`."""

    def test_restores_document(
        self,
        config_path: Path,
        backup_dir: Path,
        backups: BackupManager,
        initial_document: dict[str, Any],
    ) -> None:
        handle = backups.snapshot()
        backups.store.replace({"changed": True})

        result = runner.invoke(
            app, ["restore", handle.filename, *_paths(config_path, backup_dir)]
        )

        assert result.exit_code == EXIT_SUCCESS
        assert f"Config restored from {handle.filename}" in result.output
        assert backups.store.read() == initial_document

    def test_unknown_backup_fails(
        self, config_path: Path, backup_dir: Path, initial_document: dict[str, Any]
    ) -> None:
        result = runner.invoke(
            app, ["restore", "config-backup-missing.json", *_paths(config_path, backup_dir)]
        )

        assert result.exit_code == EXIT_ERROR
        assert "Backup file not found" in result.output
        assert json.loads(config_path.read_text(encoding="utf-8")) == initial_document

    def test_corrupt_backup_fails(
        self, config_path: Path, backup_dir: Path, initial_document: dict[str, Any]
    ) -> None:
        backup_dir.mkdir(parents=True)
        (backup_dir / "config-backup-bad.json").write_text("{bad", encoding="utf-8")

        result = runner.invoke(
            app, ["restore", "config-backup-bad.json", *_paths(config_path, backup_dir)]
        )

        assert result.exit_code == EXIT_ERROR
        assert "not valid JSON" in result.output
        assert json.loads(config_path.read_text(encoding="utf-8")) == initial_document
