"""Tests for CLI commands using context injection.

Commands accept a _context parameter for dependency injection, enabling unit
tests without touching the user's configuration.
"""

from __future__ import annotations

import stat
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer

from dirhandle import cli
from dirhandle.config import Settings
from dirhandle.context import AppContext
from dirhandle.filesystem import FilesystemError
from dirhandle.upload import FileUpload


@pytest.fixture
def context() -> AppContext:
    """Create a context backed by the real filesystem."""
    return AppContext(settings=Settings())


@pytest.fixture
def mock_context(mock_filesystem: MagicMock) -> AppContext:
    """Create a context with a mock filesystem provider."""
    return AppContext(settings=Settings(), filesystem=mock_filesystem)


class TestFindCommand:
    """Tests for the find command."""

    def test_find_lists_matches(
        self, context: AppContext, tree: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test matching entries are shown."""
        cli.find(root=tree, masks=["*.md"], recursive=False, config=None, _context=context)

        out = capsys.readouterr().out
        assert "b.md" in out
        assert "a.txt" not in out

    def test_find_recursive(
        self, context: AppContext, tree: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test recursive search shows nested entries."""
        cli.find(root=tree, masks=["d.txt"], recursive=True, config=None, _context=context)

        assert "d.txt" in capsys.readouterr().out

    def test_find_no_matches(
        self, context: AppContext, tree: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test an empty result is reported."""
        cli.find(root=tree, masks=["*.zip"], recursive=False, config=None, _context=context)

        assert "No matching entries" in capsys.readouterr().out

    def test_find_keeps_modes(self, context: AppContext, tree: Path) -> None:
        """Test listing a directory does not change any mode."""
        (tree / "sub" / "c.txt").chmod(0o600)
        tree.chmod(0o750)

        cli.find(root=tree, masks=["*.md"], recursive=True, config=None, _context=context)

        assert stat.S_IMODE((tree / "sub" / "c.txt").stat().st_mode) == 0o600
        assert stat.S_IMODE(tree.stat().st_mode) == 0o750

    def test_find_missing_root_exits(self, context: AppContext, storage_dir: Path) -> None:
        """Test a missing root exits with status 1 and is not created."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.find(root=storage_dir, masks=None, recursive=False, config=None, _context=context)

        assert exc_info.value.exit_code == 1
        assert not storage_dir.exists()

    def test_invalid_config_exits(self, tree: Path, tmp_path: Path) -> None:
        """Test a broken configuration file exits with status 1."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("randomNameLength: [unclosed\n")

        with pytest.raises(typer.Exit) as exc_info:
            cli.find(root=tree, masks=None, recursive=False, config=config_file)

        assert exc_info.value.exit_code == 1

    def test_missing_config_exits(self, tree: Path, tmp_path: Path) -> None:
        """Test a missing configuration file exits with status 1."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.find(root=tree, masks=None, recursive=False, config=tmp_path / "missing.yaml")

        assert exc_info.value.exit_code == 1



class TestReadWriteCommands:
    """Tests for the read and write commands."""

    def test_write_then_read(
        self, context: AppContext, storage_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test writing text and reading it back."""
        cli.write(root=storage_dir, file="notes/a.txt", text="hello", config=None, _context=context)
        capsys.readouterr()

        cli.read(root=storage_dir, file="notes/a.txt", config=None, _context=context)

        assert (storage_dir / "notes" / "a.txt").read_text() == "hello"
        assert "hello" in capsys.readouterr().out

    def test_read_missing_exits(self, context: AppContext, tree: Path) -> None:
        """Test reading a missing file exits with status 1."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.read(root=tree, file="missing.txt", config=None, _context=context)

        assert exc_info.value.exit_code == 1

    def test_write_failure_exits(self, context: AppContext, storage_dir: Path) -> None:
        """Test a failing write exits with status 1."""
        (storage_dir / "taken").mkdir(parents=True)

        with pytest.raises(typer.Exit) as exc_info:
            cli.write(root=storage_dir, file="taken", text="x", config=None, _context=context)

        assert exc_info.value.exit_code == 1

    def test_read_keeps_modes(self, context: AppContext, tree: Path) -> None:
        """Test reading a file does not change its mode."""
        (tree / "a.txt").chmod(0o600)

        cli.read(root=tree, file="a.txt", config=None, _context=context)

        assert stat.S_IMODE((tree / "a.txt").stat().st_mode) == 0o600

    def test_unwritable_root_exits(self, mock_context: AppContext, tmp_path: Path) -> None:
        """Test a root that cannot be made writable exits with status 1."""
        mock_context.filesystem.mkdir.side_effect = FilesystemError("Failed to create")

        with pytest.raises(typer.Exit) as exc_info:
            cli.write(root=tmp_path, file="a.txt", text="x", config=None, _context=mock_context)

        assert exc_info.value.exit_code == 1


class TestPutCommand:
    """Tests for the put command."""

    def test_put_stores_copy(
        self,
        context: AppContext,
        storage_dir: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test the file is stored under a random name and the source is kept."""
        source = tmp_path / "Quarterly Report.pdf"
        source.write_bytes(b"%PDF")

        cli.put(root=storage_dir, source=source, name=None, config=None, _context=context)

        stored = [p for p in storage_dir.iterdir()]
        assert len(stored) == 1
        assert stored[0].name.endswith(".Quarterly-Report.pdf")
        assert stored[0].read_bytes() == b"%PDF"
        assert source.exists()
        assert stored[0].name in capsys.readouterr().out

    def test_put_custom_name(self, context: AppContext, storage_dir: Path, tmp_path: Path) -> None:
        """Test --name replaces the stored suffix."""
        source = tmp_path / "upload.bin"
        source.write_bytes(b"x")

        cli.put(root=storage_dir, source=source, name="avatar.png", config=None, _context=context)

        assert next(storage_dir.iterdir()).name.endswith(".avatar.png")

    def test_put_missing_source(self, context: AppContext, storage_dir: Path, tmp_path: Path) -> None:
        """Test a missing source exits with status 1."""
        with pytest.raises(typer.Exit) as exc_info:
            cli.put(
                root=storage_dir,
                source=tmp_path / "missing",
                name=None,
                config=None,
                _context=context,
            )

        assert exc_info.value.exit_code == 1

    def test_put_failure_discards_staged_copy(
        self,
        context: AppContext,
        storage_dir: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a failed store removes the staged temporary file."""
        staging = tmp_path / "staging"
        staging.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(staging))

        def fail_move(self: FileUpload, dest: object) -> FileUpload:
            raise OSError("disk full")

        monkeypatch.setattr(FileUpload, "move", fail_move)
        source = tmp_path / "report.pdf"
        source.write_bytes(b"%PDF")

        with pytest.raises(typer.Exit) as exc_info:
            cli.put(root=storage_dir, source=source, name=None, config=None, _context=context)

        assert exc_info.value.exit_code == 1
        assert list(staging.iterdir()) == []
        assert source.exists()


class TestPurgeCommand:
    """Tests for the purge command."""

    def test_purge_with_yes(self, context: AppContext, tree: Path) -> None:
        """Test --yes purges without asking."""
        cli.purge(root=tree, yes=True, config=None, _context=context)

        assert tree.is_dir()
        assert list(tree.iterdir()) == []

    def test_purge_declined(
        self, context: AppContext, tree: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test declining the confirmation keeps everything."""
        monkeypatch.setattr(cli.ui, "confirm", lambda question: False)

        with pytest.raises(typer.Exit) as exc_info:
            cli.purge(root=tree, yes=False, config=None, _context=context)

        assert exc_info.value.exit_code == 1
        assert (tree / "a.txt").exists()

    def test_purge_confirmed(
        self, context: AppContext, tree: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test confirming the prompt purges."""
        monkeypatch.setattr(cli.ui, "confirm", lambda question: True)

        cli.purge(root=tree, yes=False, config=None, _context=context)

        assert list(tree.iterdir()) == []


class TestCopyRemoveCommands:
    """Tests for the copy and remove commands."""

    def test_copy(self, mock_context: AppContext, tmp_path: Path) -> None:
        """Test copy delegates with rebased paths."""
        cli.copy(
            root=tmp_path,
            origin="a.txt",
            target="b.txt",
            override=True,
            config=None,
            _context=mock_context,
        )

        mock_context.filesystem.copy.assert_called_once_with(
            str(tmp_path / "a.txt"), str(tmp_path / "b.txt"), True
        )

    def test_copy_failure_exits(self, mock_context: AppContext, tmp_path: Path) -> None:
        """Test a provider failure exits with status 1."""
        mock_context.filesystem.copy.side_effect = FilesystemError("Failed to copy")

        with pytest.raises(typer.Exit) as exc_info:
            cli.copy(
                root=tmp_path,
                origin="a.txt",
                target="b.txt",
                override=False,
                config=None,
                _context=mock_context,
            )

        assert exc_info.value.exit_code == 1

    def test_remove(self, context: AppContext, tree: Path) -> None:
        """Test removing several paths."""
        cli.remove(root=tree, files=["a.txt", "sub"], config=None, _context=context)

        assert not (tree / "a.txt").exists()
        assert not (tree / "sub").exists()
        assert (tree / "b.md").exists()


class TestVersion:
    """Tests for the version callback."""

    def test_version_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the version and exits."""
        with pytest.raises(typer.Exit):
            cli.version_callback(True)

        assert "dirhandle v" in capsys.readouterr().out

    def test_no_version_is_noop(self) -> None:
        """Test the callback does nothing without the flag."""
        cli.version_callback(False)
