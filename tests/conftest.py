"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dirhandle.upload import FileUpload


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Path of a directory that does not exist yet."""
    return tmp_path / "storage"


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Create a small directory tree.

    Layout::

        tree/
            a.txt
            b.md
            .hidden
            sub/
                c.txt
                deeper/
                    d.txt
    """
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "b.md").write_text("b")
    (root / ".hidden").write_text("h")
    (root / "sub" / "c.txt").write_text("c")
    (root / "sub" / "deeper" / "d.txt").write_text("d")
    return root


# ============================================================================
# Mock FileSystem Fixture
# ============================================================================


@pytest.fixture
def mock_filesystem() -> MagicMock:
    """Create a mock FileOperations provider.

    The mock tracks all filesystem operations without touching real files.
    """
    fs = MagicMock()
    fs.exists.return_value = False
    return fs


# ============================================================================
# Upload Fixtures
# ============================================================================


@pytest.fixture
def staged_upload(tmp_path: Path) -> FileUpload:
    """Create an upload staged in a temporary file."""
    staging = tmp_path / "staging"
    staging.mkdir()
    tmp_file = staging / "upload-a1b2"
    tmp_file.write_bytes(b"uploaded data")
    return FileUpload("My Photo.JPG", tmp_file, size=13)


@pytest.fixture
def mock_upload() -> MagicMock:
    """Create a mock uploaded file that reports itself as ok."""
    upload = MagicMock()
    upload.is_ok.return_value = True
    upload.get_sanitized_name.return_value = "report.pdf"
    return upload
