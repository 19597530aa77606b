"""Shared data types for dirhandle."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = ["FileInfo"]


@dataclass(frozen=True)
class FileInfo:
    """A file or directory found by the finder.

    Attributes:
        path: Full path of the entry.
        is_dir: True if the entry is a directory (symlinks are not followed).
    """

    path: Path
    is_dir: bool = False

    def __post_init__(self) -> None:
        """Normalize the path."""
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @property
    def name(self) -> str:
        """Base name of the entry."""
        return self.path.name

    @property
    def pathname(self) -> str:
        """Full path as a string."""
        return str(self.path)

    @property
    def is_file(self) -> bool:
        """True for anything that is not a directory."""
        return not self.is_dir

    def relative_to(self, base: str | Path) -> Path:
        """Path of the entry relative to ``base``."""
        return self.path.relative_to(base)

    def __str__(self) -> str:
        return self.pathname

    def __fspath__(self) -> str:
        return self.pathname
