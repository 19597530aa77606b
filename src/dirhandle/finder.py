"""Glob based file finder.

Builds lazy listings of files and directories matching shell-style masks::

    for info in Finder.find("*.txt", "*.md").from_(root):
        print(info.path)

``in_()`` searches a single level, ``from_()`` the whole subtree. Every
iteration walks the filesystem again, so a finder can be reused.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from dirhandle.types import FileInfo

__all__ = ["Finder"]


def _flatten(masks: Iterable[str | Iterable[str]]) -> list[str]:
    """Flatten strings and lists of strings into a single list."""
    result: list[str] = []
    for mask in masks:
        if isinstance(mask, str):
            result.append(mask)
        else:
            result.extend(_flatten(mask))
    return result


class Finder:
    """Lazy, restartable search for files matching masks."""

    def __init__(self, masks: list[str]) -> None:
        """Initialize the finder.

        Args:
            masks: Shell-style masks; an entry matches if any mask matches.

        Note:
            Prefer the `find()` factory method for construction.
        """
        self.masks = masks or ["*"]
        self._dirs: list[Path] = []
        self._recursive = False
        self._child_first = False

    @classmethod
    def find(cls, *masks: str | Iterable[str]) -> Finder:
        """Find files and directories matching the masks."""
        return cls(_flatten(masks))

    def in_(self, *dirs: str | os.PathLike[str]) -> Finder:
        """Search only the direct children of the given directories."""
        self._dirs = [Path(d) for d in dirs]
        self._recursive = False
        return self

    def from_(self, *dirs: str | os.PathLike[str]) -> Finder:
        """Search the given directories recursively."""
        self._dirs = [Path(d) for d in dirs]
        self._recursive = True
        return self

    def child_first(self) -> Finder:
        """Yield the content of a directory before the directory itself."""
        self._child_first = True
        return self

    def __iter__(self) -> Iterator[FileInfo]:
        if not self._dirs:
            raise ValueError("Call in_() or from_() to specify directory to search.")
        for root in self._dirs:
            yield from self._walk(root, root)

    def _walk(self, root: Path, current: Path) -> Iterator[FileInfo]:
        """Walk one directory level and recurse into subdirectories.

        Args:
            root: Directory the search started from.
            current: Directory being listed.

        Yields:
            Matching entries, pre-order or child-first.
        """
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            info = FileInfo(Path(entry.path), entry.is_dir(follow_symlinks=False))
            relative = info.path.relative_to(root).as_posix()
            matches = any(self._match(mask, info.name, relative) for mask in self.masks)

            if not self._child_first and matches:
                yield info
            if self._recursive and info.is_dir:
                yield from self._walk(root, info.path)
            if self._child_first and matches:
                yield info

    @staticmethod
    def _match(mask: str, name: str, relative: str) -> bool:
        # masks with a slash are matched segment by segment against the path
        # below the search root, so "*" never crosses a separator
        if "/" in mask:
            segments = relative.split("/")
            mask_segments = mask.strip("/").split("/")
            return len(segments) == len(mask_segments) and all(
                fnmatch.fnmatchcase(s, m) for s, m in zip(segments, mask_segments)
            )
        return fnmatch.fnmatchcase(name, mask)

    def __repr__(self) -> str:
        return f"Finder(masks={self.masks!r}, dirs={[str(d) for d in self._dirs]!r})"
