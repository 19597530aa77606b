"""Filesystem operations provider.

This module provides the default implementation of the ``FileOperations``
protocol. The RealFileSystem implementation wraps ``os``, ``shutil`` and
``pathlib`` calls and reports every failure as ``FilesystemError``.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from dirhandle.finder import Finder
from dirhandle.protocols import PathArg, PathsArg
from dirhandle.types import FileInfo

logger = logging.getLogger(__name__)


class FilesystemError(Exception):
    """Error during a filesystem operation."""

    def __init__(self, message: str, path: PathArg | None = None) -> None:
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None


def _to_paths(files: PathsArg) -> list[Path]:
    """Normalize one path or an iterable of paths to a list of Paths."""
    if isinstance(files, (str, os.PathLike)):
        return [Path(files)]
    return [Path(f) for f in files]


def _raise_listing_error(error: OSError) -> None:
    raise FilesystemError(f"Failed to list {error.filename}: {error}", error.filename) from error


def _walk(path: Path) -> Iterator[Path]:
    """Yield every descendant of a directory without following symlinks.

    A directory is yielded before it is listed, so a caller changing its
    mode can make it listable. Listing failures raise FilesystemError.
    """
    for root, dirs, files in os.walk(path, onerror=_raise_listing_error):
        for name in dirs + files:
            yield Path(root) / name


def _with_descendants(path: Path, recursive: bool) -> Iterator[Path]:
    """Yield ``path`` and, when recursing into a real directory, its descendants."""
    yield path
    if recursive and path.is_dir() and not path.is_symlink():
        yield from (p for p in _walk(path) if not p.is_symlink())


class RealFileSystem:
    """Production filesystem implementation.

    Wraps standard library os, shutil and Path operations.
    Satisfies the FileOperations protocol structurally.
    """

    def mkdir(self, dirs: PathsArg, mode: int = 0o777) -> None:
        """Create directories and their missing parents."""
        for path in _to_paths(dirs):
            if path.is_dir():
                continue
            logger.debug("Creating directory %s (mode %o)", path, mode)
            try:
                os.makedirs(path, mode, exist_ok=True)
            except OSError as e:
                raise FilesystemError(f"Failed to create {path}: {e}", path) from e

    def chmod(
        self, files: PathsArg, mode: int, umask: int = 0, recursive: bool = False
    ) -> None:
        """Change the mode of files, optionally recursing into directories."""
        effective = mode & ~umask
        for path in _to_paths(files):
            for target in _with_descendants(path, recursive):
                try:
                    os.chmod(target, effective)
                except OSError as e:
                    raise FilesystemError(f"Failed to chmod file {target}: {e}", target) from e
            logger.debug("Changed mode of %s to %o", path, effective)

    def copy(self, origin_file: PathArg, target_file: PathArg, override: bool = False) -> None:
        """Copy a file, skipping it when the target is up to date."""
        origin = Path(origin_file)
        target = Path(target_file)
        if not origin.is_file():
            raise FilesystemError(
                f"Failed to copy {origin} because file does not exist.", origin
            )

        if not override and target.is_file():
            if origin.stat().st_mtime <= target.stat().st_mtime:
                logger.debug("Skipping copy of %s, %s is up to date", origin, target)
                return

        self.mkdir(target.parent)
        try:
            shutil.copy2(origin, target)
        except OSError as e:
            raise FilesystemError(f"Failed to copy {origin} to {target}: {e}", origin) from e
        logger.debug("Copied %s to %s", origin, target)

    def touch(
        self, files: PathsArg, time: float | None = None, atime: float | None = None
    ) -> None:
        """Create files or update their timestamps."""
        for path in _to_paths(files):
            try:
                path.touch(exist_ok=True)
                if time is not None or atime is not None:
                    mtime = time if time is not None else path.stat().st_mtime
                    os.utime(path, (atime if atime is not None else mtime, mtime))
            except OSError as e:
                raise FilesystemError(f"Failed to touch {path}: {e}", path) from e

    def remove(self, files: PathsArg) -> None:
        """Remove files, symlinks and directory trees; missing paths are ignored."""
        for path in _to_paths(files):
            try:
                if path.is_symlink() or path.is_file():
                    path.unlink()
                elif path.is_dir():
                    shutil.rmtree(path)
                else:
                    continue
            except OSError as e:
                raise FilesystemError(f"Failed to remove {path}: {e}", path) from e
            logger.debug("Removed %s", path)

    def chown(self, files: PathsArg, user: str | int, recursive: bool = False) -> None:
        """Change the owner of files."""
        self._change_owner(files, recursive, user=user)

    def chgrp(self, files: PathsArg, group: str | int, recursive: bool = False) -> None:
        """Change the group of files."""
        self._change_owner(files, recursive, group=group)

    def _change_owner(self, files: PathsArg, recursive: bool, **owner: str | int) -> None:
        """Apply ``shutil.chown`` to paths and, optionally, their descendants.

        Args:
            files: Path or paths to change.
            recursive: Also change every descendant of directories.
            **owner: ``user`` and/or ``group`` passed to shutil.chown.
        """
        for path in _to_paths(files):
            for target in _with_descendants(path, recursive):
                try:
                    shutil.chown(target, **owner)
                except (OSError, LookupError) as e:
                    raise FilesystemError(
                        f"Failed to change owner of {target}: {e}", target
                    ) from e
            logger.debug("Changed ownership of %s: %s", path, owner)

    def rename(self, origin: PathArg, target: PathArg, overwrite: bool = False) -> None:
        """Rename a file or directory."""
        source = Path(origin)
        destination = Path(target)
        if not overwrite and (destination.exists() or destination.is_symlink()):
            raise FilesystemError(
                f"Cannot rename because the target {destination} already exists.",
                destination,
            )
        try:
            shutil.move(os.fspath(source), os.fspath(destination))
        except OSError as e:
            raise FilesystemError(
                f"Cannot rename {source} to {destination}: {e}", destination
            ) from e
        logger.debug("Renamed %s to %s", source, destination)

    def symlink(
        self, origin_dir: PathArg, target_dir: PathArg, copy_on_windows: bool = False
    ) -> None:
        """Create ``target_dir`` as a symbolic link to ``origin_dir``."""
        if copy_on_windows and sys.platform == "win32":
            self.mirror(origin_dir, target_dir)
            return

        origin = Path(origin_dir)
        link = Path(target_dir)
        if link.is_symlink():
            if Path(os.readlink(link)) == origin:
                return
            self.remove(link)

        self.mkdir(link.parent)
        try:
            os.symlink(origin, link, target_is_directory=origin.is_dir())
        except OSError as e:
            raise FilesystemError(
                f"Failed to create symbolic link from {origin} to {link}: {e}", link
            ) from e
        logger.debug("Linked %s -> %s", link, origin)

    def mirror(
        self,
        origin_dir: PathArg,
        target_dir: PathArg,
        iterator: Iterable[FileInfo] | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Make ``target_dir`` a copy of ``origin_dir``.

        Options:
            override: Copy files even when the target is up to date.
            delete: Remove target entries that are missing in the origin.
        """
        options = options or {}
        origin = Path(origin_dir)
        target = Path(target_dir)
        if not origin.is_dir():
            raise FilesystemError(f"Failed to mirror {origin}: not a directory.", origin)

        if options.get("delete") and target.is_dir():
            for entry in Finder.find("*").from_(target).child_first():
                if not (origin / entry.relative_to(target)).exists():
                    self.remove(entry.path)

        entries = iterator if iterator is not None else Finder.find("*").from_(origin)
        self.mkdir(target)
        for entry in entries:
            destination = target / entry.relative_to(origin)
            if entry.path.is_symlink():
                self.symlink(os.readlink(entry.path), destination)
            elif entry.is_dir:
                self.mkdir(destination)
            else:
                self.copy(entry.path, destination, bool(options.get("override")))
        logger.debug("Mirrored %s to %s", origin, target)

    def exists(self, files: PathsArg) -> bool:
        """Check if every given path exists."""
        return all(os.path.lexists(path) for path in _to_paths(files))
