"""Protocol definitions for the collaborators of a directory handle.

This module defines abstract interfaces (Protocols) for the services a
``Directory`` delegates to. Designing to interfaces enables:
- Loose coupling between the handle and the filesystem
- Easy substitution of test doubles
- Clear contracts for implementations

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from dirhandle.types import FileInfo

PathArg = Union[str, os.PathLike[str]]
PathsArg = Union[PathArg, Iterable[PathArg]]


@runtime_checkable
class FileOperations(Protocol):
    """Protocol for primitive filesystem mutations.

    Every ``files``/``dirs`` argument accepts a single path or an iterable
    of paths. Implementations raise ``FilesystemError`` on failure.
    """

    def mkdir(self, dirs: PathsArg, mode: int = 0o777) -> None:
        """Create directories recursively.

        Args:
            dirs: Directory or directories to create.
            mode: Permission mode for created directories.

        Raises:
            FilesystemError: If a directory cannot be created.
        """
        ...

    def chmod(
        self, files: PathsArg, mode: int, umask: int = 0, recursive: bool = False
    ) -> None:
        """Change the mode of files.

        Args:
            files: Path or paths to change.
            mode: New permission mode.
            umask: Bits cleared from ``mode`` before applying.
            recursive: Also change every descendant of directories.
        """
        ...

    def copy(self, origin_file: PathArg, target_file: PathArg, override: bool = False) -> None:
        """Copy a file.

        Args:
            origin_file: File to copy.
            target_file: Destination path.
            override: Copy even when the target is newer than the origin.
        """
        ...

    def touch(
        self, files: PathsArg, time: float | None = None, atime: float | None = None
    ) -> None:
        """Create files or update their access and modification times.

        Args:
            files: Path or paths to touch.
            time: Modification time, defaults to now.
            atime: Access time, defaults to ``time``.
        """
        ...

    def remove(self, files: PathsArg) -> None:
        """Remove files, symlinks or directory trees.

        Args:
            files: Path or paths to remove.
        """
        ...

    def chown(self, files: PathsArg, user: str | int, recursive: bool = False) -> None:
        """Change the owner of files.

        Args:
            files: Path or paths to change.
            user: User name or id.
            recursive: Also change every descendant of directories.
        """
        ...

    def chgrp(self, files: PathsArg, group: str | int, recursive: bool = False) -> None:
        """Change the group of files.

        Args:
            files: Path or paths to change.
            group: Group name or id.
            recursive: Also change every descendant of directories.
        """
        ...

    def rename(self, origin: PathArg, target: PathArg, overwrite: bool = False) -> None:
        """Rename a file or directory.

        Args:
            origin: Existing path.
            target: New path.
            overwrite: Replace an existing target.
        """
        ...

    def symlink(
        self, origin_dir: PathArg, target_dir: PathArg, copy_on_windows: bool = False
    ) -> None:
        """Create a symbolic link.

        Args:
            origin_dir: Path the link points to.
            target_dir: Path of the link itself.
            copy_on_windows: Mirror instead of linking on Windows.
        """
        ...

    def mirror(
        self,
        origin_dir: PathArg,
        target_dir: PathArg,
        iterator: Iterable[FileInfo] | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Mirror a directory into another.

        Args:
            origin_dir: Directory to mirror.
            target_dir: Directory receiving the copy.
            iterator: Entries of the origin to mirror, defaults to all.
            options: ``override`` and ``delete`` flags.
        """
        ...

    def exists(self, files: PathsArg) -> bool:
        """Check whether every given path exists.

        Args:
            files: Path or paths to check.

        Returns:
            True if all paths exist, False otherwise.
        """
        ...


@runtime_checkable
class FileFinder(Protocol):
    """Protocol for glob-matched file listings.

    Implementations are lazy and restartable: every iteration walks again.
    """

    def in_(self, *dirs: PathArg) -> FileFinder:
        """Search only the top level of the given directories."""
        ...

    def from_(self, *dirs: PathArg) -> FileFinder:
        """Search the whole subtree of the given directories."""
        ...

    def child_first(self) -> FileFinder:
        """Yield children before their parent directory."""
        ...

    def __iter__(self) -> Iterator[FileInfo]:
        """Iterate the matching entries."""
        ...


@runtime_checkable
class UploadedFile(Protocol):
    """Protocol for a client upload waiting to be stored."""

    def is_ok(self) -> bool:
        """Check if the upload is complete and valid.

        Returns:
            True if the upload can be moved, False otherwise.
        """
        ...

    def get_sanitized_name(self) -> str:
        """Get a filesystem safe version of the client file name.

        Returns:
            Sanitized file name.
        """
        ...

    def move(self, dest: PathArg) -> Any:
        """Move the uploaded data to its destination.

        Args:
            dest: Destination path.

        Raises:
            OSError: If the move fails.
        """
        ...
