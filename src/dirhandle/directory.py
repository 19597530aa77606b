"""Directory handle.

A ``Directory`` is bound to one directory on disk. Construction makes sure
the directory exists and is writable; afterwards every path handed to the
handle is relative to that directory::

    storage = Directory("/var/www/uploads", 0o775)
    storage.write("notes/today.txt", "hello")
    storage.copy("notes/today.txt", "notes/backup.txt").chmod("notes", 0o755, recursive=True)
    for info in storage.find("*.txt", recursive=True):
        print(info.path)

Filesystem mutations are delegated to a ``FileOperations`` provider
(``RealFileSystem`` unless one is injected) and any provider failure is
re-raised as ``DirectoryIOError``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from typing import Any

from dirhandle.config import Settings
from dirhandle.filesystem import FilesystemError, RealFileSystem
from dirhandle.finder import Finder
from dirhandle.protocols import FileFinder, FileOperations, PathArg, PathsArg, UploadedFile
from dirhandle.types import FileInfo
from dirhandle.upload import UploadError

logger = logging.getLogger(__name__)

FinderFactory = Callable[[list[str]], FileFinder]

__all__ = ["Directory", "DirectoryIOError"]


class DirectoryIOError(IOError):
    """Error raised by a directory handle."""

    pass


class Directory:
    """Handle for a writable directory."""

    def __init__(
        self,
        path: PathArg,
        mode: int | None = None,
        filesystem: FileOperations | None = None,
        settings: Settings | None = None,
        finder: FinderFactory | None = None,
    ) -> None:
        """Bind the handle to ``path`` and make sure the directory is writable.

        Args:
            path: Directory path; trailing separators are stripped.
            mode: Permission mode for the directory. Defaults to
                ``settings.default_mode`` (0o777).
            filesystem: Operations provider. Defaults to RealFileSystem.
            settings: Shared settings. Defaults to Settings().
            finder: Factory building a FileFinder from a list of masks.
                Defaults to Finder.find.

        Raises:
            DirectoryIOError: If the directory cannot be created or made writable.
        """
        self._bind(path, filesystem, settings, finder)
        self.ensure_writable(mode)

    @classmethod
    def existing(
        cls,
        path: PathArg,
        filesystem: FileOperations | None = None,
        settings: Settings | None = None,
        finder: FinderFactory | None = None,
    ) -> Directory:
        """Bind a handle to an existing directory without changing any mode.

        Raises:
            DirectoryIOError: If ``path`` is not a directory.
        """
        directory = cls.__new__(cls)
        directory._bind(path, filesystem, settings, finder)
        if not os.path.isdir(directory._path):
            raise DirectoryIOError(f"Directory '{directory._path}' does not exist")
        return directory

    def _bind(
        self,
        path: PathArg,
        filesystem: FileOperations | None,
        settings: Settings | None,
        finder: FinderFactory | None,
    ) -> None:
        self._path = os.path.abspath(os.fspath(path))
        self.fs = filesystem or RealFileSystem()
        self.settings = settings or Settings()
        self.finder = finder or Finder.find

    @property
    def path(self) -> str:
        """Absolute path of the directory."""
        return self._path

    def ensure_writable(self, mode: int | None = None) -> Directory:
        """Create the directory if needed and apply ``mode`` to it recursively.

        Raises:
            DirectoryIOError: If the provider cannot create or chmod the directory.
        """
        if mode is None:
            mode = self.settings.default_mode
        try:
            self.fs.mkdir(self._path, mode)
            self.fs.chmod(self._path, mode, 0, True)
        except (FilesystemError, OSError) as e:
            raise DirectoryIOError(
                f"Please make directory '{self._path}' writable, it cannot be done automatically"
            ) from e
        return self

    def create_subdir(self, name: str, mode: int | None = None) -> Directory:
        """Get a handle for a subdirectory, creating it when missing.

        The new handle shares this handle's provider, settings and finder.
        """
        return Directory(self._join(name), mode, self.fs, self.settings, self.finder)

    def exists(self, file: PathArg) -> bool:
        """Check if a path relative to the directory exists."""
        return self.fs.exists(self._join(file))

    def read(self, file: PathArg) -> bytes:
        """Read the whole content of a file.

        Raises:
            OSError: If the file cannot be read.
        """
        return Path(self._join(file)).read_bytes()

    def read_text(self, file: PathArg, encoding: str = "utf-8") -> str:
        """Read the whole content of a file as text."""
        return self.read(file).decode(encoding)

    def write(self, file: PathArg, contents: str | bytes) -> None:
        """Write ``contents`` to a file, replacing what was there.

        Missing parent directories are created. Text is encoded as UTF-8.

        Raises:
            DirectoryIOError: If the parent directory or the file cannot be written.
        """
        path = self._join(file)
        try:
            self.fs.mkdir(os.path.dirname(path))
        except (FilesystemError, OSError) as e:
            raise DirectoryIOError(str(e)) from e

        data = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            raise DirectoryIOError(f"Cannot write to file '{path}': {e.strerror or e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), path)

    def write_uploaded(self, upload: UploadedFile, filename: str | None = None) -> str:
        """Store an uploaded file under a random, unused name.

        The name is a random token followed by a dot and either ``filename``
        or the upload's sanitized name.

        Args:
            upload: The uploaded file.
            filename: Name to use instead of the upload's own.

        Returns:
            Base name of the stored file.

        Raises:
            DirectoryIOError: If the upload is corrupted or cannot be moved.
        """
        if not upload.is_ok():
            raise DirectoryIOError("Cannot save corrupted file.")

        suffix = filename or upload.get_sanitized_name()
        while True:
            path = self._join(f"{self.settings.random_name()}.{suffix}")
            if not os.path.lexists(path):
                break

        try:
            upload.move(path)
        except (UploadError, OSError) as e:
            raise DirectoryIOError(f"Cannot move uploaded file to '{path}': {e}") from e
        logger.debug("Stored upload as %s", path)
        return os.path.basename(path)

    def purge(self) -> None:
        """Delete everything inside the directory, keeping the directory itself.

        Stops at the first entry that cannot be deleted.

        Raises:
            DirectoryIOError: Naming the file or directory that could not be deleted.
        """
        for info in self.find("*", recursive=True).child_first():
            if info.is_dir:
                try:
                    os.rmdir(info.path)
                except OSError as e:
                    raise DirectoryIOError(f"Cannot delete directory {info.pathname}") from e
            else:
                try:
                    os.unlink(info.path)
                except OSError as e:
                    raise DirectoryIOError(f"Cannot delete file {info.pathname}") from e
        logger.debug("Purged %s", self._path)

    def find(self, *masks: str | bool | Iterable[str], recursive: bool = False) -> FileFinder:
        """Find entries matching shell-style masks.

        Masks may be passed as separate arguments or as a list. A trailing
        boolean is taken as the ``recursive`` flag, so ``find("*.txt", True)``
        equals ``find("*.txt", recursive=True)``.

        Returns:
            Lazy finder yielding FileInfo records.
        """
        flat: list[Any] = []
        for mask in masks:
            if isinstance(mask, (list, tuple)):
                flat.extend(mask)
            else:
                flat.append(mask)
        if flat and isinstance(flat[-1], bool):
            recursive = flat.pop()

        finder = self.finder(flat)
        return finder.from_(self._path) if recursive else finder.in_(self._path)

    def iter_entries(self, recursive: bool = False) -> FileFinder:
        """List all entries, optionally recursively."""
        return self.find("*", recursive=recursive)

    def __iter__(self) -> Iterator[FileInfo]:
        return iter(self.iter_entries())

    # Provider operations. Target paths are relative to the directory.

    def copy(self, origin_file: PathArg, target_file: PathArg, override: bool = False) -> Directory:
        """Copy a file to ``target_file``.

        A relative ``origin_file`` is taken relative to the directory too.
        """
        return self._delegate(
            "copy", self._resolve(origin_file), self._rebase(target_file), override
        )

    def mkdir(self, dirs: PathsArg, mode: int = 0o777) -> Directory:
        """Create ``dirs`` inside the directory."""
        return self._delegate("mkdir", self._rebase(dirs), mode)

    def touch(
        self, files: PathsArg, time: float | None = None, atime: float | None = None
    ) -> Directory:
        """Create ``files`` or update their timestamps."""
        return self._delegate("touch", self._rebase(files), time, atime)

    def remove(self, files: PathsArg) -> Directory:
        """Remove ``files`` (files, symlinks or directory trees)."""
        return self._delegate("remove", self._rebase(files))

    def chmod(
        self, files: PathsArg, mode: int, umask: int = 0, recursive: bool = False
    ) -> Directory:
        """Change the mode of ``files``."""
        return self._delegate("chmod", self._rebase(files), mode, umask, recursive)

    def chown(self, files: PathsArg, user: str | int, recursive: bool = False) -> Directory:
        """Change the owner of ``files``."""
        return self._delegate("chown", self._rebase(files), user, recursive)

    def chgrp(self, files: PathsArg, group: str | int, recursive: bool = False) -> Directory:
        """Change the group of ``files``."""
        return self._delegate("chgrp", self._rebase(files), group, recursive)

    def rename(self, origin: PathArg, target: PathArg) -> Directory:
        """Rename ``origin`` to ``target``."""
        return self._delegate("rename", self._resolve(origin), self._rebase(target))

    def symlink(
        self, origin_dir: PathArg, target_dir: PathArg, copy_on_windows: bool = False
    ) -> Directory:
        """Create ``target_dir`` as a link pointing to ``origin_dir``."""
        return self._delegate(
            "symlink", self._resolve(origin_dir), self._rebase(target_dir), copy_on_windows
        )

    def mirror(
        self,
        origin_dir: PathArg,
        target_dir: PathArg,
        iterator: Iterable[FileInfo] | None = None,
        options: dict[str, Any] | None = None,
    ) -> Directory:
        """Mirror ``origin_dir`` into ``target_dir``."""
        return self._delegate(
            "mirror", self._resolve(origin_dir), self._rebase(target_dir), iterator, options or {}
        )

    def _delegate(self, operation: str, *args: Any) -> Directory:
        """Call a provider operation, re-raising its failure as DirectoryIOError."""
        logger.debug("%s%r in %s", operation, args, self._path)
        try:
            getattr(self.fs, operation)(*args)
        except (FilesystemError, OSError) as e:
            raise DirectoryIOError(str(e)) from e
        return self

    def _join(self, file: PathArg) -> str:
        return self._path.rstrip(os.sep) + os.sep + os.fspath(file)

    def _rebase(self, files: PathsArg) -> str | list[str]:
        """Prefix one path or every path of a sequence with the directory."""
        if isinstance(files, (str, os.PathLike)):
            return self._join(files)
        return [self._join(f) for f in files]

    def _resolve(self, file: PathArg) -> str:
        """Rebase a relative path; leave an absolute one untouched."""
        if os.path.isabs(file):
            return os.fspath(file)
        return self._join(file)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return self._path

    def __fspath__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"Directory({self._path!r})"
