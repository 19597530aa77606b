"""Object-oriented handle for a writable directory."""

__version__ = "0.1.0"

from dirhandle.directory import Directory, DirectoryIOError
from dirhandle.filesystem import FilesystemError, RealFileSystem
from dirhandle.finder import Finder

# Export protocol interfaces for type hints and dependency injection
from dirhandle.protocols import FileFinder, FileOperations, UploadedFile
from dirhandle.types import FileInfo
from dirhandle.upload import FileUpload

__all__ = [
    "__version__",
    "Directory",
    "DirectoryIOError",
    "FileFinder",
    "FileInfo",
    "FileOperations",
    "FileUpload",
    "FilesystemError",
    "Finder",
    "RealFileSystem",
    "UploadedFile",
]
