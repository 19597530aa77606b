"""Uploaded file representation.

A ``FileUpload`` is a client-submitted file that has been staged in a
temporary location and waits to be moved into permanent storage.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
import unicodedata
from enum import IntEnum
from pathlib import Path
from typing import BinaryIO

from dirhandle.protocols import PathArg

logger = logging.getLogger(__name__)

__all__ = ["FileUpload", "UploadError", "UploadStatus"]


class UploadStatus(IntEnum):
    """Upload status codes, numbered like the common web server codes."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


class UploadError(Exception):
    """Error while handling an uploaded file."""

    pass


def sanitize_filename(name: str) -> str:
    """Make a client supplied file name safe to store.

    Non-ASCII characters are transliterated, runs of anything other than
    letters, digits and dots become a dash, and leading or trailing dots
    and dashes are dropped.

    Example:
        >>> sanitize_filename("Žluťoučký kůň.JPG")
        'Zlutoucky-kun.JPG'
        >>> sanitize_filename("../../etc/passwd")
        'etc-passwd'
    """
    ascii_name = (
        unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    )
    return re.sub(r"[^a-zA-Z0-9.]+", "-", ascii_name).strip(".-")


class FileUpload:
    """A file uploaded by a client and staged on local disk."""

    def __init__(
        self,
        name: str,
        tmp_name: PathArg | None,
        size: int = 0,
        error: int = UploadStatus.OK,
    ) -> None:
        """Initialize the upload.

        Args:
            name: File name as sent by the client.
            tmp_name: Path of the staged data.
            size: Size in bytes.
            error: Upload status code.
        """
        self.name = name
        self.tmp_name = Path(tmp_name) if tmp_name is not None else None
        self.size = size
        self.error = UploadStatus(error)
        self.moved = False

    @classmethod
    def from_stream(cls, name: str, stream: BinaryIO) -> FileUpload:
        """Stage the content of a binary stream as an upload.

        Args:
            name: File name to report for the upload.
            stream: Readable binary stream.

        Returns:
            FileUpload backed by a new temporary file.
        """
        with tempfile.NamedTemporaryFile(prefix="upload-", delete=False) as tmp:
            shutil.copyfileobj(stream, tmp)
            size = tmp.tell()
        logger.debug("Staged upload %r in %s (%d bytes)", name, tmp.name, size)
        return cls(name, tmp.name, size)

    def get_name(self) -> str:
        """Get the file name as sent by the client (not trustworthy)."""
        return self.name

    def get_sanitized_name(self) -> str:
        """Get a filesystem safe version of the client file name."""
        return sanitize_filename(self.name) or "unknown"

    def get_temporary_file(self) -> Path | None:
        """Get the path of the staged data."""
        return self.tmp_name

    def is_ok(self) -> bool:
        """Check if the upload completed and its data is available."""
        return (
            self.error == UploadStatus.OK
            and self.tmp_name is not None
            and self.tmp_name.is_file()
        )

    def move(self, dest: PathArg) -> FileUpload:
        """Move the staged data to ``dest``.

        Args:
            dest: Destination path; missing parent directories are created.

        Returns:
            The upload, now pointing at its new location.

        Raises:
            UploadError: If the upload is not ok.
            OSError: If the data cannot be moved.
        """
        if not self.is_ok():
            raise UploadError(f"Cannot move upload '{self.name}' with status {self.error.name}.")
        assert self.tmp_name is not None

        destination = Path(dest)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(os.fspath(self.tmp_name), os.fspath(destination))
        os.chmod(destination, 0o666)
        logger.debug("Moved upload %r to %s", self.name, destination)

        self.tmp_name = destination
        self.moved = True
        return self

    def __repr__(self) -> str:
        return f"FileUpload(name={self.name!r}, status={self.error.name})"
