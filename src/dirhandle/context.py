"""Application context for dependency injection.

This module separates object creation from object use, enabling testability
and reducing coupling in CLI commands.

Dependencies are typed using Protocols (abstract interfaces) rather than
concrete implementations, so test doubles can be injected without
inheritance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from dirhandle.config import Settings, load_settings
from dirhandle.directory import Directory
from dirhandle.protocols import FileOperations


def _default_filesystem() -> FileOperations:
    """Create the default filesystem implementation."""
    from dirhandle.filesystem import RealFileSystem
    return RealFileSystem()


@dataclass
class AppContext:
    """Container for application dependencies.

    Provides a single injection point for the services used by CLI commands.
    """

    settings: Settings = field(default_factory=Settings)
    filesystem: FileOperations = field(default_factory=_default_filesystem)

    def open_directory(
        self, path: Path | str, mode: int | None = None, existing: bool = False
    ) -> Directory:
        """Open a directory handle wired with this context's services.

        Args:
            path: Directory path.
            mode: Permission mode, defaults to the configured one.
            existing: Bind to an existing directory and leave its modes
                untouched; ``mode`` is ignored.

        Returns:
            Ready Directory handle.
        """
        if existing:
            return Directory.existing(path, self.filesystem, self.settings)
        return Directory(path, mode, self.filesystem, self.settings)


def create_context(config_file: Path | None = None) -> AppContext:
    """Factory for application dependencies.

    Creates all services with proper wiring. Use this in production code.
    For tests, construct AppContext directly with test doubles.

    Args:
        config_file: Override configuration file.

    Returns:
        Configured AppContext with all dependencies.
    """
    return AppContext(settings=load_settings(config_file), filesystem=_default_filesystem())
