"""Console output for the command line interface."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm
from rich.table import Table

from dirhandle.types import FileInfo


class ConsoleUI:
    """Rich based output for dirhandle commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the UI.

        Args:
            console: Console to print to. Defaults to stdout.
        """
        self.console = console or Console()

    def setup_logging(self, verbose: bool) -> None:
        """Route log records through rich, at DEBUG level when verbose."""
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
            force=True,
        )

    def show_entries(self, entries: Iterable[FileInfo], root: str) -> int:
        """Display found entries as a table.

        Args:
            entries: Entries to display.
            root: Directory the entries are shown relative to.

        Returns:
            Number of entries displayed.
        """
        table = Table(title=f"Entries in {root}")
        table.add_column("Path", style="cyan")
        table.add_column("Type")
        table.add_column("Size", justify="right")

        count = 0
        for entry in entries:
            size = "" if entry.is_dir else str(Path(entry.path).lstat().st_size)
            table.add_row(
                str(entry.relative_to(root)), "dir" if entry.is_dir else "file", size
            )
            count += 1

        if not count:
            self.console.print("[yellow]No matching entries[/yellow]")
            return 0
        self.console.print(table)
        return count

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question, defaulting to no."""
        return Confirm.ask(question, default=False, console=self.console)

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {message}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {message}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {message}")
