"""CLI commands using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:
    from dirhandle.context import AppContext
    from dirhandle.directory import Directory

import typer

from dirhandle import __version__
from dirhandle.console import ConsoleUI
from dirhandle.context import create_context
from dirhandle.directory import DirectoryIOError
from dirhandle.upload import FileUpload

app = typer.Typer(
    name="dirhandle",
    help="Manage files inside a writable directory",
    no_args_is_help=True,
)

ui = ConsoleUI()

RootArg = Annotated[Path, typer.Argument(help="Directory to operate on")]
ConfigOpt = Annotated[
    Path | None, typer.Option("--config", "-c", help="Configuration file")
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        ui.console.print(f"dirhandle v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log filesystem operations")
    ] = False,
) -> None:
    """Manage files inside a writable directory."""
    ui.setup_logging(verbose)


def _load_context(config: Path | None) -> AppContext:
    """Create the command context from the configuration.

    Raises:
        typer.Exit: If the configuration file is missing or invalid.
    """
    try:
        return create_context(config)
    except (ValueError, FileNotFoundError) as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e


def _open(ctx: AppContext, root: Path, existing: bool = False) -> Directory:
    """Open the directory handle for a command.

    Read-only commands pass ``existing`` so modes are left untouched.

    Raises:
        typer.Exit: If the directory is missing or cannot be made writable.
    """
    try:
        return ctx.open_directory(root, existing=existing)
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e



@app.command("find")
def find(
    root: RootArg,
    masks: Annotated[list[str] | None, typer.Argument(help="Glob masks")] = None,
    recursive: Annotated[
        bool, typer.Option("--recursive", "-r", help="Search subdirectories")
    ] = False,
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """List entries matching glob masks."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root, existing=True)
    ui.show_entries(directory.find(masks or ["*"], recursive=recursive), directory.path)


@app.command("read")
def read(
    root: RootArg,
    file: Annotated[str, typer.Argument(help="File relative to the directory")],
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Print the content of a file."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root, existing=True)
    try:
        content = directory.read(file)
    except OSError as e:
        ui.show_error(f"Cannot read '{file}': {e.strerror or e}")
        raise typer.Exit(1) from e
    typer.echo(content, nl=False)


@app.command("write")
def write(
    root: RootArg,
    file: Annotated[str, typer.Argument(help="File relative to the directory")],
    text: Annotated[
        str | None, typer.Option("--text", "-t", help="Content (read from stdin if omitted)")
    ] = None,
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Write a file, replacing its content."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root)
    contents = text if text is not None else typer.get_binary_stream("stdin").read()
    try:
        directory.write(file, contents)
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    ui.show_success(f"Wrote '{file}'")


@app.command("put")
def put(
    root: RootArg,
    source: Annotated[Path, typer.Argument(help="Local file to store")],
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Name used after the random prefix")
    ] = None,
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Store a copy of a file under a random, unused name."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root)
    if not source.is_file():
        ui.show_error(f"File '{source}' not found")
        raise typer.Exit(1)

    with source.open("rb") as stream:
        upload = FileUpload.from_stream(source.name, stream)
    try:
        stored = directory.write_uploaded(upload, name)
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    finally:
        staged = upload.get_temporary_file()
        if not upload.moved and staged is not None:
            staged.unlink(missing_ok=True)
    ui.show_success(f"Stored '{source.name}' as '{stored}'")
    typer.echo(stored)


@app.command("purge")
def purge(
    root: RootArg,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Delete everything inside the directory."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root)
    if not yes and not ui.confirm(f"Delete everything in {directory}?"):
        ui.show_warning("Aborted")
        raise typer.Exit(1)
    try:
        directory.purge()
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    ui.show_success(f"Purged {directory}")


@app.command("copy")
def copy(
    root: RootArg,
    origin: Annotated[str, typer.Argument(help="File to copy")],
    target: Annotated[str, typer.Argument(help="Destination relative to the directory")],
    override: Annotated[
        bool, typer.Option("--override", help="Copy even if the target is newer")
    ] = False,
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Copy a file into the directory."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root)
    try:
        directory.copy(origin, target, override)
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    ui.show_success(f"Copied '{origin}' to '{target}'")


@app.command("remove")
def remove(
    root: RootArg,
    files: Annotated[list[str], typer.Argument(help="Files relative to the directory")],
    config: ConfigOpt = None,
    _context=None,
) -> None:
    """Remove files or directory trees."""
    ctx = _context or _load_context(config)
    directory = _open(ctx, root)
    try:
        directory.remove(files)
    except DirectoryIOError as e:
        ui.show_error(str(e))
        raise typer.Exit(1) from e
    ui.show_success(f"Removed {len(files)} path(s)")


if __name__ == "__main__":
    app()
