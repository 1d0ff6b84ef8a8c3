"""CLI interface for reposweep."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from reposweep import __version__
from reposweep.categories import FilterError, build_filter, get_categories
from reposweep.cleaner import delete_artifacts
from reposweep.config import is_protected, load_settings
from reposweep.display import (
    console,
    show_all_clean,
    show_categories,
    show_deletion_result,
    show_deletion_start,
    show_deletion_summary,
    show_nothing_to_delete,
    show_scanning_status,
)
from reposweep.scanner import filter_stale, parse_duration, scan
from reposweep.selector import select_items

log = logging.getLogger(__name__)

app = typer.Typer(
    name="reposweep",
    help="Clean build artifacts from project directories",
    add_completion=False,
)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _split(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"reposweep version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    directory: Path = typer.Argument(
        Path("."), help="Directory to scan (defaults to the current directory)"
    ),
    only: Optional[str] = typer.Option(
        None, "--only", help="Only scan these categories (comma-separated)"
    ),
    exclude: Optional[str] = typer.Option(
        None, "--exclude", help="Skip these categories (comma-separated)"
    ),
    stale: Optional[str] = typer.Option(
        None,
        "--stale",
        help="Only show artifacts from inactive projects (e.g. 30d, 2w, 3m)",
    ),
    list_categories: bool = typer.Option(
        False, "--list-categories", help="List all available categories"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
    verbose: int = typer.Option(
        0, "--verbose", count=True, help="Increase log output (--verbose info, --verbose --verbose debug)"
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find build artifacts under DIRECTORY and delete the ones you pick."""
    _setup_logging(verbose)

    if list_categories:
        show_categories(get_categories())
        raise typer.Exit()

    settings = load_settings()

    only_names = _split(only)
    exclude_names = _split(exclude)
    if only is None and exclude is None and settings.exclude_categories:
        exclude_names = settings.exclude_categories

    try:
        scan_filter = build_filter(only_names, exclude_names)
    except FilterError as e:
        _fail(str(e))

    max_age = None
    if stale is not None:
        max_age = parse_duration(stale)
        if max_age is None:
            _fail(
                f'Invalid duration "{stale}". '
                "Use a number followed by d (days), w (weeks), or m (months)"
            )

    root = directory.expanduser().resolve()
    if not root.is_dir():
        _fail(f'"{root}" is not a valid directory')

    with show_scanning_status() as status:

        def update_progress(message: str) -> None:
            status.update(f"[dim]{escape(message)}[/dim]")

        results = scan(root, update_progress, scan_filter)

    if max_age is not None:
        results = filter_stale(results, max_age)
    results = tuple(r for r in results if not is_protected(r.path, settings))

    if not results:
        show_all_clean(str(root))
        raise typer.Exit()

    to_delete = select_items(results, str(root))
    if not to_delete:
        show_nothing_to_delete()
        raise typer.Exit()

    console.clear()
    show_deletion_start(len(to_delete), dry_run=dry_run)
    deletion_results = delete_artifacts(
        to_delete, root, dry_run=dry_run, progress_callback=show_deletion_result
    )
    show_deletion_summary(deletion_results)


if __name__ == "__main__":
    app()
