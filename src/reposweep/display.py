"""Rich terminal display for reposweep."""

from datetime import datetime
from typing import Mapping, Optional

from rich.console import Console
from rich.markup import escape
from rich.status import Status
from rich.table import Table

from reposweep.models import DeletionResult

console = Console()


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (binary units)."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024**2:
        return f"{size_bytes / 1024:.0f} KB"
    elif size_bytes < 1024**3:
        return f"{size_bytes / 1024**2:.1f} MB"
    else:
        return f"{size_bytes / 1024**3:.1f} GB"


def format_count(count: int) -> str:
    """Format a count with thousands separators."""
    return f"{count:,}"


def format_age(when: datetime, now: Optional[datetime] = None) -> str:
    """Format how long ago a timestamp was, e.g. 'today', '12d ago', '3mo ago'."""
    days = int(((now or datetime.now()) - when).total_seconds() // 86400)
    if days < 1:
        return "today"
    if days < 60:
        return f"{days}d ago"
    return f"{days // 30}mo ago"


def show_scanning_status() -> Status:
    """Create spinner shown while scanning."""
    return console.status("[dim]Scanning...[/dim]", spinner="dots")


def show_categories(categories: Mapping[str, frozenset[str]]) -> None:
    """Display every category with its directory names."""
    table = Table(title="Available Categories", show_header=True, header_style="bold")
    table.add_column("Category", style="cyan bold")
    table.add_column("Directories", style="dim")

    for name, patterns in categories.items():
        table.add_row(name, ", ".join(sorted(patterns)))

    console.print(table)


def show_all_clean(root: str) -> None:
    console.print(
        f"\n  [green bold]All clean![/green bold] No deletable artifacts found in {escape(root)}\n"
    )


def show_nothing_to_delete() -> None:
    console.print("\n  [dim]Nothing to delete. Exiting.[/dim]\n")


def show_deletion_start(count: int, dry_run: bool = False) -> None:
    if dry_run:
        console.print("\n  [yellow]DRY RUN - No files will be deleted[/yellow]")
    console.print(f"\n  [bold]Deleting {count} directories...[/bold]\n")


def show_deletion_result(result: DeletionResult) -> None:
    """Display result of a single deletion."""
    if result.success:
        console.print(
            f"  [green]✓[/green] {escape(result.relative_path)}/  [dim]{format_size(result.bytes_freed)}[/dim]"
        )
    else:
        console.print(f"  [red]✗[/red] {escape(result.relative_path)}/  [red]{escape(result.error or '')}[/red]")


def show_deletion_summary(results: list[DeletionResult]) -> None:
    """Display totals after all deletions ran."""
    freed = sum(r.bytes_freed for r in results if r.success)
    files = sum(r.files_deleted for r in results if r.success)
    removed = sum(1 for r in results if r.success)
    errors = len(results) - removed

    totals = (
        f"Removed [bold]{removed}[/bold] directories, "
        f"freed [yellow bold]{format_size(freed)}[/yellow bold] "
        f"([bold]{format_count(files)}[/bold] files)"
    )

    console.print()
    if errors == 0:
        console.print(f"  [green bold]Done![/green bold] {totals}")
    else:
        console.print(f"  [yellow bold]Done with {errors} error(s).[/yellow bold] {totals}")
    console.print()
