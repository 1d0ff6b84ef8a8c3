"""Deletion of selected artifacts with safety checks."""

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional, Sequence

from reposweep.models import ArtifactRecord, DeletionResult

log = logging.getLogger(__name__)


def is_path_safe(path: Path, root: Path) -> bool:
    """
    Check if a path is safe to delete.

    The path must lie strictly inside the scan root and must not be the
    home directory.

    Args:
        path: Path to check
        root: Scan root the path was found under

    Returns:
        True if safe to delete, False otherwise
    """
    resolved = path.resolve()
    root = root.resolve()

    if resolved == root or root not in resolved.parents:
        return False

    if resolved == Path.home().resolve():
        return False

    return True


def delete_path(path: Path, dry_run: bool = False) -> Optional[str]:
    """
    Delete a directory tree.

    Args:
        path: Directory to delete
        dry_run: If True, don't actually delete

    Returns:
        Error message, or None on success
    """
    if not path.exists() and not path.is_symlink():
        return None

    if dry_run:
        return None

    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        else:
            shutil.rmtree(path)
    except PermissionError as e:
        return f"Permission denied: {e}"
    except OSError as e:
        return f"OS error: {e}"

    return None


def delete_artifacts(
    items: Sequence[ArtifactRecord],
    root: Path,
    dry_run: bool = False,
    progress_callback: Optional[Callable[[DeletionResult], None]] = None,
) -> list[DeletionResult]:
    """
    Delete artifacts one by one, continuing past failures.

    Args:
        items: Artifacts to delete
        root: Scan root the artifacts were found under
        dry_run: If True, report what would be freed without deleting
        progress_callback: Optional callback receiving each result as it completes

    Returns:
        One DeletionResult per item, in input order
    """
    results: list[DeletionResult] = []

    for item in items:
        path = Path(item.path)

        if not is_path_safe(path, Path(root)):
            error = f"Blocked path: {path}"
        else:
            error = delete_path(path, dry_run)

        if error:
            log.warning("Could not delete %s: %s", path, error)
            result = DeletionResult(
                path=item.path,
                relative_path=item.relative_path,
                success=False,
                error=error,
                dry_run=dry_run,
            )
        else:
            log.info("%s %s (%d bytes)", "Would delete" if dry_run else "Deleted", path, item.size_bytes)
            result = DeletionResult(
                path=item.path,
                relative_path=item.relative_path,
                bytes_freed=item.size_bytes,
                files_deleted=item.file_count,
                dry_run=dry_run,
            )

        results.append(result)
        if progress_callback:
            progress_callback(result)

    return results
