"""Artifact discovery for reposweep.

Walks a project tree once, recognizes artifact directories by basename and
measures each one without descending into it any further.
"""

import logging
import os
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Sequence

from reposweep.categories import SKIP_DIRECTORIES, allowed_patterns, lookup
from reposweep.models import ArtifactRecord, ScanFilter

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

# Artifacts smaller than this are not worth reporting
MIN_SIZE_BYTES = 100 * 1024


class DirectoryStats(NamedTuple):
    size_bytes: int
    file_count: int
    last_modified: Optional[float]


def _newest(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def get_directory_stats(path: Path) -> DirectoryStats:
    """
    Calculate size, file count and newest mtime of a directory subtree.

    Files and symlinks are counted (symlinks by the size of the link itself),
    directories are recursed into. A directory that cannot be read
    contributes nothing to the totals.

    Args:
        path: Directory to measure

    Returns:
        DirectoryStats for the subtree
    """
    size = 0
    file_count = 0
    newest: Optional[float] = None

    try:
        newest = os.stat(path, follow_symlinks=False).st_mtime
        with os.scandir(path) as entries:
            for entry in entries:
                if entry.is_symlink() or entry.is_file(follow_symlinks=False):
                    st = entry.stat(follow_symlinks=False)
                    size += st.st_size
                    file_count += 1
                    newest = _newest(newest, st.st_mtime)
                elif entry.is_dir(follow_symlinks=False):
                    sub = get_directory_stats(Path(entry.path))
                    size += sub.size_bytes
                    file_count += sub.file_count
                    newest = _newest(newest, sub.last_modified)
    except OSError as e:
        log.debug("Cannot measure %s: %s", path, e)
        return DirectoryStats(0, 0, None)

    return DirectoryStats(size, file_count, newest)


def _list_directories(path: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(path) as entries:
            return [entry for entry in entries if entry.is_dir(follow_symlinks=False)]
    except OSError as e:
        log.debug("Cannot list %s: %s", path, e)
        return []


def _find_artifacts(
    directory: Path,
    root: Path,
    results: list[ArtifactRecord],
    on_progress: Optional[ProgressCallback],
    depth: int,
    allowed: Optional[frozenset[str]],
) -> None:
    for entry in _list_directories(directory):
        name = entry.name
        if name in SKIP_DIRECTORIES:
            continue

        full_path = Path(entry.path)
        relative = os.path.relpath(full_path, root)
        description = lookup(name)

        if description is not None and (allowed is None or name in allowed):
            if on_progress:
                on_progress(f"Checking {name}/" if depth == 0 else f"Checking {relative}")

            stats = get_directory_stats(full_path)
            results.append(
                ArtifactRecord(
                    path=str(full_path),
                    relative_path=relative,
                    size_bytes=stats.size_bytes,
                    file_count=stats.file_count,
                    description=description,
                    last_modified=(
                        datetime.fromtimestamp(stats.last_modified)
                        if stats.last_modified is not None
                        else None
                    ),
                )
            )
            # Don't look for artifacts inside an artifact
            continue

        if depth == 0 and on_progress:
            on_progress(f"Scanning {name}/")

        _find_artifacts(full_path, root, results, on_progress, depth + 1, allowed)


def scan(
    root: Path,
    on_progress: Optional[ProgressCallback] = None,
    scan_filter: Optional[ScanFilter] = None,
) -> tuple[ArtifactRecord, ...]:
    """
    Find artifact directories under a root directory.

    Args:
        root: Existing directory to scan
        on_progress: Optional callback receiving status messages
        scan_filter: Optional category filter

    Returns:
        Artifacts of at least MIN_SIZE_BYTES, largest first
    """
    root = Path(root)
    results: list[ArtifactRecord] = []
    _find_artifacts(root, root, results, on_progress, 0, allowed_patterns(scan_filter))

    results.sort(key=lambda r: r.size_bytes, reverse=True)
    kept = tuple(r for r in results if r.size_bytes >= MIN_SIZE_BYTES)
    log.info("Found %d artifacts under %s (%d below threshold)", len(kept), root, len(results) - len(kept))
    return kept


# =============================================================================
# Stale filtering
# =============================================================================

_DURATION_RE = re.compile(r"^(\d+)(d|w|m)$")
_DURATION_DAYS = {"d": 1, "w": 7, "m": 30}


def parse_duration(value: str) -> Optional[timedelta]:
    """Parse a duration like '30d', '2w' or '3m' (30-day months)."""
    match = _DURATION_RE.match(value.strip())
    if not match:
        return None
    return timedelta(days=int(match.group(1)) * _DURATION_DAYS[match.group(2)])


def filter_stale(
    records: Sequence[ArtifactRecord],
    max_age: timedelta,
    now: Optional[datetime] = None,
) -> tuple[ArtifactRecord, ...]:
    """
    Keep artifacts whose subtree has not changed within max_age.

    Records with an unknown modification time are kept.
    """
    cutoff = (now or datetime.now()) - max_age
    return tuple(r for r in records if r.last_modified is None or r.last_modified <= cutoff)
