"""Shared fixtures for reposweep tests."""

from pathlib import Path

import pytest

from reposweep.models import ArtifactRecord

KB = 1024
MB = 1024 * 1024


def fill(directory: Path, total_bytes: int, files: int = 1) -> Path:
    """Create `files` files under directory adding up to total_bytes."""
    directory.mkdir(parents=True, exist_ok=True)
    per_file, remainder = divmod(total_bytes, files)
    for i in range(files):
        size = per_file + (remainder if i == 0 else 0)
        (directory / f"file{i}.bin").write_bytes(b"x" * size)
    return directory


@pytest.fixture
def make_record():
    def _make(relative_path: str = "project/node_modules", size_bytes: int = MB, **kwargs) -> ArtifactRecord:
        defaults = {
            "path": f"/work/{relative_path}",
            "relative_path": relative_path,
            "size_bytes": size_bytes,
            "file_count": 10,
            "description": "Node.js dependencies",
        }
        defaults.update(kwargs)
        return ArtifactRecord(**defaults)

    return _make
