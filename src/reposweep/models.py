"""Data models for reposweep."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ArtifactRecord(BaseModel):
    """A discovered artifact directory.

    Size, file count and modification time are measured once at discovery
    and never refreshed.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute path of the artifact directory")
    relative_path: str = Field(..., description="Path relative to the scan root")
    size_bytes: int = Field(..., ge=0, description="Total size of the subtree in bytes")
    file_count: int = Field(0, ge=0, description="Number of files and symlinks in the subtree")
    description: str = Field(..., description="What this kind of artifact is")
    last_modified: Optional[datetime] = Field(
        None, description="Newest modification time seen in the subtree"
    )

    @property
    def name(self) -> str:
        """Basename of the artifact directory."""
        return self.relative_path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


class ScanFilter(BaseModel):
    """Category filter for a scan. At most one of the two is set."""

    only: Optional[list[str]] = Field(None, description="Categories to include")
    exclude: Optional[list[str]] = Field(None, description="Categories to skip")


class DeletionResult(BaseModel):
    """Result of deleting a single artifact."""

    path: str = Field(..., description="Path that was deleted")
    relative_path: str = Field(..., description="Path relative to the scan root")
    bytes_freed: int = Field(0, description="Bytes freed by the deletion")
    files_deleted: int = Field(0, description="Number of files removed")
    success: bool = Field(True, description="Whether the deletion succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    dry_run: bool = Field(False, description="Whether this was a dry run")
