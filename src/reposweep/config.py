"""User configuration for reposweep."""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from reposweep.categories import CATEGORIES

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REPOSWEEP_CONFIG"
DEFAULT_CONFIG_FILE = "~/.reposweep/config.json"


class Settings(BaseModel):
    """Settings read from the config file."""

    protected_paths: list[str] = Field(
        default_factory=list, description="Paths whose artifacts are never offered for deletion"
    )
    exclude_categories: list[str] = Field(
        default_factory=list, description="Categories skipped unless --only/--exclude is given"
    )


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def config_path() -> Path:
    return expand_path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or config_path()
    if not path.exists():
        return Settings()

    try:
        with open(path) as f:
            settings = Settings.model_validate(json.load(f))
    except (json.JSONDecodeError, ValidationError, OSError) as e:
        log.warning("Ignoring config file %s: %s", path, e)
        return Settings()

    unknown = [name for name in settings.exclude_categories if name not in CATEGORIES]
    if unknown:
        log.warning("Ignoring unknown categories in %s: %s", path, ", ".join(unknown))
        settings = settings.model_copy(
            update={"exclude_categories": [n for n in settings.exclude_categories if n in CATEGORIES]}
        )
    return settings


def is_protected(path: str, settings: Settings) -> bool:
    """
    Check if a path is protected from deletion.

    Args:
        path: Absolute path to check
        settings: Loaded settings

    Returns:
        True if the path is a protected path or inside one
    """
    expanded = str(expand_path(path))

    for protected in settings.protected_paths:
        protected_expanded = str(expand_path(protected)).rstrip(os.sep)
        if expanded == protected_expanded or expanded.startswith(protected_expanded + os.sep):
            return True

    return False
