"""Artifact patterns and category definitions for reposweep."""

from types import MappingProxyType
from typing import Mapping, Optional

from reposweep.models import ScanFilter


class FilterError(ValueError):
    """Raised when a category filter cannot be built."""


# Directory basename -> description of the artifact it holds
PATTERNS: Mapping[str, str] = MappingProxyType(
    {
        # =========================================================================
        # JavaScript / frontend
        # =========================================================================
        "node_modules": "Node.js dependencies",
        "bower_components": "Bower dependencies",
        ".pnpm-store": "pnpm global store",
        ".next": "Next.js build cache",
        ".nuxt": "Nuxt.js build cache",
        ".output": "Nuxt/Nitro output",
        ".svelte-kit": "SvelteKit build cache",
        ".angular": "Angular build cache",
        ".astro": "Astro build cache",
        ".docusaurus": "Docusaurus build cache",
        ".expo": "Expo cache",
        # =========================================================================
        # Tool caches
        # =========================================================================
        ".cache": "Build cache",
        ".parcel-cache": "Parcel bundler cache",
        ".turbo": "Turborepo cache",
        ".webpack": "Webpack cache",
        ".sass-cache": "Sass compiler cache",
        ".dart_tool": "Dart build cache",
        ".gradle": "Gradle build cache",
        ".terraform": "Terraform cache",
        ".playwright": "Playwright browsers",
        # =========================================================================
        # Python
        # =========================================================================
        ".venv": "Python virtual environment",
        "venv": "Python virtual environment",
        "__pycache__": "Python bytecode cache",
        ".pytest_cache": "Pytest cache",
        ".mypy_cache": "Mypy type checker cache",
        ".tox": "Tox testing cache",
        ".eggs": "Python egg cache",
        # =========================================================================
        # Native toolchains
        # =========================================================================
        "target": "Rust/Cargo build output",
        "Pods": "CocoaPods dependencies",
        "DerivedData": "Xcode build data",
        # =========================================================================
        # Generic build output
        # =========================================================================
        "build": "Build output",
        "dist": "Build output",
        "out": "Build output",
        "release": "Release builds",
        "coverage": "Test coverage reports",
        # =========================================================================
        # Deployment
        # =========================================================================
        ".vercel": "Vercel deployment cache",
        ".serverless": "Serverless Framework cache",
    }
)

CATEGORIES: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "node": frozenset({"node_modules", "bower_components", ".pnpm-store"}),
        "python": frozenset(
            {".venv", "venv", "__pycache__", ".pytest_cache", ".mypy_cache", ".tox", ".eggs"}
        ),
        "rust": frozenset({"target"}),
        "ios": frozenset({"Pods", "DerivedData"}),
        "frontend": frozenset(
            {".next", ".nuxt", ".output", ".svelte-kit", ".angular", ".astro", ".docusaurus", ".expo"}
        ),
        "cache": frozenset(
            {
                ".cache",
                ".parcel-cache",
                ".turbo",
                ".webpack",
                ".sass-cache",
                ".dart_tool",
                ".gradle",
                ".terraform",
                ".playwright",
            }
        ),
        "build": frozenset({"build", "dist", "out", "release", "coverage"}),
        "deploy": frozenset({".vercel", ".serverless"}),
    }
)

# Never matched, never descended into
SKIP_DIRECTORIES = frozenset({".git"})


def lookup(name: str) -> Optional[str]:
    """Get the artifact description for a directory basename."""
    if name in SKIP_DIRECTORIES:
        return None
    return PATTERNS.get(name)


def get_categories() -> Mapping[str, frozenset[str]]:
    """Get all categories with their basenames."""
    return CATEGORIES


def build_filter(
    only: Optional[list[str]] = None,
    exclude: Optional[list[str]] = None,
) -> Optional[ScanFilter]:
    """
    Build a validated scan filter.

    Args:
        only: Category names to include
        exclude: Category names to skip

    Returns:
        ScanFilter, or None when neither list is given

    Raises:
        FilterError: If both lists are given or a category is unknown
    """
    if only and exclude:
        raise FilterError("--only and --exclude cannot be used together")
    names = only or exclude
    if not names:
        return None

    unknown = [name for name in names if name not in CATEGORIES]
    if unknown:
        valid = ", ".join(CATEGORIES)
        raise FilterError(f'Unknown category "{unknown[0]}". Valid: {valid}')

    if only:
        return ScanFilter(only=list(only))
    return ScanFilter(exclude=list(exclude))


def allowed_patterns(scan_filter: Optional[ScanFilter]) -> Optional[frozenset[str]]:
    """
    Resolve a filter to the set of basenames that may match.

    Returns:
        Allowed basenames, or None when every pattern is allowed
    """
    if scan_filter is None or (scan_filter.only is None and scan_filter.exclude is None):
        return None

    if scan_filter.only is not None:
        allowed: set[str] = set()
        for name in scan_filter.only:
            allowed |= CATEGORIES.get(name, frozenset())
        return frozenset(allowed)

    allowed = set(PATTERNS)
    for name in scan_filter.exclude or []:
        allowed -= CATEGORIES.get(name, frozenset())
    return frozenset(allowed)
