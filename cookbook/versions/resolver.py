"""Two-layer version resolution with provenance tracking.

The repository-wide ``versions.yml`` provides defaults; a recipe's own
``versions.yml`` overrides them key by key.  :func:`merge` is pure and total;
the ``resolve_*`` helpers add the file loading around it.
"""

from __future__ import annotations

from pathlib import Path

from cookbook.versions.loader import VERSIONS_FILENAME, load_global, load_recipe
from cookbook.versions.models import (
    GlobalVersionConfig,
    RecipeVersionConfig,
    ResolvedVersions,
    VersionSource,
)

DEFAULT_RECIPES_DIR = "recipes"


def merge(
    global_config: GlobalVersionConfig,
    recipe_config: RecipeVersionConfig | None = None,
) -> ResolvedVersions:
    """Merge *recipe_config* over *global_config*.

    Every global key is tagged ``GLOBAL``; every recipe key (overriding or
    new) replaces the value and is tagged ``RECIPE``.  Without a recipe layer
    the result is exactly the global layer.

    Example::

        merge(GlobalVersionConfig(versions={"rust": "1.86", "tool": "0.5.0"}),
              RecipeVersionConfig(versions={"tool": "0.6.0"}))
        # rust -> 1.86 (global), tool -> 0.6.0 (recipe)
    """
    versions: dict[str, str] = {}
    sources: dict[str, VersionSource] = {}

    for name, spec in global_config.versions.items():
        versions[name] = spec
        sources[name] = VersionSource.GLOBAL

    if recipe_config is not None:
        for name, spec in recipe_config.versions.items():
            versions[name] = spec
            sources[name] = VersionSource.RECIPE

    return ResolvedVersions(versions=versions, sources=sources)


def resolve_versions(
    repo_root: str | Path,
    recipe_path: str | Path | None = None,
    versions_file: str = VERSIONS_FILENAME,
) -> ResolvedVersions:
    """Load ``<repo_root>/<versions_file>`` and the optional recipe override, then merge.

    Args:
        repo_root: Repository root holding the global version file.
        recipe_path: Recipe directory (or its ``versions.yml``).  A recipe
            without an override file contributes nothing.
        versions_file: Name of the global version file inside *repo_root*.

    Raises:
        FileSystemError: If the global file is missing or unreadable.
        ConfigError: If either file is malformed.
    """
    global_config = load_global(Path(repo_root) / versions_file)
    recipe_config = load_recipe(recipe_path) if recipe_path is not None else None
    return merge(global_config, recipe_config)


def resolve_recipe_versions(
    repo_root: str | Path,
    slug: str,
    recipes_dir: str = DEFAULT_RECIPES_DIR,
    versions_file: str = VERSIONS_FILENAME,
) -> ResolvedVersions:
    """Resolve versions for ``<repo_root>/<recipes_dir>/<slug>``."""
    return resolve_versions(repo_root, Path(repo_root) / recipes_dir / slug, versions_file)


def load_global_versions(
    repo_root: str | Path, versions_file: str = VERSIONS_FILENAME
) -> ResolvedVersions:
    """Only the global layer, every entry tagged ``GLOBAL``."""
    return resolve_versions(repo_root, None, versions_file)
