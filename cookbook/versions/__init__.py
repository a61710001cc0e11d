"""Layered dependency-version resolution.

Quick usage::

    from cookbook.versions import resolve_recipe_versions

    resolved = resolve_recipe_versions(".", "my-recipe")
    for name, version in resolved.items():
        print(name, version, resolved.get_source(name).value)
"""

from cookbook.versions.loader import load_global, load_recipe, parse_versions
from cookbook.versions.models import (
    KNOWN_VERSION_KEYS,
    GlobalVersionConfig,
    RecipeVersionConfig,
    ResolvedVersions,
    VersionMetadata,
    VersionSource,
)
from cookbook.versions.resolver import (
    load_global_versions,
    merge,
    resolve_recipe_versions,
    resolve_versions,
)

__all__ = [
    "KNOWN_VERSION_KEYS",
    "GlobalVersionConfig",
    "RecipeVersionConfig",
    "ResolvedVersions",
    "VersionMetadata",
    "VersionSource",
    "load_global",
    "load_global_versions",
    "load_recipe",
    "merge",
    "parse_versions",
    "resolve_recipe_versions",
    "resolve_versions",
]
