"""Loading of ``versions.yml`` configuration layers.

Malformed input is rejected here, as ``ConfigError``, so that the resolver
itself never fails.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import ValidationError as PydanticValidationError

from cookbook.errors import ConfigError, FileSystemError
from cookbook.versions.models import GlobalVersionConfig, RecipeVersionConfig, VersionLayer

VERSIONS_FILENAME = "versions.yml"

_Layer = TypeVar("_Layer", bound=VersionLayer)


def parse_versions(text: str, model: type[_Layer], label: str = "versions") -> _Layer:
    """Parse YAML *text* into *model*.

    Raises:
        ConfigError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {label} YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{label} must be a mapping with a 'versions' key")
    if "versions" not in data:
        raise ConfigError(f"{label} is missing the 'versions' mapping")

    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid {label}: {exc}") from exc


def _read(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileSystemError(f"Failed to read {label} file: {exc}", path) from exc


def load_global(path: str | Path) -> GlobalVersionConfig:
    """Load the repository-wide version file.

    Raises:
        FileSystemError: If the file does not exist or cannot be read.
        ConfigError: If the file is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileSystemError(f"Global versions file not found: {path}", path)
    return parse_versions(_read(path, "global versions"), GlobalVersionConfig, "global versions")


def load_recipe(path: str | Path) -> RecipeVersionConfig | None:
    """Load a recipe override file, or ``None`` when the recipe has none.

    *path* may be the file itself or the recipe directory containing it.
    """
    path = Path(path)
    if path.is_dir():
        path = path / VERSIONS_FILENAME
    if not path.is_file():
        return None
    return parse_versions(_read(path, "recipe versions"), RecipeVersionConfig, "recipe versions")
