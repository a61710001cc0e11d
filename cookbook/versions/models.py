"""Data structures for layered dependency-version configuration."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

SCHEMA_VERSION = "1.0"

# Keys understood by the recipe CI workflow, with the example values written
# (commented out) into newly generated override files.
KNOWN_VERSION_KEYS: dict[str, str] = {
    "rust": "1.86",
    "polkadot_omni_node": "0.5.0",
    "chain_spec_builder": "10.0.0",
    "frame_omni_bencher": "0.13.0",
}


class VersionSource(str, Enum):
    """Which configuration layer a resolved version came from."""

    GLOBAL = "global"
    RECIPE = "recipe"


class VersionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    schema_version: str | None = SCHEMA_VERSION


class VersionLayer(BaseModel):
    """Common shape of both ``versions.yml`` files."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    versions: dict[str, str] = Field(default_factory=dict)
    metadata: VersionMetadata | None = None

    @field_validator("versions", mode="before")
    @classmethod
    def _normalise_versions(cls, value: object) -> object:
        # ``versions:`` followed only by commented-out examples parses as null.
        if value is None:
            return {}
        if isinstance(value, dict):
            normalised: dict[object, object] = {}
            for key, spec in value.items():
                if isinstance(spec, bool) or isinstance(spec, float):
                    raise ValueError(
                        f"version for '{key}' must be a quoted string, got {spec!r}"
                    )
                normalised[str(key)] = str(spec) if isinstance(spec, int) else spec
            return normalised
        return value


class GlobalVersionConfig(VersionLayer):
    """Repository-wide default versions (root ``versions.yml``)."""


class RecipeVersionConfig(VersionLayer):
    """Per-recipe overrides (``recipes/<slug>/versions.yml``)."""


@dataclass(frozen=True)
class ResolvedVersions:
    """Merged version set with the provenance of every entry.

    Both mappings are read-only views; a ``ResolvedVersions`` is built once
    per resolution and never changes afterwards.
    """

    versions: Mapping[str, str] = field(default_factory=dict)
    sources: Mapping[str, VersionSource] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))
        object.__setattr__(self, "sources", MappingProxyType(dict(self.sources)))

    def get(self, name: str) -> str | None:
        return self.versions.get(name)

    def get_source(self, name: str) -> VersionSource | None:
        return self.sources.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.versions

    def __len__(self) -> int:
        return len(self.versions)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.versions))

    def dependencies(self) -> list[str]:
        """Dependency names, sorted."""
        return sorted(self.versions)

    def items(self) -> list[tuple[str, str]]:
        """``(name, version)`` pairs, sorted by name."""
        return [(name, self.versions[name]) for name in self.dependencies()]

    def to_env_lines(self) -> list[str]:
        """CI format: ``NAME=VALUE`` lines with upper-cased names."""
        return [f"{name.upper()}={version}" for name, version in self.items()]

    def unknown_keys(self, known: Iterable[str] = KNOWN_VERSION_KEYS) -> list[str]:
        """Resolved keys not in *known*, sorted."""
        known_set = set(known)
        return [name for name in self.dependencies() if name not in known_set]
