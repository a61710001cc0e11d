"""Cookbook scaffolder configuration.

Centralised, typed settings for the tool.  All settings use Pydantic v2
models so they can be validated at construction time and overridden from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_RUST_VERSION = "1.91"

_BUNDLED_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates" / "recipe-templates"


class Config(BaseModel):
    """Global cookbook configuration.

    Instances are typically created once by the CLI entry point and then
    passed to :class:`~cookbook.scaffolder.ProjectGenerator` and the version
    resolver.
    """

    repo_root: Path = Field(default=Path("."))
    recipes_dir: str = Field(default="recipes")
    versions_file: str = Field(default="versions.yml")
    toolchain_file: str = Field(default="rust-toolchain.toml")
    default_rust_version: str = Field(
        default=DEFAULT_RUST_VERSION,
        description="Rust version used when the toolchain pin file is missing",
    )
    template_dir: Path | None = Field(
        default=None, description="Template library root; None means the bundled one"
    )
    command_timeout: int = Field(
        default=600, ge=10, description="Timeout for external commands in seconds"
    )

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def recipes_path(self) -> Path:
        """Directory under which new recipes are created."""
        return self.repo_root / self.recipes_dir

    @property
    def toolchain_path(self) -> Path:
        """Path to the repository's ``rust-toolchain.toml``."""
        return self.repo_root / self.toolchain_file

    @property
    def templates_path(self) -> Path:
        """Root of the template library actually in use."""
        return self.template_dir if self.template_dir is not None else _BUNDLED_TEMPLATE_DIR

    def recipe_path(self, slug: str) -> Path:
        """Path of an existing (or future) recipe directory."""
        return self.recipes_path / slug

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            COOKBOOK_REPO_ROOT, COOKBOOK_RECIPES_DIR, COOKBOOK_TEMPLATE_DIR,
            COOKBOOK_RUST_VERSION, COOKBOOK_COMMAND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("COOKBOOK_REPO_ROOT"):
            kwargs["repo_root"] = Path(os.environ["COOKBOOK_REPO_ROOT"])
        if os.environ.get("COOKBOOK_RECIPES_DIR"):
            kwargs["recipes_dir"] = os.environ["COOKBOOK_RECIPES_DIR"]
        if os.environ.get("COOKBOOK_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["COOKBOOK_TEMPLATE_DIR"])
        if os.environ.get("COOKBOOK_RUST_VERSION"):
            kwargs["default_rust_version"] = os.environ["COOKBOOK_RUST_VERSION"]
        if os.environ.get("COOKBOOK_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["COOKBOOK_COMMAND_TIMEOUT"])
        return cls(**kwargs)
