"""Pydantic models describing a recipe to scaffold and the scaffold outcome."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cookbook.utils import slug_to_title


class RecipeType(str, Enum):
    """Which template root is used and which bootstrap step applies."""

    POLKADOT_SDK = "polkadot-sdk"
    SOLIDITY = "solidity"
    XCM = "xcm"
    TRANSACTIONS = "transactions"
    NETWORKS = "networks"

    @property
    def template_name(self) -> str:
        """Directory name of this type's tree inside the template library."""
        return f"{self.value}-template"

    @property
    def pathway(self) -> "Pathway":
        return _PATHWAY_BY_TYPE[self]

    @property
    def manifest(self) -> str:
        """The language-appropriate project manifest file name."""
        return "Cargo.toml" if self is RecipeType.POLKADOT_SDK else "package.json"


class Pathway(str, Enum):
    """User-facing category, carried into generated metadata only."""

    PALLETS = "pallets"
    CONTRACTS = "contracts"
    TRANSACTIONS = "transactions"
    XCM = "xcm"
    NETWORKS = "networks"


class ContentType(str, Enum):
    TUTORIAL = "tutorial"
    GUIDE = "guide"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


_PATHWAY_BY_TYPE: dict[RecipeType, Pathway] = {
    RecipeType.POLKADOT_SDK: Pathway.PALLETS,
    RecipeType.SOLIDITY: Pathway.CONTRACTS,
    RecipeType.XCM: Pathway.XCM,
    RecipeType.TRANSACTIONS: Pathway.TRANSACTIONS,
    RecipeType.NETWORKS: Pathway.NETWORKS,
}


class ProjectConfig(BaseModel):
    """Immutable description of the recipe to scaffold.

    ``title`` is derived from ``slug`` when it is not supplied.  The slug
    format itself is checked by the scaffold engine (so that a bad slug is
    reported as a cookbook ``ValidationError`` before any I/O).
    """

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., description="Lowercase, dash-separated identifier")
    title: str = Field(default="", description="Human-readable name")
    destination: Path = Field(default=Path("."), description="Parent directory of the recipe")
    recipe_type: RecipeType = Field(default=RecipeType.POLKADOT_SDK)
    pathway: Pathway | None = Field(default=None)
    content_type: ContentType | None = Field(default=None)
    difficulty: Difficulty | None = Field(default=None)
    pallet_only: bool = Field(
        default=False, description="Minimal pallet-only output (polkadot-sdk only)"
    )
    git_init: bool = Field(default=True)
    skip_install: bool = Field(default=False)
    category: str = Field(default="polkadot-sdk-cookbook")
    description: str = Field(default="Replace with a short description.")

    @model_validator(mode="before")
    @classmethod
    def _derive_title(cls, data: object) -> object:
        if isinstance(data, dict) and not str(data.get("title") or "").strip():
            slug = data.get("slug")
            if isinstance(slug, str):
                data = {**data, "title": slug_to_title(slug)}
        return data

    @property
    def project_path(self) -> Path:
        """``destination / slug``; must not exist before scaffolding."""
        return self.destination / self.slug

    @property
    def pallet_only_mode(self) -> bool:
        """Pallet-only only takes effect for polkadot-sdk recipes."""
        return self.pallet_only and self.recipe_type is RecipeType.POLKADOT_SDK


class ProjectInfo(BaseModel):
    """Outcome of a successful ``create_project`` call."""

    slug: str
    title: str
    project_path: Path
    git_initialized: bool = False
    branch: str | None = None
    dry_run: bool = False
    files: list[Path] = Field(
        default_factory=list, description="Files written (or planned, in dry-run)"
    )
    warnings: list[str] = Field(default_factory=list)
