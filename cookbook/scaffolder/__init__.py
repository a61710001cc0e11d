"""Recipe scaffolder -- creates a new recipe project from a template tree.

Picks the template tree for the recipe type, decides per entry whether it is
copied, renamed or skipped (pallet-only mode, documentation variants, XCM
network config), substitutes placeholders, and writes the result.

Quick usage::

    from cookbook.scaffolder import ProjectConfig, ProjectGenerator, RecipeType

    config = ProjectConfig(
        slug="my-pallet",
        destination=Path("recipes"),
        recipe_type=RecipeType.POLKADOT_SDK,
        pallet_only=True,
    )
    info = await ProjectGenerator(dry_run=True).create_project(config)
"""

from cookbook.scaffolder.generator import ProjectGenerator, validate_project_config
from cookbook.scaffolder.models import (
    ContentType,
    Difficulty,
    Pathway,
    ProjectConfig,
    ProjectInfo,
    RecipeType,
)
from cookbook.scaffolder.templates import TemplateRenderer

__all__ = [
    "ContentType",
    "Difficulty",
    "Pathway",
    "ProjectConfig",
    "ProjectGenerator",
    "ProjectInfo",
    "RecipeType",
    "TemplateRenderer",
    "validate_project_config",
]
