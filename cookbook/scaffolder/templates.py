"""Template library access and Jinja2 rendering of generated helper files.

Two kinds of templates live under ``cookbook/scaffolder/templates/``:

* ``recipe-templates/<type>-template/`` -- the read-only blueprint trees that
  the scaffold engine mirrors (``{{token}}`` placeholders, see
  :mod:`cookbook.scaffolder.placeholders`).
* ``*.j2`` -- Jinja2 templates for files the engine generates itself rather
  than copies, such as the per-recipe ``versions.yml`` override file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cookbook.errors import TemplateNotFoundError
from cookbook.scaffolder.models import RecipeType

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders the Jinja2 ``.j2`` templates bundled with the scaffolder."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["yaml_quote"] = _yaml_quote_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"versions.yml.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Recipe template trees
# ---------------------------------------------------------------------------


def template_root(library: Path, recipe_type: RecipeType) -> Path:
    """Return the template tree for *recipe_type* inside *library*.

    Raises:
        TemplateNotFoundError: If the tree does not exist.
    """
    root = Path(library) / recipe_type.template_name
    if not root.is_dir():
        available = ", ".join(rt.value for rt in available_recipe_types(library)) or "none"
        raise TemplateNotFoundError(
            f"{recipe_type.value} template missing at {root} (available: {available})"
        )
    return root


def available_recipe_types(library: Path) -> list[RecipeType]:
    """Recipe types for which *library* provides a template tree."""
    return [rt for rt in RecipeType if (Path(library) / rt.template_name).is_dir()]


def _yaml_quote_filter(value: str) -> str:
    """Render *value* as a double-quoted YAML scalar."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
