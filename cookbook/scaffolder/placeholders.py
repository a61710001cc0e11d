"""Placeholder substitution for ``.template`` files.

Templates use a small, fixed vocabulary of ``{{token}}`` markers.  Anything
outside that vocabulary is left exactly as written, so template content may
freely contain other brace syntax (GitHub Actions expressions, Handlebars,
Rust format strings).
"""

from __future__ import annotations

import re
import tomllib
from enum import Enum
from pathlib import Path

from cookbook.config import DEFAULT_RUST_VERSION
from cookbook.scaffolder.models import ProjectConfig
from cookbook.utils import console

TOKENS: tuple[str, ...] = (
    "slug",
    "slug_underscore",
    "title",
    "description",
    "category",
    "rust_version",
    "pathway",
    "content_type",
    "difficulty",
)

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")


def metadata_line(key: str, value: Enum | str | None) -> str:
    """Render an optional metadata field as ``key: value`` or as an empty string."""
    if value is None:
        return ""
    text = value.value if isinstance(value, Enum) else value
    return f"{key}: {text}"


def token_values(config: ProjectConfig, rust_version: str) -> dict[str, str]:
    """Return the literal value of every known token for *config*."""
    return {
        "slug": config.slug,
        "slug_underscore": config.slug.replace("-", "_"),
        "title": config.title,
        "description": config.description,
        "category": config.category,
        "rust_version": rust_version,
        "pathway": metadata_line("pathway", config.pathway),
        "content_type": metadata_line("content_type", config.content_type),
        "difficulty": metadata_line("difficulty", config.difficulty),
    }


def substitute(content: str, config: ProjectConfig, rust_version: str) -> str:
    """Replace every known ``{{token}}`` in *content*.

    Pure: no side effects, unknown tokens untouched, and content without
    known tokens is returned unchanged.  Values are inserted in one pass, so
    a value that itself contains a token is not expanded again.
    """
    if "{{" not in content:
        return content
    values = token_values(config, rust_version)
    return _TOKEN_RE.sub(lambda m: values.get(m.group(1), m.group(0)), content)


def read_toolchain_version(path: Path, default: str = DEFAULT_RUST_VERSION) -> str:
    """Read the pinned Rust ``channel`` from a ``rust-toolchain.toml``.

    Falls back to *default* when the file is missing, unparseable, or has no
    ``[toolchain] channel`` entry.
    """
    try:
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        console.print(
            f"[yellow]Could not read {path} ({exc}); using Rust {default}[/yellow]"
        )
        return default

    toolchain = data.get("toolchain")
    channel = toolchain.get("channel") if isinstance(toolchain, dict) else None
    if isinstance(channel, str) and channel.strip():
        return channel.strip()
    console.print(
        f"[yellow]No toolchain channel in {path}; using Rust {default}[/yellow]"
    )
    return default
