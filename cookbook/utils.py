"""Shared utility functions for the cookbook scaffolder.

Provides async command execution, slug/title helpers and Rich-based console
reporting.  The slug rules live here because both the scaffolder and the
CLI need them before any filesystem work begins.
"""

from __future__ import annotations

import asyncio
import os
import re
from pathlib import Path

from rich.console import Console
from rich.table import Table

from cookbook.errors import ValidationError

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float = 600,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external tool (npm, git) and collect its result.

    Args:
        cmd: Program followed by its arguments.
        cwd: Directory the tool runs in, usually the new recipe.
        timeout: Seconds to wait before killing the tool.
        capture: Capture the output streams; ``False`` lets ``npm install``
            print its progress straight to the terminal.
        env: Variables added to the inherited environment.

    Returns:
        ``(returncode, stdout, stderr)``; on timeout ``(-1, "", <message>)``.
        Both strings are empty when *capture* is ``False``.

    Raises:
        FileNotFoundError: If the tool is not installed.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=stdout_pipe,
        stderr=stderr_pipe,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# Slug / title helpers
# ---------------------------------------------------------------------------

_SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def validate_slug(slug: str) -> None:
    """Raise ``ValidationError`` unless *slug* is lowercase words joined by single dashes.

    Examples::

        validate_slug("zero-to-hero")   # ok
        validate_slug("Invalid-Slug")   # raises
        validate_slug("double--dash")   # raises
    """
    if not _SLUG_RE.fullmatch(slug):
        raise ValidationError(
            f"Invalid slug format: '{slug}'. "
            "Slug must be lowercase, with words separated by dashes."
        )


def is_valid_slug(slug: str) -> bool:
    """Boolean form of :func:`validate_slug`."""
    return bool(_SLUG_RE.fullmatch(slug))


def slug_to_title(slug: str) -> str:
    """Convert a slug to a title: ``"my-recipe"`` -> ``"My Recipe"``."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-"))


def title_to_slug(title: str) -> str:
    """Convert a title to a slug.

    Lowercases, maps spaces and underscores to dashes, drops every other
    non-alphanumeric character and collapses repeated dashes.

    Examples::

        title_to_slug("NFT Pallet Tutorial") -> "nft-pallet-tutorial"
        title_to_slug("Zero to Hero!")       -> "zero-to-hero"
    """
    result = re.sub(r"[ _]", "-", title.lower())
    result = re.sub(r"[^a-z0-9-]", "", result)
    return "-".join(part for part in result.split("-") if part)


_UNSAFE_TEXT_RE = re.compile(r'["\x00-\x1f\x7f]')


def validate_title(title: str) -> None:
    """Reject titles shorter than three characters or unsafe for quoted front matter."""
    if len(title.strip()) < 3:
        raise ValidationError(
            "Recipe title is too short. Use a descriptive name (minimum 3 characters)."
        )
    if _UNSAFE_TEXT_RE.search(title):
        raise ValidationError(
            "Recipe title must not contain double quotes or control characters."
        )


def validate_description(description: str) -> None:
    """Descriptions land in the same quoted front matter as titles."""
    if _UNSAFE_TEXT_RE.search(description):
        raise ValidationError(
            "Recipe description must not contain double quotes or control characters."
        )


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
