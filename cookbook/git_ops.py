"""Git operations for newly scaffolded recipes.

Initialises a repository inside a fresh recipe and creates its feature
branch.  All commands go through the ``git`` executable.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from cookbook.errors import GitError

BRANCH_PREFIX = "feat/recipe-"


def branch_name(slug: str) -> str:
    """Feature branch name for a recipe: ``feat/recipe-<slug>``."""
    return f"{BRANCH_PREFIX}{slug}"


async def _run_git(
    *args: str,
    cwd: str | Path | None = None,
    timeout: float = 60.0,
) -> tuple[str, str]:
    """Run a git command asynchronously and return (stdout, stderr).

    Raises GitError if git is missing, times out, or exits non-zero.
    """
    cmd = ["git"] + list(args)
    cmd_str = " ".join(cmd)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except OSError as exc:
        raise GitError(f"Could not run {cmd_str}: {exc}") from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise GitError(f"Git command timed out after {timeout}s: {cmd_str}")

    stdout = stdout_bytes.decode("utf-8", errors="replace").strip()
    stderr = stderr_bytes.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise GitError(f"{cmd_str} exited with {process.returncode}: {stderr}")

    return stdout, stderr


async def init_repository(path: str | Path) -> None:
    """``git init`` inside *path*."""
    await _run_git("init", cwd=path)


async def create_branch(path: str | Path, slug: str) -> str:
    """Create and check out the recipe branch in the repository at *path*.

    Returns:
        The branch name.
    """
    name = branch_name(slug)
    await _run_git("checkout", "-b", name, cwd=path)
    return name
