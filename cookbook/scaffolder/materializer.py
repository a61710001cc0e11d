"""Directory and file creation, or its dry-run simulation.

The materializer is the only part of the scaffolder that touches the
destination filesystem.  OS failures are wrapped in ``FileSystemError``
carrying the offending path.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from cookbook.errors import FileSystemError
from cookbook.utils import console


class Materializer:
    """Creates directories and writes files under a project root.

    In dry-run mode every operation is only reported.  Either way the
    operation is recorded, so callers can inspect what was (or would have
    been) produced.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self.directories: list[Path] = []
        self.files: list[Path] = []

    async def create_dir(self, path: Path) -> None:
        """Create *path* (and parents).  Existing directories are fine."""
        self.directories.append(path)
        if self.dry_run:
            console.print(f"[dim]Would create directory: {path}[/dim]")
            return
        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f"Failed to create directory: {exc}", path) from exc

    async def write_file(self, path: Path, content: str) -> None:
        """Write *content* to *path* as UTF-8."""
        self.files.append(path)
        if self.dry_run:
            console.print(f"[dim]Would write file: {path}[/dim]")
            return
        try:
            await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        except OSError as exc:
            raise FileSystemError(f"Failed to write file: {exc}", path) from exc

    async def write_bytes(self, path: Path, data: bytes) -> None:
        """Write binary *data* to *path* unchanged."""
        self.files.append(path)
        if self.dry_run:
            console.print(f"[dim]Would write file: {path}[/dim]")
            return
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as exc:
            raise FileSystemError(f"Failed to write file: {exc}", path) from exc

    async def copy_mode(self, source: Path, path: Path) -> None:
        """Carry the executable bits of *source* over to *path*."""
        if self.dry_run:
            return
        try:
            mode = source.stat().st_mode & 0o111
            if mode:
                current = path.stat().st_mode
                await asyncio.to_thread(path.chmod, current | mode)
        except OSError as exc:
            raise FileSystemError(f"Failed to set file mode: {exc}", path) from exc
