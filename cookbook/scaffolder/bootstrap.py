"""Post-scaffold dependency bootstrap.

TypeScript-based recipes (xcm, transactions, networks) get a full npm test
environment: package.json, dev and runtime dependencies, npm scripts, and
vitest/tsconfig files.  Solidity and full polkadot-sdk recipes ship their own
package.json and only need ``npm install``.  Pallet-only recipes are
Rust-only and get nothing.
"""

from __future__ import annotations

import asyncio
import textwrap
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path

from cookbook.errors import CommandError, FileSystemError
from cookbook.scaffolder.models import ProjectConfig, RecipeType
from cookbook.utils import run_command

ProgressCallback = Callable[[str], None]

DEV_DEPENDENCIES = ["vitest", "typescript", "ts-node", "@types/node"]
RUNTIME_DEPENDENCIES = ["@polkadot/api", "ws"]

VITEST_CONFIG = textwrap.dedent("""\
    import { defineConfig } from 'vitest/config';

    export default defineConfig({
      test: {
        include: ['tests/**/*.test.ts'],
        testTimeout: 30000,
        hookTimeout: 30000,
      },
    });
    """)

TSCONFIG = textwrap.dedent("""\
    {
      "compilerOptions": {
        "target": "ES2020",
        "module": "ESNext",
        "moduleResolution": "Bundler",
        "types": ["node", "vitest/globals"],
        "esModuleInterop": true,
        "resolveJsonModule": true,
        "skipLibCheck": true
      },
      "include": ["tests/**/*.ts"]
    }
    """)


class BootstrapKind(str, Enum):
    NONE = "none"
    NPM_INSTALL = "npm-install"
    FULL = "full"


def bootstrap_kind(config: ProjectConfig) -> BootstrapKind:
    """Which bootstrap step applies to *config*."""
    if config.skip_install:
        return BootstrapKind.NONE
    if config.recipe_type in (RecipeType.XCM, RecipeType.TRANSACTIONS, RecipeType.NETWORKS):
        return BootstrapKind.FULL
    if config.recipe_type is RecipeType.SOLIDITY:
        return BootstrapKind.NPM_INSTALL
    if config.pallet_only_mode:
        return BootstrapKind.NONE
    return BootstrapKind.NPM_INSTALL


class Bootstrap:
    """Sets up the npm test environment of a freshly scaffolded recipe."""

    def __init__(self, project_path: str | Path, timeout: int = 600) -> None:
        self.project_path = Path(project_path)
        self.timeout = timeout

    async def setup(self, slug: str, progress: ProgressCallback | None = None) -> None:
        """Complete setup of the test environment.

        Raises:
            CommandError: If any npm command fails.
            FileSystemError: If a configuration file cannot be written.
        """
        steps: list[tuple[str, Callable[[], Awaitable[None]]]] = [
            ("Initializing package.json", lambda: self.create_package_json(slug)),
            ("Installing development dependencies", self.install_dev_dependencies),
            ("Installing runtime dependencies", self.install_dependencies),
            ("Configuring npm scripts", self.set_npm_scripts),
            ("Creating configuration files", self.create_config_files),
        ]
        for label, step in steps:
            if progress is not None:
                progress(label)
            await step()

    async def create_package_json(self, slug: str) -> None:
        """Create package.json unless the template already provided one."""
        if (self.project_path / "package.json").exists():
            return
        await self._npm("init", "-y")
        await self._npm("pkg", "set", f"name={slug}")
        await self._npm("pkg", "set", "type=module")

    async def install_dev_dependencies(self) -> None:
        await self._npm("install", "-D", *DEV_DEPENDENCIES)

    async def install_dependencies(self) -> None:
        await self._npm("install", *RUNTIME_DEPENDENCIES)

    async def set_npm_scripts(self) -> None:
        await self._npm("pkg", "set", "scripts.test=vitest run", "scripts.test:watch=vitest")

    async def create_config_files(self) -> None:
        """Write vitest.config.ts and tsconfig.json where the template has none."""
        for name, content in (("vitest.config.ts", VITEST_CONFIG), ("tsconfig.json", TSCONFIG)):
            path = self.project_path / name
            if path.exists():
                continue
            try:
                await asyncio.to_thread(path.write_text, content, encoding="utf-8")
            except OSError as exc:
                raise FileSystemError(f"Failed to write {name}: {exc}", path) from exc

    async def npm_install(self) -> None:
        """Plain ``npm install`` with output streamed to the terminal."""
        await self._npm("install", capture=False)

    async def _npm(self, *args: str, capture: bool = True) -> None:
        cmd = ["npm", *args]
        try:
            code, _stdout, stderr = await run_command(
                cmd, cwd=self.project_path, timeout=self.timeout, capture=capture
            )
        except OSError as exc:
            raise CommandError(" ".join(cmd), str(exc)) from exc
        if code != 0:
            raise CommandError(" ".join(cmd), stderr or f"exited with status {code}")
