"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` and mirrors the matching template tree from the
template library into ``destination/slug``: every entry goes through the
template selector, text files get their placeholders substituted, and the
materializer writes the result (or only reports it, in dry-run mode).
Optional git initialisation and dependency bootstrap run afterwards.

Quick usage::

    from cookbook.scaffolder import ProjectConfig, ProjectGenerator

    config = ProjectConfig(slug="my-recipe", destination=Path("recipes"))
    info = await ProjectGenerator().create_project(config)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from cookbook import git_ops
from cookbook.config import Config
from cookbook.errors import CommandError, FileSystemError, GitError, ProjectExistsError, TemplateNotFoundError
from cookbook.scaffolder.bootstrap import Bootstrap, BootstrapKind, ProgressCallback, bootstrap_kind
from cookbook.scaffolder.materializer import Materializer
from cookbook.scaffolder.models import ProjectConfig, ProjectInfo, RecipeType
from cookbook.scaffolder.placeholders import read_toolchain_version, substitute
from cookbook.scaffolder.selector import (
    DOC_OUTPUT,
    TEMPLATE_SUFFIX,
    Action,
    Decision,
    TemplateEntry,
    plan_directory,
)
from cookbook.scaffolder.templates import TemplateRenderer, template_root
from cookbook.utils import (
    console,
    print_success,
    print_warning,
    validate_description,
    validate_slug,
    validate_title,
)
from cookbook.versions.loader import VERSIONS_FILENAME
from cookbook.versions.models import KNOWN_VERSION_KEYS, SCHEMA_VERSION

# Directories created before the template walk, per recipe type.
SKELETON_DIRS: dict[RecipeType, tuple[str, ...]] = {
    RecipeType.SOLIDITY: ("tests", "scripts", "src"),
}


@dataclass(frozen=True)
class ScaffoldContext:
    """Per-call state threaded through the template walk."""

    config: ProjectConfig
    rust_version: str
    template_root: Path


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


def validate_project_config(config: ProjectConfig) -> list[str]:
    """Check *config* before any filesystem write.

    Returns:
        Non-fatal warnings.

    Raises:
        ValidationError: If the slug, title or description is malformed.
        ProjectExistsError: If ``destination/slug`` already exists.
    """
    validate_slug(config.slug)
    validate_title(config.title)
    validate_description(config.description)

    if config.project_path.exists():
        raise ProjectExistsError(config.project_path)

    warnings: list[str] = []
    if not config.destination.exists():
        warnings.append(
            f"Destination directory '{config.destination}' does not exist and will be created"
        )
    if config.pallet_only and config.recipe_type is not RecipeType.POLKADOT_SDK:
        warnings.append(
            f"pallet_only has no effect for {config.recipe_type.value} recipes and is ignored"
        )
    return warnings


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Scaffold engine.

    Attributes:
        settings: Tool configuration (template library, toolchain pin file).
        dry_run: When ``True`` every decision is made but nothing is written,
            no git repository is created and no bootstrap runs.
        renderer: Jinja2 renderer for generated helper files.
    """

    def __init__(
        self,
        settings: Config | None = None,
        *,
        dry_run: bool = False,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.settings = settings or Config()
        self.dry_run = dry_run
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def create_project(
        self,
        config: ProjectConfig,
        progress: ProgressCallback | None = None,
    ) -> ProjectInfo:
        """Create a complete recipe from *config*.

        Args:
            config: What to scaffold and where.
            progress: Optional callback receiving short status labels.

        Returns:
            ``ProjectInfo`` with the resolved path, title, branch and the files
            written (or planned, in dry-run mode).

        Raises:
            ValidationError: Malformed slug or title (nothing written).
            ProjectExistsError: ``destination/slug`` exists (nothing written).
            TemplateNotFoundError: No template tree, or one without
                documentation (nothing written).
            FileSystemError: A read or write failed; files written so far
                are left in place.
            CommandError: The npm bootstrap of a TypeScript recipe failed.
        """
        console.print(f"[bold cyan]Creating recipe:[/bold cyan] {config.slug}")

        warnings = validate_project_config(config)
        for warning in warnings:
            print_warning(warning)

        root = template_root(self.settings.templates_path, config.recipe_type)
        rust_version = read_toolchain_version(
            self.settings.toolchain_path, self.settings.default_rust_version
        )
        ctx = ScaffoldContext(config=config, rust_version=rust_version, template_root=root)

        root_plan = plan_directory(await self._list_entries(root, ctx), config)
        if not any(d.emits and d.output_name == DOC_OUTPUT for _, d in root_plan):
            raise TemplateNotFoundError(
                f"{root} provides no documentation template for {DOC_OUTPUT}"
            )

        project_path = config.project_path
        materializer = Materializer(dry_run=self.dry_run)

        _notify(progress, "Creating directory structure")
        await materializer.create_dir(project_path)
        for name in SKELETON_DIRS.get(config.recipe_type, ()):
            await materializer.create_dir(project_path / name)

        _notify(progress, "Copying template files")
        await self._copy_tree(root, project_path, ctx, materializer, plan=root_plan)

        versions_path = project_path / VERSIONS_FILENAME
        if versions_path not in materializer.files:
            await materializer.write_file(versions_path, self.render_versions_file(config))

        git_initialized, branch = await self._init_git(config, project_path, progress)
        await self._bootstrap(config, project_path, progress)

        if not self.dry_run:
            print_success(f"Created recipe {config.slug} at {project_path}")

        return ProjectInfo(
            slug=config.slug,
            title=config.title,
            project_path=project_path,
            git_initialized=git_initialized,
            branch=branch,
            dry_run=self.dry_run,
            files=list(materializer.files),
            warnings=warnings,
        )

    def render_versions_file(self, config: ProjectConfig) -> str:
        """Content of a new recipe's ``versions.yml`` override file."""
        return self.renderer.render(
            "versions.yml.j2",
            {
                "title": config.title,
                "examples": KNOWN_VERSION_KEYS,
                "schema_version": SCHEMA_VERSION,
            },
        )

    def verify_setup(
        self, project_path: str | Path, recipe_type: RecipeType | None = None
    ) -> list[Path]:
        """Return the required files missing from a scaffolded recipe.

        Without *recipe_type* either manifest (``Cargo.toml`` or
        ``package.json``) satisfies the manifest requirement.
        """
        project_path = Path(project_path)
        missing = [] if (project_path / DOC_OUTPUT).is_file() else [project_path / DOC_OUTPUT]
        if recipe_type is not None:
            manifests = [project_path / recipe_type.manifest]
        else:
            manifests = [project_path / "Cargo.toml", project_path / "package.json"]
        if not any(path.is_file() for path in manifests):
            missing.append(manifests[0])
        return missing

    # -- Template walk -----------------------------------------------------

    async def _list_entries(self, directory: Path, ctx: ScaffoldContext) -> list[TemplateEntry]:
        """Entries of *directory* in name order."""

        def _scan() -> list[tuple[str, bool]]:
            return sorted((p.name, p.is_dir()) for p in directory.iterdir())

        try:
            listing = await asyncio.to_thread(_scan)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to read template directory: {exc}", directory
            ) from exc

        at_root = directory == ctx.template_root
        return [TemplateEntry(name, is_dir=is_dir, at_root=at_root) for name, is_dir in listing]

    async def _copy_tree(
        self,
        source_dir: Path,
        dest_dir: Path,
        ctx: ScaffoldContext,
        materializer: Materializer,
        plan: list[tuple[TemplateEntry, Decision]] | None = None,
    ) -> None:
        """Mirror *source_dir* into *dest_dir*, depth-first."""
        if plan is None:
            plan = plan_directory(await self._list_entries(source_dir, ctx), ctx.config)

        for entry, decision in plan:
            if decision.action is Action.SKIP:
                continue
            source = source_dir / entry.name
            target = dest_dir / decision.output_name
            if decision.action is Action.RECURSE:
                await materializer.create_dir(target)
                await self._copy_tree(source, target, ctx, materializer)
            else:
                await self._emit_file(source, target, ctx, materializer)

    async def _emit_file(
        self,
        source: Path,
        target: Path,
        ctx: ScaffoldContext,
        materializer: Materializer,
    ) -> None:
        try:
            raw = await asyncio.to_thread(source.read_bytes)
        except OSError as exc:
            raise FileSystemError(f"Failed to read template file: {exc}", source) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            if source.name.endswith(TEMPLATE_SUFFIX):
                raise FileSystemError("Template file is not valid UTF-8", source) from exc
            await materializer.write_bytes(target, raw)
        else:
            await materializer.write_file(target, substitute(text, ctx.config, ctx.rust_version))

        await materializer.copy_mode(source, target)

    # -- Collaborators -----------------------------------------------------

    async def _init_git(
        self,
        config: ProjectConfig,
        project_path: Path,
        progress: ProgressCallback | None,
    ) -> tuple[bool, str | None]:
        """Initialise the recipe repository; failures only warn."""
        if not config.git_init:
            return False, None
        if self.dry_run:
            console.print(f"[dim]Would initialize git repository in {project_path}[/dim]")
            return False, None

        _notify(progress, "Initializing git repository")
        try:
            await git_ops.init_repository(project_path)
            branch = await git_ops.create_branch(project_path, config.slug)
        except GitError as exc:
            print_warning(f"Failed to initialize git repository: {exc}")
            return False, None
        return True, branch

    async def _bootstrap(
        self,
        config: ProjectConfig,
        project_path: Path,
        progress: ProgressCallback | None,
    ) -> None:
        kind = bootstrap_kind(config)
        if kind is BootstrapKind.NONE:
            return
        if self.dry_run:
            console.print(f"[dim]Would run {kind.value} bootstrap in {project_path}[/dim]")
            return

        bootstrap = Bootstrap(project_path, timeout=self.settings.command_timeout)
        if kind is BootstrapKind.FULL:
            await bootstrap.setup(config.slug, progress)
            return

        _notify(progress, "Installing dependencies")
        try:
            await bootstrap.npm_install()
        except CommandError as exc:
            print_warning(f"npm install failed for {config.slug}: {exc}")


def _notify(progress: ProgressCallback | None, label: str) -> None:
    if progress is not None:
        progress(label)
