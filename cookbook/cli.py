"""Command-line entry point.

Two non-interactive commands::

    cookbook create my-pallet --type polkadot-sdk --pallet-only
    cookbook versions my-pallet --show-source
    cookbook versions --ci >> "$GITHUB_ENV"
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from cookbook.config import Config
from cookbook.errors import CookbookError
from cookbook.scaffolder import (
    ContentType,
    Difficulty,
    ProjectConfig,
    ProjectGenerator,
    RecipeType,
)
from cookbook.utils import console, print_error, print_summary_table, print_warning, validate_slug
from cookbook.versions import load_global_versions, resolve_versions
from cookbook.versions.models import ResolvedVersions


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cookbook",
        description="Polkadot cookbook recipe scaffolder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  cookbook create my-pallet --pallet-only\n"
            "  cookbook create xcm-transfer --type xcm --content-type guide\n"
            "  cookbook versions my-pallet --show-source\n"
        ),
    )
    parser.add_argument(
        "--repo-root",
        default=None,
        help="Repository root (default: $COOKBOOK_REPO_ROOT or the current directory)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Scaffold a new recipe")
    create.add_argument("slug", help="Recipe slug, e.g. my-pallet")
    create.add_argument("--title", default="", help="Title (default: derived from the slug)")
    create.add_argument(
        "--type",
        dest="recipe_type",
        choices=[rt.value for rt in RecipeType],
        default=RecipeType.POLKADOT_SDK.value,
        help="Recipe type (default: polkadot-sdk)",
    )
    create.add_argument(
        "--destination", "-d",
        default=None,
        help="Parent directory of the new recipe (default: <repo-root>/recipes)",
    )
    create.add_argument(
        "--content-type",
        choices=[ct.value for ct in ContentType],
        default=None,
    )
    create.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=None,
    )
    create.add_argument(
        "--pallet-only",
        action="store_true",
        help="Pallet-only output without runtime, node or TypeScript tests",
    )
    create.add_argument("--no-git", action="store_true", help="Do not initialise git")
    create.add_argument("--skip-install", action="store_true", help="Skip npm bootstrap")
    create.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be created without writing anything",
    )

    versions = sub.add_parser("versions", help="Show resolved dependency versions")
    versions.add_argument("slug", nargs="?", default=None, help="Recipe slug (global only if omitted)")
    versions.add_argument("--ci", action="store_true", help="Print NAME=VALUE lines for CI")
    versions.add_argument(
        "--show-source", action="store_true", help="Show whether each version is global or recipe"
    )
    versions.add_argument(
        "--validate", action="store_true", help="Fail on keys that are not known dependencies"
    )
    return parser


def _settings(args: argparse.Namespace) -> Config:
    settings = Config.from_env()
    if args.repo_root:
        settings = settings.model_copy(update={"repo_root": Path(args.repo_root)})
    return settings


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_create(args: argparse.Namespace, settings: Config) -> int:
    recipe_type = RecipeType(args.recipe_type)
    destination = Path(args.destination) if args.destination else settings.recipes_path

    config = ProjectConfig(
        slug=args.slug,
        title=args.title,
        destination=destination,
        recipe_type=recipe_type,
        pathway=recipe_type.pathway,
        content_type=ContentType(args.content_type) if args.content_type else None,
        difficulty=Difficulty(args.difficulty) if args.difficulty else None,
        pallet_only=args.pallet_only,
        git_init=not args.no_git,
        skip_install=args.skip_install,
    )

    generator = ProjectGenerator(settings, dry_run=args.dry_run)
    info = asyncio.run(
        generator.create_project(config, progress=lambda label: console.print(f"[dim]{label}...[/dim]"))
    )

    summary = {
        "Slug": info.slug,
        "Title": info.title,
        "Path": str(info.project_path),
        "Type": recipe_type.value,
        "Files": str(len(info.files)),
        "Git branch": info.branch or "-",
    }
    print_summary_table(summary, title="Dry run" if info.dry_run else "Recipe created")

    if not info.dry_run:
        for path in generator.verify_setup(info.project_path, recipe_type):
            print_warning(f"Missing expected file: {path}")
    return 0


def cmd_versions(args: argparse.Namespace, settings: Config) -> int:
    if args.slug:
        validate_slug(args.slug)
        resolved = resolve_versions(
            settings.repo_root, settings.recipe_path(args.slug), settings.versions_file
        )
    else:
        resolved = load_global_versions(settings.repo_root, settings.versions_file)

    if args.validate:
        unknown = resolved.unknown_keys()
        if unknown:
            print_error(f"Unknown version keys: {', '.join(unknown)}")
            return 1

    if args.ci:
        for line in resolved.to_env_lines():
            print(line)
        return 0

    _print_versions(resolved, args.slug, show_source=args.show_source)
    return 0


def _print_versions(resolved: ResolvedVersions, slug: str | None, show_source: bool) -> None:
    title = f"Versions for {slug}" if slug else "Global versions"
    if show_source:
        rows = {
            name: f"{version} ({resolved.get_source(name).value})"
            for name, version in resolved.items()
        }
    else:
        rows = dict(resolved.items())
    print_summary_table(rows, title=title)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m cookbook.cli``."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = _settings(args)

    commands = {"create": cmd_create, "versions": cmd_versions}
    try:
        code = commands[args.command](args, settings)
    except CookbookError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
