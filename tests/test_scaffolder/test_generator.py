"""Tests for the scaffold engine.

Covers:
- Full and pallet-only polkadot-sdk recipes
- Exactly one README for every pallet_only x content_type combination
- Dry-run (no side effects) and precondition failures (nothing written)
- Placeholder substitution, verbatim copies and executable bits
- Generated versions.yml, recipe-type skeletons and warnings
- Git and bootstrap collaborators (mocked)
"""

from __future__ import annotations

import itertools
import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import yaml

from cookbook.errors import (
    CommandError,
    FileSystemError,
    GitError,
    ProjectExistsError,
    TemplateNotFoundError,
    ValidationError,
)
from cookbook.scaffolder.bootstrap import Bootstrap
from cookbook.scaffolder.generator import ProjectGenerator, validate_project_config
from cookbook.scaffolder.models import ContentType, Pathway, ProjectConfig, RecipeType

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _snapshot(root: Path) -> list[Path]:
    return sorted(root.rglob("*")) if root.exists() else []


def _relative_files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.fixture
def make_config(destination):
    """Factory for offline configs (no git, no npm)."""

    def _make(**overrides) -> ProjectConfig:
        values = {
            "slug": "my-recipe",
            "destination": destination,
            "git_init": False,
            "skip_install": True,
        }
        values.update(overrides)
        return ProjectConfig(**values)

    return _make


@pytest.fixture
def generator(settings) -> ProjectGenerator:
    return ProjectGenerator(settings)


# ---------------------------------------------------------------------------
# Full and pallet-only recipes
# ---------------------------------------------------------------------------


class TestFullRecipe:
    async def test_creates_full_project(self, generator, make_config):
        info = await generator.create_project(make_config())
        root = info.project_path

        assert root == make_config().destination / "my-recipe"
        assert info.title == "My Recipe"
        assert _relative_files(root) == {
            "README.md",
            "Cargo.toml",
            "rust-toolchain.toml",
            "package.json",
            "tsconfig.json",
            "zombienet.toml",
            "zombienet-xcm.toml",
            "chopsticks.yml",
            "Dockerfile",
            "versions.yml",
            "pallets/template/Cargo.toml",
            "pallets/template/src/lib.rs",
            "runtime/Cargo.toml",
            "node/Cargo.toml",
            "tests/pallet.test.ts",
            "scripts/start.sh",
        }
        assert set(info.files) == {root / rel for rel in _relative_files(root)}

    async def test_placeholders_substituted(self, generator, make_config):
        info = await generator.create_project(make_config())
        root = info.project_path

        assert (root / "README.md").read_text() == "# My Recipe tutorial\n\n"
        assert (root / "rust-toolchain.toml").read_text() == '[toolchain]\nchannel = "1.86"\n'
        assert (root / "package.json").read_text() == '{"name": "my-recipe"}\n'
        assert (root / "pallets/template/Cargo.toml").read_text() == 'name = "pallet-my-recipe"\n'
        assert (root / "pallets/template/src/lib.rs").read_text() == "//! pallet_my_recipe\n"
        assert (root / "tests/pallet.test.ts").read_text() == "// ${{ matrix.node }} stays\n"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    async def test_scripts_stay_executable(self, generator, make_config):
        info = await generator.create_project(make_config())
        assert os.access(info.project_path / "scripts" / "start.sh", os.X_OK)

    async def test_generated_versions_file(self, generator, make_config):
        info = await generator.create_project(make_config())
        data = yaml.safe_load((info.project_path / "versions.yml").read_text())
        assert data["versions"] is None
        assert data["metadata"]["schema_version"] == "1.0"

    async def test_toolchain_default_when_missing(self, generator, make_config, repo_root):
        (repo_root / "rust-toolchain.toml").unlink()
        info = await generator.create_project(make_config())
        assert '"1.91"' in (info.project_path / "rust-toolchain.toml").read_text()


class TestPalletOnly:
    async def test_minimal_output(self, generator, make_config):
        info = await generator.create_project(make_config(slug="my-pallet", pallet_only=True))
        root = info.project_path

        assert _relative_files(root) == {
            "README.md",
            "Cargo.toml",
            "rust-toolchain.toml",
            "versions.yml",
            "pallets/template/Cargo.toml",
            "pallets/template/src/lib.rs",
        }
        assert (root / "README.md").read_text() == "# My Pallet pallet\n"
        assert "runtime" not in (root / "Cargo.toml").read_text()
        for excluded in ("node", "runtime", "tests", "scripts"):
            assert not (root / excluded).exists()

    async def test_pallet_only_ignored_for_xcm(self, generator, make_config):
        info = await generator.create_project(
            make_config(recipe_type=RecipeType.XCM, pallet_only=True)
        )
        assert (info.project_path / "package.json").is_file()
        assert any("pallet_only" in w for w in info.warnings)


# ---------------------------------------------------------------------------
# Documentation exclusivity
# ---------------------------------------------------------------------------


class TestDocumentation:
    @pytest.mark.parametrize(
        "pallet_only, content_type",
        list(itertools.product([True, False], [None, ContentType.TUTORIAL, ContentType.GUIDE])),
    )
    async def test_exactly_one_readme(self, generator, make_config, pallet_only, content_type):
        info = await generator.create_project(
            make_config(pallet_only=pallet_only, content_type=content_type)
        )
        docs = sorted(p.name for p in info.project_path.iterdir() if p.name.startswith("README"))
        assert docs == ["README.md"]

    async def test_guide_variant(self, generator, make_config):
        info = await generator.create_project(make_config(content_type=ContentType.GUIDE))
        assert (info.project_path / "README.md").read_text() == "# My Recipe guide\n"

    async def test_tutorial_metadata_line(self, generator, make_config):
        info = await generator.create_project(make_config(content_type=ContentType.TUTORIAL))
        assert "content_type: tutorial" in (info.project_path / "README.md").read_text()

    async def test_plain_readme_fallback(self, generator, make_config, template_library):
        sdk = template_library / "polkadot-sdk-template"
        for name in ("README.tutorial.md.template", "README.guide.md.template"):
            (sdk / name).unlink()
        (sdk / "README.md").write_text("# Plain {{slug}}\n", encoding="utf-8")

        info = await generator.create_project(make_config())

        assert (info.project_path / "README.md").read_text() == "# Plain my-recipe\n"

    async def test_root_without_docs_fails_before_writing(
        self, generator, make_config, template_library, destination
    ):
        for path in (template_library / "polkadot-sdk-template").glob("README*"):
            path.unlink()
        before = _snapshot(destination)

        with pytest.raises(TemplateNotFoundError):
            await generator.create_project(make_config())

        assert _snapshot(destination) == before


# ---------------------------------------------------------------------------
# Other recipe types
# ---------------------------------------------------------------------------


class TestOtherTypes:
    async def test_xcm_readme_metadata(self, generator, make_config):
        info = await generator.create_project(
            make_config(recipe_type=RecipeType.XCM, pathway=Pathway.XCM)
        )
        root = info.project_path
        assert (root / "README.md").read_text() == "# My Recipe\npathway: xcm\n"
        assert (root / "tests" / "xcm.test.ts").read_text() == "// my-recipe\n"

    async def test_solidity_skeleton(self, generator, make_config):
        info = await generator.create_project(make_config(recipe_type=RecipeType.SOLIDITY))
        root = info.project_path
        for name in ("tests", "scripts", "src", "contracts"):
            assert (root / name).is_dir()
        assert (root / "README.md").read_text() == "# Solidity\n"

    async def test_binary_files_copied_verbatim(self, generator, make_config, template_library):
        (template_library / "xcm-template" / "logo.bin").write_bytes(b"\xff\xfe{{slug}}")
        info = await generator.create_project(make_config(recipe_type=RecipeType.XCM))
        assert (info.project_path / "logo.bin").read_bytes() == b"\xff\xfe{{slug}}"

    async def test_binary_template_rejected(self, generator, make_config, template_library):
        bad = template_library / "xcm-template" / "bad.txt.template"
        bad.write_bytes(b"\xff\xfe")
        with pytest.raises(FileSystemError) as exc_info:
            await generator.create_project(make_config(recipe_type=RecipeType.XCM))
        assert exc_info.value.path == bad

    async def test_failed_write_keeps_earlier_files_and_stops(
        self, generator, make_config, template_library, destination
    ):
        # Sorts between README.md.template and package.json.template.
        (template_library / "xcm-template" / "m-bad.txt.template").write_bytes(b"\xff\xfe")

        with pytest.raises(FileSystemError):
            await generator.create_project(make_config(recipe_type=RecipeType.XCM))

        root = destination / "my-recipe"
        assert (root / "README.md").is_file()
        assert not (root / "m-bad.txt").exists()
        assert not (root / "package.json").exists()
        assert not (root / "tests").exists()
        assert not (root / "versions.yml").exists()

    async def test_template_versions_file_kept(self, generator, make_config, template_library):
        (template_library / "xcm-template" / "versions.yml").write_text(
            'versions:\n  rust: "1.80"\n', encoding="utf-8"
        )
        info = await generator.create_project(make_config(recipe_type=RecipeType.XCM))
        assert (info.project_path / "versions.yml").read_text() == 'versions:\n  rust: "1.80"\n'
        assert info.files.count(info.project_path / "versions.yml") == 1

    async def test_missing_template_tree(self, generator, make_config, destination):
        before = _snapshot(destination)
        with pytest.raises(TemplateNotFoundError):
            await generator.create_project(make_config(recipe_type=RecipeType.NETWORKS))
        assert _snapshot(destination) == before


# ---------------------------------------------------------------------------
# Preconditions, dry-run and additivity
# ---------------------------------------------------------------------------


class TestPreconditions:
    async def test_existing_project(self, generator, make_config, destination):
        existing = destination / "my-recipe"
        existing.mkdir()
        (existing / "keep.txt").write_text("mine", encoding="utf-8")
        before = _snapshot(destination)

        with pytest.raises(ProjectExistsError) as exc_info:
            await generator.create_project(make_config())

        assert exc_info.value.path == existing
        assert _snapshot(destination) == before
        assert (existing / "keep.txt").read_text() == "mine"

    @pytest.mark.parametrize("slug", ["Invalid-Slug", "double--dash", "-x", "", "my-recipe\n"])
    async def test_invalid_slug(self, generator, make_config, destination, slug):
        before = _snapshot(destination)
        with pytest.raises(ValidationError):
            await generator.create_project(make_config(slug=slug, title="Valid Title"))
        assert _snapshot(destination) == before

    async def test_short_title(self, generator, make_config):
        with pytest.raises(ValidationError):
            await generator.create_project(make_config(title="ab"))

    async def test_front_matter_unsafe_text(self, generator, make_config, destination):
        before = _snapshot(destination)
        with pytest.raises(ValidationError):
            await generator.create_project(make_config(title='The "Best" Pallet'))
        with pytest.raises(ValidationError):
            await generator.create_project(make_config(description="two\nlines"))
        assert _snapshot(destination) == before

    async def test_missing_destination_created_with_warning(self, generator, make_config, tmp_path):
        destination = tmp_path / "new" / "recipes"
        info = await generator.create_project(make_config(destination=destination))
        assert (destination / "my-recipe" / "README.md").is_file()
        assert any("will be created" in w for w in info.warnings)

    async def test_recipes_are_additive(self, generator, make_config, destination):
        first = await generator.create_project(make_config(slug="first-recipe"))
        before = {p: p.read_bytes() for p in first.project_path.rglob("*") if p.is_file()}

        await generator.create_project(make_config(slug="second-recipe"))

        assert {p: p.read_bytes() for p in first.project_path.rglob("*") if p.is_file()} == before
        assert sorted(p.name for p in destination.iterdir()) == ["first-recipe", "second-recipe"]


class TestDryRun:
    async def test_no_side_effects(self, settings, make_config, destination, capsys):
        before = _snapshot(destination)
        generator = ProjectGenerator(settings, dry_run=True)

        info = await generator.create_project(make_config(git_init=True, skip_install=False))

        assert _snapshot(destination) == before
        assert info.dry_run is True
        assert info.git_initialized is False
        assert info.project_path / "README.md" in info.files
        assert info.project_path / "versions.yml" in info.files
        assert "Would write file" in capsys.readouterr().out

    async def test_same_plan_as_real_run(self, settings, make_config):
        planned = await ProjectGenerator(settings, dry_run=True).create_project(
            make_config(pallet_only=True)
        )
        real = await ProjectGenerator(settings).create_project(make_config(pallet_only=True))
        assert planned.files == real.files

    async def test_existing_project_still_rejected(self, settings, make_config, destination):
        (destination / "my-recipe").mkdir()
        with pytest.raises(ProjectExistsError):
            await ProjectGenerator(settings, dry_run=True).create_project(make_config())


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class TestGit:
    async def test_git_initialised(self, generator, make_config):
        with patch("cookbook.git_ops.init_repository", new=AsyncMock()) as init, patch(
            "cookbook.git_ops.create_branch", new=AsyncMock(return_value="feat/recipe-my-recipe")
        ) as branch:
            info = await generator.create_project(make_config(git_init=True))

        init.assert_awaited_once_with(info.project_path)
        branch.assert_awaited_once_with(info.project_path, "my-recipe")
        assert info.git_initialized is True
        assert info.branch == "feat/recipe-my-recipe"

    async def test_git_failure_is_a_warning(self, generator, make_config):
        with patch("cookbook.git_ops.init_repository", new=AsyncMock(side_effect=GitError("no git"))):
            info = await generator.create_project(make_config(git_init=True))

        assert info.git_initialized is False
        assert info.branch is None
        assert (info.project_path / "README.md").is_file()

    async def test_git_disabled(self, generator, make_config):
        with patch("cookbook.git_ops.init_repository", new=AsyncMock()) as init:
            await generator.create_project(make_config(git_init=False))
        init.assert_not_awaited()


class TestBootstrapIntegration:
    async def test_full_bootstrap_for_xcm(self, generator, make_config):
        labels: list[str] = []
        with patch.object(Bootstrap, "setup", new=AsyncMock()) as setup:
            await generator.create_project(
                make_config(recipe_type=RecipeType.XCM, skip_install=False),
                progress=labels.append,
            )
        setup.assert_awaited_once()
        assert "Copying template files" in labels

    async def test_full_bootstrap_failure_propagates(self, generator, make_config):
        failing = AsyncMock(side_effect=CommandError("npm install", "boom"))
        with patch.object(Bootstrap, "setup", new=failing):
            with pytest.raises(CommandError):
                await generator.create_project(
                    make_config(recipe_type=RecipeType.XCM, skip_install=False)
                )

    async def test_npm_install_failure_is_a_warning(self, generator, make_config):
        failing = AsyncMock(side_effect=CommandError("npm install", "boom"))
        with patch.object(Bootstrap, "npm_install", new=failing):
            info = await generator.create_project(make_config(skip_install=False))
        failing.assert_awaited_once()
        assert (info.project_path / "README.md").is_file()

    async def test_pallet_only_never_bootstraps(self, generator, make_config):
        with patch.object(Bootstrap, "npm_install", new=AsyncMock()) as install:
            await generator.create_project(make_config(pallet_only=True, skip_install=False))
        install.assert_not_awaited()


# ---------------------------------------------------------------------------
# Module helpers
# ---------------------------------------------------------------------------


class TestValidateProjectConfig:
    def test_ok(self, make_config):
        assert validate_project_config(make_config()) == []

    def test_invalid_slug(self, make_config):
        with pytest.raises(ValidationError):
            validate_project_config(make_config(slug="Bad_Slug", title="Good Title"))


class TestVerifySetup:
    async def test_complete_project(self, generator, make_config):
        info = await generator.create_project(make_config())
        assert generator.verify_setup(info.project_path, RecipeType.POLKADOT_SDK) == []
        assert generator.verify_setup(info.project_path) == []

    def test_missing_files(self, generator, tmp_path):
        missing = generator.verify_setup(tmp_path, RecipeType.SOLIDITY)
        assert missing == [tmp_path / "README.md", tmp_path / "package.json"]
