"""Shared pytest fixtures for the cookbook test suite.

Provides reusable fixtures for:
- A small on-disk template library covering every selection rule
- Tool settings pointing at that library
- Global and recipe ``versions.yml`` files
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from cookbook.config import Config


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create *files* (relative path -> content) under *root*.

    A path ending in ``/`` creates an empty directory.
    """
    for rel, content in files.items():
        path = root / rel
        if rel.endswith("/"):
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


SDK_TEMPLATE_FILES: dict[str, str] = {
    "README.tutorial.md.template": "# {{title}} tutorial\n{{content_type}}\n",
    "README.guide.md.template": "# {{title}} guide\n",
    "README.pallet-only.md.template": "# {{title}} pallet\n",
    "Cargo.toml.template": '[workspace]\nmembers = ["pallets/template", "runtime", "node"]\n',
    "Cargo.pallet-only.toml.template": '[workspace]\nmembers = ["pallets/template"]\n',
    "rust-toolchain.toml.template": '[toolchain]\nchannel = "{{rust_version}}"\n',
    "package.json.template": '{"name": "{{slug}}"}\n',
    "tsconfig.json": "{}\n",
    "zombienet.toml": "[relaychain]\n",
    "zombienet-xcm.toml.template": "# {{slug}}\n",
    "chopsticks.yml": "endpoint: ws://localhost:9944\n",
    "Dockerfile": "FROM scratch\n",
    ".gitkeep": "",
    "pallets/template/Cargo.toml.template": 'name = "pallet-{{slug}}"\n',
    "pallets/template/src/lib.rs": "//! pallet_{{slug_underscore}}\n",
    "runtime/Cargo.toml.template": 'name = "{{slug}}-runtime"\n',
    "node/Cargo.toml.template": 'name = "{{slug}}-node"\n',
    "tests/pallet.test.ts": "// ${{ matrix.node }} stays\n",
    "scripts/start.sh": "#!/bin/sh\necho {{title}}\n",
}


@pytest.fixture
def template_library(tmp_path: Path) -> Path:
    """Template library with a full SDK tree and a plain-README xcm tree."""
    library = tmp_path / "library"
    write_tree(library / "polkadot-sdk-template", SDK_TEMPLATE_FILES)
    (library / "polkadot-sdk-template" / "scripts" / "start.sh").chmod(0o755)
    write_tree(
        library / "xcm-template",
        {
            "README.md.template": "# {{title}}\n{{pathway}}\n",
            "package.json.template": '{"name": "{{slug}}"}\n',
            "tests/xcm.test.ts": "// {{slug}}\n",
        },
    )
    write_tree(
        library / "solidity-template",
        {
            "README.md": "# Solidity\n",
            "package.json": "{}\n",
            "contracts/Counter.sol": "contract Counter {}\n",
        },
    )
    return library


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Cookbook repository root with a toolchain pin and global versions."""
    root = tmp_path / "repo"
    write_tree(
        root,
        {
            "rust-toolchain.toml": '[toolchain]\nchannel = "1.86"\n',
            "versions.yml": textwrap.dedent("""\
                versions:
                  rust: "1.86"
                  polkadot_omni_node: "0.5.0"
                  chain_spec_builder: "10.0.0"
                  frame_omni_bencher: "0.13.0"
                metadata:
                  schema_version: "1.0"
                """),
            "recipes/": "",
        },
    )
    return root


@pytest.fixture
def settings(repo_root: Path, template_library: Path) -> Config:
    """Settings pointing at the test repository and template library."""
    return Config(repo_root=repo_root, template_dir=template_library, command_timeout=30)


@pytest.fixture
def destination(repo_root: Path) -> Path:
    return repo_root / "recipes"


@pytest.fixture
def tree_writer():
    """The :func:`write_tree` helper, for tests building their own trees."""
    return write_tree
