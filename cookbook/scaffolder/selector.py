"""Template selection: decide what each template-tree entry becomes.

The whole policy is the ordered ``RULES`` table below.  For every entry the
first rule that returns a :class:`Decision` wins; the final rule always
decides.  Entries that compete for the same output path (the README
variants) are emitted as ``EMIT_EXCLUSIVE`` with a rank and resolved per
directory by :func:`plan_directory`, so exactly one candidate survives.

Decisions depend only on the entry (name, kind, whether it sits at the
template root) and the project configuration; nothing is remembered
between entries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from cookbook.scaffolder.models import ContentType, ProjectConfig

TEMPLATE_SUFFIX = ".template"
DOC_OUTPUT = "README.md"
MANIFEST_OUTPUT = "Cargo.toml"
PALLET_ONLY_MANIFEST = "Cargo.pallet-only.toml.template"

DOC_PALLET_ONLY = "README.pallet-only.md"
DOC_TUTORIAL = "README.tutorial.md"
DOC_GUIDE = "README.guide.md"

# Companion-language (TypeScript/PAPI) files, network configs, container,
# CI and license files that a pallet-only recipe never ships.
PALLET_ONLY_EXCLUDED_FILES: frozenset[str] = frozenset({
    "package.json",
    "package-lock.json",
    "tsconfig.json",
    "vitest.config.ts",
    "papi.json",
    "zombienet.toml",
    "chopsticks.yml",
    "Dockerfile",
    "docker-compose.yml",
    "LICENSE",
})

PALLET_ONLY_EXCLUDED_DIRS: frozenset[str] = frozenset({
    "node",
    "runtime",
    "tests",
    "scripts",
    ".github",
    ".papi",
})

XCM_NETWORK_CONFIG = "zombienet-xcm.toml"

# Ranks for documentation candidates; lowest wins.
RANK_PALLET_ONLY = 0
RANK_CONTENT_TYPE = 1
RANK_TUTORIAL_FALLBACK = 2
RANK_PLAIN = 3


class Action(str, Enum):
    SKIP = "skip"
    EMIT = "emit"
    EMIT_EXCLUSIVE = "emit-exclusive"
    RECURSE = "recurse"


@dataclass(frozen=True)
class TemplateEntry:
    """One file or directory inside a template tree."""

    name: str
    is_dir: bool = False
    at_root: bool = False

    @property
    def logical_name(self) -> str:
        """Name with the template suffix stripped."""
        if self.name.endswith(TEMPLATE_SUFFIX):
            return self.name[: -len(TEMPLATE_SUFFIX)]
        return self.name


@dataclass(frozen=True)
class Decision:
    action: Action
    output_name: str | None = None
    rank: int = 0
    rule: str = ""

    @property
    def emits(self) -> bool:
        return self.action in (Action.EMIT, Action.EMIT_EXCLUSIVE)


Rule = Callable[[TemplateEntry, ProjectConfig], Decision | None]


# ---------------------------------------------------------------------------
# Rules, in precedence order
# ---------------------------------------------------------------------------


def _hidden(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    if entry.name.startswith("."):
        return Decision(Action.SKIP, rule="hidden")
    return None


def _pallet_only_exclusions(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    if not config.pallet_only_mode:
        return None
    excluded = PALLET_ONLY_EXCLUDED_DIRS if entry.is_dir else PALLET_ONLY_EXCLUDED_FILES
    if entry.logical_name in excluded:
        return Decision(Action.SKIP, rule="pallet-only-exclusion")
    return None


def _minimal_manifest(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    if entry.is_dir:
        return None
    if entry.name == PALLET_ONLY_MANIFEST:
        if config.pallet_only_mode:
            return Decision(Action.EMIT, MANIFEST_OUTPUT, rule="minimal-manifest")
        return Decision(Action.SKIP, rule="minimal-manifest")
    if config.pallet_only_mode and entry.at_root and entry.logical_name == MANIFEST_OUTPUT:
        return Decision(Action.SKIP, rule="minimal-manifest")
    return None


def _xcm_network_config(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    if config.pallet_only_mode and not entry.is_dir and entry.logical_name == XCM_NETWORK_CONFIG:
        return Decision(Action.SKIP, rule="xcm-network-config")
    return None


def _plain_documentation(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    # Superseded by any documentation variant; emitted only when none exists.
    if not entry.is_dir and entry.logical_name == DOC_OUTPUT:
        return Decision(
            Action.EMIT_EXCLUSIVE, DOC_OUTPUT, rank=RANK_PLAIN, rule="plain-documentation"
        )
    return None


def _documentation_variants(entry: TemplateEntry, config: ProjectConfig) -> Decision | None:
    if entry.is_dir:
        return None
    name = entry.logical_name
    if name == DOC_PALLET_ONLY:
        if config.pallet_only_mode:
            return Decision(
                Action.EMIT_EXCLUSIVE, DOC_OUTPUT, rank=RANK_PALLET_ONLY, rule="doc-variant"
            )
        return Decision(Action.SKIP, rule="doc-variant")

    if name not in (DOC_TUTORIAL, DOC_GUIDE):
        return None

    wanted = config.content_type or ContentType.TUTORIAL
    variant = ContentType.TUTORIAL if name == DOC_TUTORIAL else ContentType.GUIDE
    if variant is wanted:
        return Decision(
            Action.EMIT_EXCLUSIVE, DOC_OUTPUT, rank=RANK_CONTENT_TYPE, rule="doc-variant"
        )
    if variant is ContentType.TUTORIAL:
        return Decision(
            Action.EMIT_EXCLUSIVE, DOC_OUTPUT, rank=RANK_TUTORIAL_FALLBACK, rule="doc-variant"
        )
    return Decision(Action.SKIP, rule="doc-variant")


def _default(entry: TemplateEntry, config: ProjectConfig) -> Decision:
    if entry.is_dir:
        return Decision(Action.RECURSE, entry.name, rule="directory")
    return Decision(Action.EMIT, entry.logical_name, rule="default")


RULES: tuple[tuple[str, Rule], ...] = (
    ("hidden", _hidden),
    ("pallet-only-exclusion", _pallet_only_exclusions),
    ("minimal-manifest", _minimal_manifest),
    ("xcm-network-config", _xcm_network_config),
    ("plain-documentation", _plain_documentation),
    ("doc-variant", _documentation_variants),
    ("default", _default),
)


def select(entry: TemplateEntry, config: ProjectConfig) -> Decision:
    """Return the decision of the first matching rule for *entry*."""
    for _name, rule in RULES:
        decision = rule(entry, config)
        if decision is not None:
            return decision
    raise AssertionError("default rule must always decide")


def plan_directory(
    entries: Iterable[TemplateEntry], config: ProjectConfig
) -> list[tuple[TemplateEntry, Decision]]:
    """Decide every entry of one directory and resolve exclusive candidates.

    Entries keep their input order.  For each exclusive output path only the
    lowest-ranked candidate (first one on ties) keeps its ``EMIT_EXCLUSIVE``
    decision; the others become ``SKIP`` with rule ``"superseded"``.
    """
    planned = [(entry, select(entry, config)) for entry in entries]

    winners: dict[str, int] = {}
    for index, (_entry, decision) in enumerate(planned):
        if decision.action is not Action.EMIT_EXCLUSIVE:
            continue
        current = winners.get(decision.output_name)
        if current is None or decision.rank < planned[current][1].rank:
            winners[decision.output_name] = index

    keep = set(winners.values())
    return [
        (entry, decision)
        if decision.action is not Action.EMIT_EXCLUSIVE or index in keep
        else (entry, Decision(Action.SKIP, rule="superseded"))
        for index, (entry, decision) in enumerate(planned)
    ]
