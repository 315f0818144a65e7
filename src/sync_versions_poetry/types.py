"""Types shared by the specifier parser, matcher and document loaders."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_HOOK_IDS: tuple[str, ...] = ("black", "flake8", "isort", "mypy")

DEFAULT_CONFIG_FILENAME = ".pre-commit-config.yaml"
DEFAULT_LOCKFILE_FILENAME = "poetry.lock"


@dataclass(frozen=True)
class ParsedSpecifier:
    """Structured view of a dependency specifier."""

    name: str
    extras: frozenset[str] = field(default_factory=frozenset)
    constraint_text: str = ""


@dataclass(frozen=True)
class LockedPackage:
    """Single package entry from poetry.lock."""

    name: str
    version: str


@dataclass(frozen=True)
class HookDependencies:
    """A pre-commit hook and its additional_dependencies, in file order."""

    hook_id: str
    dependencies: tuple[str, ...] = ()


@dataclass(frozen=True)
class RepoHooks:
    """One `repos` entry of a pre-commit config."""

    repo: str | None
    hooks: tuple[HookDependencies, ...]


@dataclass(frozen=True)
class PreCommitConfig:
    """Parsed .pre-commit-config.yaml, reduced to what version checks need."""

    repos: tuple[RepoHooks, ...] = ()

    def iter_hooks(self) -> tuple[HookDependencies, ...]:
        return tuple(hook for repo in self.repos for hook in repo.hooks)


@dataclass(frozen=True)
class PoetryLock:
    """Parsed poetry.lock."""

    lock_version: str | None
    packages: tuple[LockedPackage, ...] = ()
