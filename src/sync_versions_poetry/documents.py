"""Readers for .pre-commit-config.yaml and poetry.lock."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from sync_versions_poetry.matcher import check_hooks
from sync_versions_poetry.types import (
    HookDependencies,
    LockedPackage,
    PoetryLock,
    PreCommitConfig,
    RepoHooks,
)

logger = logging.getLogger(__name__)


class DocumentError(RuntimeError):
    """Raised when an input document is missing or malformed."""


def _read_text(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DocumentError(f"{label} not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise DocumentError(f"{label} at {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise DocumentError(f"Failed to read {label} at {path}: {exc}") from exc


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentError(f"{what} must be a list, got {type(value).__name__}")
    return value


def _parse_hook(raw: Any) -> HookDependencies | None:
    if not isinstance(raw, dict):
        raise DocumentError(f"hook entry must be a mapping, got {type(raw).__name__}")
    hook_id = raw.get("id")
    if hook_id is None:
        return None
    deps = _as_list(raw.get("additional_dependencies"), f"additional_dependencies of hook {hook_id!r}")
    return HookDependencies(hook_id=str(hook_id), dependencies=tuple(str(dep) for dep in deps))


def parse_pre_commit_config(text: str) -> PreCommitConfig:
    """Parse the contents of a .pre-commit-config.yaml."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DocumentError(f"pre-commit config parse error: {exc}") from exc
    if raw is None:
        return PreCommitConfig()
    if not isinstance(raw, dict):
        raise DocumentError("pre-commit config parse error: expected mapping at top level")

    repos: list[RepoHooks] = []
    for repo in _as_list(raw.get("repos"), "repos"):
        if not isinstance(repo, dict):
            raise DocumentError(f"repos entry must be a mapping, got {type(repo).__name__}")
        hooks = [_parse_hook(hook) for hook in _as_list(repo.get("hooks"), "hooks")]
        repos.append(
            RepoHooks(
                repo=str(repo["repo"]) if repo.get("repo") is not None else None,
                hooks=tuple(hook for hook in hooks if hook is not None),
            )
        )
    return PreCommitConfig(repos=tuple(repos))


def load_pre_commit_config(path: Path) -> PreCommitConfig:
    """Read and parse a .pre-commit-config.yaml."""
    config = parse_pre_commit_config(_read_text(path, "pre-commit config"))
    logger.debug("loaded %d repos from %s", len(config.repos), path)
    return config


def parse_poetry_lock(text: str) -> PoetryLock:
    """Parse the contents of a poetry.lock."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise DocumentError(f"Malformed TOML in poetry.lock: {exc}") from exc

    metadata = data.get("metadata", {})
    lock_version = metadata.get("lock-version") if isinstance(metadata, dict) else None

    packages: list[LockedPackage] = []
    for index, pkg in enumerate(_as_list(data.get("package"), "package")):
        if not isinstance(pkg, dict):
            raise DocumentError(f"package #{index} must be a table")
        name, version = pkg.get("name"), pkg.get("version")
        if not isinstance(name, str) or not isinstance(version, str):
            raise DocumentError(f"package #{index} must have string 'name' and 'version' fields")
        packages.append(LockedPackage(name=name, version=version))

    return PoetryLock(
        lock_version=str(lock_version) if lock_version is not None else None,
        packages=tuple(packages),
    )


def load_poetry_lock(path: Path) -> PoetryLock:
    """Read and parse a poetry.lock."""
    lockfile = parse_poetry_lock(_read_text(path, "poetry.lock"))
    logger.debug(
        "loaded %d packages from %s (lock-version %s)",
        len(lockfile.packages),
        path,
        lockfile.lock_version or "unknown",
    )
    return lockfile


def select_hooks(config: PreCommitConfig, hook_ids: Iterable[str]) -> list[HookDependencies]:
    """Return the hooks whose id is in ``hook_ids``, in file order."""
    wanted = set(hook_ids)
    selected = [hook for hook in config.iter_hooks() if hook.hook_id in wanted]
    logger.debug("selected hooks: %s", ", ".join(hook.hook_id for hook in selected) or "(none)")
    return selected


def check_versions(config: PreCommitConfig, lockfile: PoetryLock, hook_ids: Iterable[str]) -> list[str]:
    """Check additional_dependencies of the selected hooks against the lockfile.

    Only hooks with an id in ``hook_ids`` are checked. Each dependency must be
    written as ``package-name==exact.version``, the package must be in the
    lockfile, and the pinned version must match the locked one.
    """
    return check_hooks(select_hooks(config, hook_ids), lockfile.packages)
