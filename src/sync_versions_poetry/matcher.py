"""Exact-pin policy checks for dependency specifiers against poetry.lock.

For each specifier the following must hold, checked in this order:

- it names a version constraint at all
- the constraint is valid PEP 440
- the package is present in the lockfile
- the locked version satisfies the constraint
- the constraint is an exact ``==`` pin, not ``===`` and not a ``.*`` wildcard

The first failing check is reported; later checks are not attempted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from packaging.specifiers import InvalidSpecifier, Specifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from sync_versions_poetry.specifier import SpecifierRejected, normalize_name, parse_specifier
from sync_versions_poetry.types import HookDependencies, LockedPackage, ParsedSpecifier

logger = logging.getLogger(__name__)


class LockfileError(RuntimeError):
    """Raised when poetry.lock holds a version that is not valid PEP 440."""


def locked_versions_from(packages: Iterable[LockedPackage]) -> dict[str, str]:
    """Build the normalized-name -> version lookup; later duplicates win."""
    return {normalize_name(pkg.name): pkg.version for pkg in packages}


def _parse_locked_version(name: str, raw_version: str) -> Version:
    try:
        return Version(raw_version)
    except InvalidVersion as exc:
        raise LockfileError(
            f"failed to parse version from poetry.lock: {name!r} {raw_version!r}"
        ) from exc


class _Check:
    """State threaded through the policy pipeline for one specifier."""

    def __init__(self, parsed: ParsedSpecifier, locked_versions: Mapping[str, str]) -> None:
        self.parsed = parsed
        self.locked_versions = locked_versions
        self.specifiers: SpecifierSet | None = None
        self.locked: Version | None = None
        self.raw_locked = ""

    def require_constraint(self) -> str | None:
        if not self.parsed.constraint_text:
            return "empty version spec not permitted"
        return None

    def require_valid_constraint(self) -> str | None:
        try:
            self.specifiers = SpecifierSet(self.parsed.constraint_text)
        except InvalidSpecifier:
            return "invalid version specification"
        return None

    def require_locked(self) -> str | None:
        key = normalize_name(self.parsed.name)
        raw_version = self.locked_versions.get(key)
        if raw_version is None:
            return "not found in poetry.lock"
        self.raw_locked = raw_version
        self.locked = _parse_locked_version(self.parsed.name, raw_version)
        return None

    def _satisfies(self, spec: Specifier) -> bool:
        # "===" is a plain string comparison against the lockfile text as written.
        if spec.operator == "===":
            return spec.version.lower() == self.raw_locked.strip().lower()
        return spec.contains(self.locked, prereleases=True)

    def require_satisfied(self) -> str | None:
        if self.specifiers is None or self.locked is None:
            raise RuntimeError("constraint and locked version must be resolved first")
        if not all(self._satisfies(spec) for spec in self.specifiers):
            return f"version mismatch (expected: {self.locked})"
        return None

    def require_exact(self) -> str | None:
        if "==" not in self.parsed.constraint_text:
            return f"must specify an exact version (expected: {self.parsed.name}=={self.locked})"
        return None

    def forbid_arbitrary_equality(self) -> str | None:
        if "===" in self.parsed.constraint_text:
            return (
                "arbitrary equality (===) not permitted "
                f"(expected: {self.parsed.name}=={self.locked})"
            )
        return None

    def forbid_wildcard(self) -> str | None:
        if ".*" in self.parsed.constraint_text:
            return "trailing .* not permitted"
        return None

    def pipeline(self) -> tuple[Callable[[], str | None], ...]:
        return (
            self.require_constraint,
            self.require_valid_constraint,
            self.require_locked,
            self.require_satisfied,
            self.require_exact,
            self.forbid_arbitrary_equality,
            self.forbid_wildcard,
        )


def check_specifier(parsed: ParsedSpecifier, locked_versions: Mapping[str, str]) -> str | None:
    """Return the first policy problem for ``parsed``, or None if it is compliant.

    ``locked_versions`` must be keyed by normalized package name (see
    ``locked_versions_from``).

    Raises:
        LockfileError: the locked version of the named package is not valid PEP 440
    """
    check = _Check(parsed, locked_versions)
    for step in check.pipeline():
        problem = step()
        if problem is not None:
            return problem
    return None


def check_version(depspec: str, locked_versions: Mapping[str, str]) -> str | None:
    """Parse and check one raw specifier string."""
    try:
        parsed = parse_specifier(depspec)
    except SpecifierRejected as exc:
        return exc.reason
    return check_specifier(parsed, locked_versions)


def check_hooks(
    hooks: Sequence[HookDependencies],
    packages: Iterable[LockedPackage],
) -> list[str]:
    """Check every dependency of every hook, returning "spec: problem" lines in input order."""
    locked_versions = locked_versions_from(packages)
    problems: list[str] = []
    for hook in hooks:
        for depspec in hook.dependencies:
            problem = check_version(depspec, locked_versions)
            logger.debug("hook %s: %s -> %s", hook.hook_id, depspec, problem or "ok")
            if problem is not None:
                problems.append(f"{depspec}: {problem}")
    return problems
