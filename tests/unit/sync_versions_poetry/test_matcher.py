"""Unit tests for exact-pin policy checks."""

from __future__ import annotations

import pytest

from sync_versions_poetry.matcher import (
    LockfileError,
    _Check,
    check_hooks,
    check_specifier,
    check_version,
    locked_versions_from,
)
from sync_versions_poetry.types import HookDependencies, LockedPackage, ParsedSpecifier

LOCKED = {"virtualenv": "20.25.0", "friendly-bard": "1.2.0", "pre-thing": "2.0.0rc1"}


@pytest.mark.parametrize(
    ("depspec", "expected"),
    [
        ("virtualenv", "empty version spec not permitted"),
        ("virtualenv[socks]", "empty version spec not permitted"),
        ("virtualenv~=20", "invalid version specification"),
        ("virtualenv==20.25.0.*.*", "invalid version specification"),
        ("does-not-exist==1.2.3", "not found in poetry.lock"),
        ("virtualenv==20.24.0", "version mismatch (expected: 20.25.0)"),
        ("virtualenv<20", "version mismatch (expected: 20.25.0)"),
        ("virtualenv==20.24.*", "version mismatch (expected: 20.25.0)"),
        (
            "virtualenv>=20.25,<21",
            "must specify an exact version (expected: virtualenv==20.25.0)",
        ),
        (
            "virtualenv!=20.24.0",
            "must specify an exact version (expected: virtualenv==20.25.0)",
        ),
        (
            "virtualenv===20.25.0",
            "arbitrary equality (===) not permitted (expected: virtualenv==20.25.0)",
        ),
        ("virtualenv==20.25.*", "trailing .* not permitted"),
        ("this is nonsense", "invalid dependency specification"),
        ("virtualenv==20.25.0; python_version > '3'", "environment markers not permitted"),
        ("virtualenv @ https://example.com/virtualenv.zip", "URLs not permitted"),
    ],
)
def test_check_version_problems(depspec: str, expected: str) -> None:
    assert check_version(depspec, LOCKED) == expected


@pytest.mark.parametrize(
    "depspec",
    [
        "virtualenv==20.25.0",
        "virtualenv==20.25",
        "  virtualenv == 20.25.0  ",
        "virtualenv (==20.25.0)",
        "virtualenv[socks]==20.25.0",
        "virtualenv>=20,==20.25.0",
        "pre-thing==2.0.0rc1",
    ],
)
def test_check_version_compliant(depspec: str) -> None:
    assert check_version(depspec, LOCKED) is None


@pytest.mark.parametrize("name", ["Friendly-Bard", "friendly.bard", "friendly_bard", "FrIeNdLy-._.-bArD"])
def test_lookup_uses_normalized_name(name: str) -> None:
    assert check_version(f"{name}==1.2.0", LOCKED) is None


def test_exact_version_hint_keeps_name_as_written() -> None:
    problem = check_version("Friendly_Bard>=1", LOCKED)
    assert problem == "must specify an exact version (expected: Friendly_Bard==1.2.0)"


def test_mismatch_reports_normalized_locked_version() -> None:
    assert check_version("pkg==1.0", {"pkg": "1.01"}) == "version mismatch (expected: 1.1)"


def test_prerelease_locked_version_checked_literally() -> None:
    assert check_version("pre-thing>=1.0", LOCKED) == (
        "must specify an exact version (expected: pre-thing==2.0.0rc1)"
    )


def test_check_specifier_accepts_parsed_input() -> None:
    parsed = ParsedSpecifier(name="virtualenv", constraint_text="==20.25.0")
    assert check_specifier(parsed, LOCKED) is None


def test_unparsable_locked_version_is_fatal() -> None:
    with pytest.raises(LockfileError, match="failed to parse version from poetry.lock"):
        check_version("broken==1.0", {"broken": "not a version"})


def test_unparsable_locked_version_of_unreferenced_package_is_ignored() -> None:
    locked = {"virtualenv": "20.25.0", "broken": "not a version"}
    assert check_version("virtualenv==20.25.0", locked) is None


def test_empty_spec_checked_before_lookup() -> None:
    assert check_version("does-not-exist", {}) == "empty version spec not permitted"


def test_locked_versions_normalizes_names_and_last_wins() -> None:
    packages = [
        LockedPackage(name="Friendly.Bard", version="1.0.0"),
        LockedPackage(name="friendly_bard", version="2.0.0"),
        LockedPackage(name="Other", version="3.0"),
    ]
    assert locked_versions_from(packages) == {"friendly-bard": "2.0.0", "other": "3.0"}


def test_check_hooks_formats_and_orders_problems() -> None:
    hooks = [
        HookDependencies(hook_id="flake8", dependencies=("b==2.0", "a==1.0", "c")),
        HookDependencies(hook_id="mypy", dependencies=("types-x==0.1", "a")),
    ]
    packages = [LockedPackage("a", "1.0"), LockedPackage("b", "2.1")]

    assert check_hooks(hooks, packages) == [
        "b==2.0: version mismatch (expected: 2.1)",
        "c: empty version spec not permitted",
        "types-x==0.1: not found in poetry.lock",
        "a: empty version spec not permitted",
    ]


def test_check_hooks_reports_original_text() -> None:
    hooks = [HookDependencies(hook_id="mypy", dependencies=("  a>=1  ",))]
    assert check_hooks(hooks, [LockedPackage("a", "1.0")]) == [
        "  a>=1  : must specify an exact version (expected: a==1.0)"
    ]


def test_check_hooks_empty_when_compliant() -> None:
    hooks = [HookDependencies(hook_id="mypy", dependencies=("a==1.0",)), HookDependencies(hook_id="black")]
    assert check_hooks(hooks, [LockedPackage("a", "1.0")]) == []


def test_arbitrary_equality_compares_lockfile_text_as_written() -> None:
    assert check_version("pkg===1.01", {"pkg": "1.01"}) == (
        "arbitrary equality (===) not permitted (expected: pkg==1.1)"
    )
    assert check_version("pkg===1.1", {"pkg": "1.01"}) == "version mismatch (expected: 1.1)"


def test_lockfile_error_names_package_as_written() -> None:
    with pytest.raises(LockfileError) as excinfo:
        check_version("Broken_Pkg==1.0", {"broken-pkg": "not a version"})
    assert str(excinfo.value) == "failed to parse version from poetry.lock: 'Broken_Pkg' 'not a version'"


def test_satisfied_check_requires_resolved_state() -> None:
    check = _Check(ParsedSpecifier(name="pkg", constraint_text="==1.0"), {"pkg": "1.0"})
    with pytest.raises(RuntimeError, match="must be resolved first"):
        check.require_satisfied()
