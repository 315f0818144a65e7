"""Minimal PEP 508 dependency specifier parser.

Only the subset that shows up in pre-commit ``additional_dependencies`` is
recognised: a name, optional extras and an optional PEP 440 version
constraint. Environment markers and URL specifiers are rejected outright
rather than parsed.
"""

from __future__ import annotations

import re

from packaging.utils import canonicalize_name

from sync_versions_poetry.types import ParsedSpecifier

REASON_MARKERS = "environment markers not permitted"
REASON_URL = "URLs not permitted"
REASON_INVALID = "invalid dependency specification"

_IDENTIFIER = r"[a-zA-Z0-9](?:[-_.]*[a-zA-Z0-9])*"
_EXTRAS = rf"\[\s*(?P<extras>{_IDENTIFIER}(?:\s*,\s*{_IDENTIFIER})*)?\s*\]"
_CLAUSE = r"\s*(?:<|<=|!=|==|>=|>|~=|===)\s*(?:[a-zA-Z0-9]|[-_.*+!])+\s*"
_CLAUSES = rf"{_CLAUSE}(?:\s*,{_CLAUSE})*"

_SPECIFIER_RE = re.compile(
    rf"^(?P<name>{_IDENTIFIER})\s*(?:{_EXTRAS})?\s*"
    rf"(?:\((?P<wrapped>{_CLAUSES})\)|(?P<bare>{_CLAUSES}))?$"
)
_EXTRAS_SPLIT = re.compile(r"\s*,\s*")
_MARKER_OR_URL = re.compile(r"[;@]")


class SpecifierRejected(ValueError):
    """Raised when a specifier falls outside the supported grammar."""

    reason: str

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def normalize_name(name: str) -> str:
    """Normalize a package name for lookup (``Friendly.Bard`` -> ``friendly-bard``)."""
    return str(canonicalize_name(name))


def parse_specifier(text: str) -> ParsedSpecifier:
    """Parse a dependency specifier, raising SpecifierRejected on failure."""
    depspec = text.strip()

    # URLs can contain ";" and markers can contain "@", so whichever comes first decides.
    delimiter = _MARKER_OR_URL.search(depspec)
    if delimiter is not None:
        if delimiter.group() == ";":
            raise SpecifierRejected(REASON_MARKERS)
        raise SpecifierRejected(REASON_URL)

    match = _SPECIFIER_RE.match(depspec)
    if match is None:
        raise SpecifierRejected(REASON_INVALID)

    raw_extras = match.group("extras")
    extras = frozenset(_EXTRAS_SPLIT.split(raw_extras)) if raw_extras else frozenset()
    constraint = match.group("wrapped") or match.group("bare") or ""

    return ParsedSpecifier(
        name=match.group("name"),
        extras=extras,
        constraint_text=constraint.strip(),
    )
