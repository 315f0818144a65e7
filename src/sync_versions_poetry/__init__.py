"""Check pre-commit additional_dependencies pins against poetry.lock."""

from sync_versions_poetry.matcher import LockfileError, check_hooks, check_specifier, check_version
from sync_versions_poetry.specifier import SpecifierRejected, normalize_name, parse_specifier

__version__ = "0.1.0"

__all__ = [
    "LockfileError",
    "SpecifierRejected",
    "__version__",
    "check_hooks",
    "check_specifier",
    "check_version",
    "normalize_name",
    "parse_specifier",
]
