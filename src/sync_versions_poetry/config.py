"""Tool configuration loader.

Settings live in the project's pyproject.toml::

    [tool.sync-versions-poetry]
    hooks = ["flake8", "mypy"]
    config-file = ".pre-commit-config.yaml"
    lockfile = "poetry.lock"

Every key is optional. Paths are relative to the project root.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from sync_versions_poetry.types import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_HOOK_IDS,
    DEFAULT_LOCKFILE_FILENAME,
)

TOOL_TABLE = "sync-versions-poetry"


class ConfigError(RuntimeError):
    """Raised when the [tool.sync-versions-poetry] table is malformed."""


@dataclass(frozen=True)
class ToolConfig:
    """Resolved settings for one run."""

    hooks: tuple[str, ...] = DEFAULT_HOOK_IDS
    config_file: Path = field(default_factory=lambda: Path(DEFAULT_CONFIG_FILENAME))
    lockfile: Path = field(default_factory=lambda: Path(DEFAULT_LOCKFILE_FILENAME))

    @classmethod
    def from_dict(cls, data: dict, project_root: Path) -> "ToolConfig":
        """Parse and validate a [tool.sync-versions-poetry] table."""
        config = cls(
            config_file=project_root / DEFAULT_CONFIG_FILENAME,
            lockfile=project_root / DEFAULT_LOCKFILE_FILENAME,
        )

        if "hooks" in data:
            hooks = data["hooks"]
            if not isinstance(hooks, list) or not all(isinstance(h, str) for h in hooks):
                raise ValueError("'hooks' must be a list of strings")
            config = replace(config, hooks=tuple(hooks))

        for key, attr in (("config-file", "config_file"), ("lockfile", "lockfile")):
            if key in data:
                value = data[key]
                if not isinstance(value, str):
                    raise ValueError(f"'{key}' must be a string")
                config = replace(config, **{attr: project_root / value})

        return config

    def with_overrides(
        self,
        *,
        hooks: list[str] | None = None,
        config_file: Path | None = None,
        lockfile: Path | None = None,
    ) -> "ToolConfig":
        """Apply command-line overrides; empty or None values keep the current setting."""
        return replace(
            self,
            hooks=tuple(hooks) if hooks else self.hooks,
            config_file=config_file or self.config_file,
            lockfile=lockfile or self.lockfile,
        )


def load_tool_config(project_root: Path) -> ToolConfig:
    """Load settings from pyproject.toml under ``project_root``.

    Args:
        project_root: Directory holding pyproject.toml and the checked files

    Returns:
        ToolConfig, with defaults for anything not configured

    Raises:
        ConfigError: If pyproject.toml is malformed or the table is invalid
    """
    pyproject = project_root / "pyproject.toml"
    if not pyproject.exists():
        return ToolConfig.from_dict({}, project_root)

    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Malformed TOML config at {pyproject}: {e}") from e

    tool = data.get("tool", {})
    table = tool.get(TOOL_TABLE, {}) if isinstance(tool, dict) else {}
    try:
        if not isinstance(table, dict):
            raise TypeError(f"[tool.{TOOL_TABLE}] must be a table")
        return ToolConfig.from_dict(table, project_root)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config structure in {pyproject}: {e}") from e
