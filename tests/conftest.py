"""Pytest configuration and fixtures for sync-versions-poetry tests."""
from pathlib import Path

import pytest

PRE_COMMIT_CONFIG = """\
repos:
  - repo: https://github.com/pre-commit/pre-commit-hooks
    rev: v4.5.0
    hooks:
      - id: trailing-whitespace
      - id: check-yaml
        args: [--unsafe]
  - repo: https://github.com/pycqa/flake8
    rev: 5.0.4
    hooks:
      - id: flake8
        additional_dependencies:
          - flake8-docstrings==1.7.0
          - flake8-typing-imports==1.14.0
  - repo: https://github.com/pre-commit/mirrors-mypy
    rev: v0.991
    hooks:
      - id: mypy
        args: []
        additional_dependencies:
          - types-httplib2==0.22.0.1
"""

POETRY_LOCK = """\
[[package]]
name = "flake8-docstrings"
version = "1.7.0"
description = "Extension for flake8 which uses pydocstyle to check docstrings"
optional = false
python-versions = ">=3.7"

[[package]]
name = "flake8-typing-imports"
version = "1.14.0"
optional = false
python-versions = ">=3.7"

[[package]]
name = "types-httplib2"
version = "0.22.0.1"
optional = false
python-versions = "*"

[metadata]
lock-version = "2.0"
python-versions = "^3.10"
content-hash = "0000"
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project root holding a matching pre-commit config and poetry.lock."""
    (tmp_path / ".pre-commit-config.yaml").write_text(PRE_COMMIT_CONFIG, encoding="utf-8")
    (tmp_path / "poetry.lock").write_text(POETRY_LOCK, encoding="utf-8")
    return tmp_path

