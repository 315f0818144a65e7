"""sync-versions-poetry CLI."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from sync_versions_poetry import __version__
from sync_versions_poetry.config import ConfigError, load_tool_config
from sync_versions_poetry.documents import (
    DocumentError,
    check_versions,
    load_poetry_lock,
    load_pre_commit_config,
)
from sync_versions_poetry.matcher import LockfileError

EXIT_PROBLEMS = 1
EXIT_ERROR = 2

cli = typer.Typer(
    name="sync-versions-poetry",
    help="Check that pre-commit additional_dependencies match poetry.lock.",
    add_completion=False,
)
err_console = Console(stderr=True)


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


@cli.command()
def check(
    hooks: list[str] | None = typer.Argument(
        None,
        help="Hook ids to check (default: from pyproject.toml, else black flake8 isort mypy)",
        show_default=False,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to .pre-commit-config.yaml",
    ),
    lockfile: Path | None = typer.Option(
        None,
        "--lockfile",
        "-l",
        help="Path to poetry.lock",
    ),
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        help="Directory holding pyproject.toml and the default input files",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """
    Check pinned additional_dependencies of pre-commit hooks against poetry.lock.

    Exit codes:
      0 - All pins match the lockfile
      1 - One or more problems were found (one per line on stdout)
      2 - An input file is missing or invalid
    """
    _ = version
    _configure_logging(verbose)

    try:
        settings = load_tool_config(project_root).with_overrides(
            hooks=hooks,
            config_file=config_file,
            lockfile=lockfile,
        )
        config = load_pre_commit_config(settings.config_file)
        locked = load_poetry_lock(settings.lockfile)
        problems = check_versions(config, locked, settings.hooks)
    except (ConfigError, DocumentError, LockfileError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False, soft_wrap=True)
        raise typer.Exit(EXIT_ERROR) from e

    if problems:
        for problem in problems:
            typer.echo(problem)
        raise typer.Exit(EXIT_PROBLEMS)

    if verbose:
        err_console.print(
            f"[green]✓[/green] {', '.join(settings.hooks)}: all pins match {escape(str(settings.lockfile))}",
            highlight=False,
            soft_wrap=True,
        )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
