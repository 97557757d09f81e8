"""
Command line entry point.
Allows the package to be executed with: python -m toki_typer
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print as rprint

from toki_typer.app import TypingApp
from toki_typer.config import Settings, load_settings
from toki_typer.errors import ConfigError
from toki_typer.logging_config import capture_startup_logs, setup_logging

logger = logging.getLogger(__name__)

cli = typer.Typer(help="Type toki pona words against the clock.", add_completion=False)


def apply_overrides(
    settings: Settings,
    dataset: Optional[Path] = None,
    count: Optional[int] = None,
    categories: Optional[List[str]] = None,
    include_deprecated: Optional[bool] = None,
    seed: Optional[int] = None,
    theme: Optional[str] = None,
) -> Settings:
    """Apply command line flags on top of the config file, then validate."""
    if dataset is not None:
        settings.dataset = str(dataset)
    if count is not None:
        settings.max_words = count
    if categories:
        settings.categories = list(categories)
    if include_deprecated is not None:
        settings.include_deprecated = include_deprecated
    if seed is not None:
        settings.seed = seed
    if theme is not None:
        settings.theme = theme
    settings.validate()
    return settings


@cli.command()
def main(
    dataset: Optional[Path] = typer.Option(
        None, "--dataset", "-d", help="TOML word list (.toml or .toml.bz2)."
    ),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of words to type."),
    category: Optional[List[str]] = typer.Option(
        None, "--category", "-c", help="Usage category to draw from (repeatable)."
    ),
    include_deprecated: Optional[bool] = typer.Option(
        None, "--include-deprecated/--no-deprecated", help="Also use deprecated words."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for word order."),
    theme: Optional[str] = typer.Option(None, "--theme", help="Color theme."),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (JSON)."),
) -> None:
    """Run one typing session."""
    capture_startup_logs()
    settings = load_settings(config)
    try:
        apply_overrides(settings, dataset, count, category, include_deprecated, seed, theme)
    except ConfigError as exc:
        rprint(f"[red]Invalid option:[/red] {exc}")
        raise typer.Exit(code=2)

    setup_logging(settings)
    app = TypingApp(settings)
    session = app.run()
    if session is not None:
        logger.info("Exited with session %s after %.2fs", session.state.value, session.total_elapsed)
    raise typer.Exit(code=app.return_code or 0)


if __name__ == "__main__":
    cli()
