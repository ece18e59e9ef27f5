"""Shared utilities for macutils CLI modules."""
from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from macutils.core.config import MacUtilsConfig, get_config

# Default config search paths (ordered by proximity to current run)
CONFIG_PATHS = [
    "./macutils.yml",
    str(Path.home() / ".config" / "macutils" / "macutils.yml"),
]


def find_config(config_path: Optional[str] = None) -> Optional[str]:
    """Locate the active macutils configuration file, if any."""
    if config_path:
        return config_path

    if env_config := os.environ.get("MU_CONFIG"):
        return env_config

    for path in CONFIG_PATHS:
        if Path(path).exists():
            return path

    return None


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get("MU_MOCK") == "1"


def load_config(
    config_path: Optional[str] = None,
    model: Optional[str] = None,
    mock: bool = False,
) -> MacUtilsConfig:
    """Resolve configuration from file, environment and command-line overrides."""
    path = find_config(config_path)
    config = MacUtilsConfig.from_file(Path(path)) if path else get_config()

    overrides = {}
    if model:
        overrides["model_identifier"] = model
    if mock or is_mock():
        overrides["mock"] = True
    return replace(config, **overrides) if overrides else config


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands."""
    from macutils.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {e}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code)


def print_warning(console: Console, message: str, prefix: str = "⚠") -> None:
    console.print(f"[yellow]{prefix}[/yellow] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    console.print(f"[cyan]{prefix}[/cyan] {message}")
