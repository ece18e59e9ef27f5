"""Logging for macutils: Rich console output plus an optional log file.

Every module logger lives under the ``macutils`` package logger, which owns
the handlers. Console output goes to stderr so that ``mu scan --format json``
keeps stdout clean.
"""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

PACKAGE_LOGGER = "macutils"

LOG_DIR = Path.home() / "Library" / "Logs" / "macutils"
LOG_FILE = LOG_DIR / "macutils.log"
FALLBACK_LOG_FILE = Path("/tmp/macutils.log")

_file_logging_configured = False


def _package_logger() -> logging.Logger:
    root_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
    return root_logger


def setup_file_logging(log_file: str = None, verbose: bool = False):
    """Write macutils logs to a file as well as the console.

    Args:
        log_file: Path to log file (defaults to ~/Library/Logs/macutils/macutils.log)
        verbose: Log at DEBUG instead of INFO, on the console too

    Note:
        Only the first call takes effect. Falls back to /tmp/macutils.log
        when the log directory cannot be created.
    """
    global _file_logging_configured

    if _file_logging_configured:
        return

    target_log_file = Path(log_file) if log_file else LOG_FILE
    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = FALLBACK_LOG_FILE

    level = logging.DEBUG if verbose else logging.INFO
    root_logger = _package_logger()

    file_handler = logging.FileHandler(target_log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root_logger.addHandler(file_handler)
    root_logger.setLevel(level)

    _file_logging_configured = True
    root_logger.info(f"macutils logging initialized: {target_log_file}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a macutils module (typically ``__name__``).

    Records propagate to the package logger's Rich handler; file output
    needs setup_file_logging().
    """
    _package_logger()
    return logging.getLogger(name)
