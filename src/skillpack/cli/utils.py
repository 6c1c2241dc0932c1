"""Utility functions for CLI module."""

import logging
import os
import platform
import sys
from pathlib import Path

from rich.console import Console

from skillpack.config.constants import ENV_LOG_LEVEL
from skillpack.config.schema import SkillpackSettings

logger = logging.getLogger(__name__)


def get_console() -> Console:
    """Create Rich console with proper encoding for Windows.

    On Windows in non-interactive mode (subprocess, pipe, etc.), the default
    encoding is often CP1252 which cannot print the check marks used in
    command output. UTF-8 is forced in that case.

    Returns:
        Console: Configured Rich console instance
    """
    if platform.system() == "Windows" and not sys.stdout.isatty():
        import locale

        encoding = locale.getpreferredencoding() or ""
        if "utf" not in encoding.lower():
            os.environ["PYTHONIOENCODING"] = "utf-8"
            return Console(force_terminal=True, legacy_windows=False)
    return Console()


def setup_logging(settings: SkillpackSettings) -> Path:
    """Send log records to `<data_dir>/logs/skillpack.log`.

    The level comes from SKILLPACK_LOG_LEVEL, else from settings.

    Args:
        settings: Loaded settings

    Returns:
        Path to the log file
    """
    log_file = settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)

    log_level = (os.getenv(ENV_LOG_LEVEL) or settings.agent.log_level).upper()
    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        filename=str(log_file),
        filemode="a",
        force=True,
    )
    logger.debug(f"Logging to {log_file} at {log_level}")
    return log_file
