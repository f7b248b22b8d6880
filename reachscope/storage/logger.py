"""
Logging configuration using loguru.
"""

from pathlib import Path
from loguru import logger
import sys


def setup_logging(output_dir: Path, verbose: bool = False) -> logger:
    """
    Setup application logging.

    Args:
        output_dir: Directory for log files
        verbose: Enable verbose logging

    Returns:
        Configured logger instance
    """
    logger.remove()

    # Console handler
    log_level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )

    # File handler - main log
    log_file = output_dir / "reachscope.log"
    logger.add(
        log_file,
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
    )

    # File handler - structured JSON lines
    json_log = output_dir / "reachscope.jsonl"
    logger.add(
        json_log,
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        serialize=True,
    )

    logger.info("Logging initialized")
    logger.debug(f"Log files: {log_file}, {json_log}")

    return logger


def setup_console_logging(verbose: bool = False) -> logger:
    """Console-only logging for one-off commands that write no run directory."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
    )
    return logger
