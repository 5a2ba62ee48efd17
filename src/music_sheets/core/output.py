"""
Unified output system using Loguru.
"""

import sys
from pathlib import Path

from loguru import logger


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink.

    Args:
        log_file: Path to log file
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Size at which the log file rotates
        backup_count: Number of rotated files to keep
        console_output: Also write records to stderr
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes
    )

    if console_output:
        logger.add(sys.stderr, level=level.upper(), format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")
