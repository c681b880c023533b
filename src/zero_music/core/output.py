"""
Logging setup using Loguru.
Configures a rotating file sink plus optional console output.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "{extra[request_id]} | {name}:{line} | {message}"
)


def get_log_file_path() -> Path:
    """Get the path to the default log file."""
    return get_data_dir() / "zero-music.log"


def setup_loguru(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure loguru sinks from logging configuration.

    Args:
        config: Logging configuration (defaults apply when omitted)
    """
    config = config or LoggingConfig()
    log_file = Path(config.log_file) if config.log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()
    # Records logged outside a request carry a placeholder id
    logger.configure(extra={"request_id": "-"})

    logger.add(
        log_file,
        rotation=f"{config.max_file_size_mb} MB",
        retention=config.backup_count,
        level=config.level,
        format=LOG_FORMAT,
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if config.console_output:
        logger.add(sys.stderr, level=config.level, format=LOG_FORMAT)

    logger.info(f"Loguru initialized: {log_file} (level={config.level})")
