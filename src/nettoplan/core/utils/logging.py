"""
Logging configuration using loguru.

Calculators only emit DEBUG records (seeded returns, skipped analyses). The
``nettoplan`` namespace is disabled on import so a host application sees
nothing until it opts in with ``setup_logging``.
"""

import sys

from loguru import logger

CONSOLE_FORMAT = "<level>[{level.name}]</level> <cyan>{name}</cyan> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    only_nettoplan: bool = False,
) -> list[int]:
    """
    Replace all loguru sinks with a stderr sink and an optional rotating file.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None, only logs to stderr.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
        only_nettoplan: Drop records that do not come from this package.

    Returns:
        The loguru handler ids, for callers that want to remove them later.
    """
    level = level.upper()
    record_filter = "nettoplan" if only_nettoplan else None

    logger.remove()
    logger.enable("nettoplan")
    handler_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, filter=record_filter)]

    if log_file:
        handler_ids.append(
            logger.add(
                log_file,
                level=level,
                format=FILE_FORMAT,
                filter=record_filter,
                rotation=rotation,
                retention=retention,
                encoding="utf-8",
            )
        )
    return handler_ids


def setup_logging_from_config(config) -> list[int]:
    """Configure sinks from the validated ``logging`` section of a Config."""
    settings = config.validated().logging
    return setup_logging(level=settings.level, log_file=settings.file)
