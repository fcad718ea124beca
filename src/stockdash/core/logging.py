"""
Logging configuration for the stock dashboard pipeline.
Provides JSON logging for batch/CI runs and human-readable logging for development.
"""

import json
import sys
from typing import Any, Optional

from loguru import logger


def json_formatter(record: dict[str, Any]) -> str:
    """
    Format log records as single-line JSON.

    The serialized entry is stashed on the record and referenced from the
    returned template so loguru does not try to expand the JSON braces.
    """
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    # Add bound fields (symbol, stage, ...) if present
    for key, value in record["extra"].items():
        if key not in log_entry and key != "serialized":
            log_entry[key] = value

    record["extra"]["serialized"] = json.dumps(log_entry, default=str)
    return "{extra[serialized]}\n"


def human_formatter(record: dict[str, Any]) -> str:
    """
    Format log records for human readability in development.

    Records bound to a pipeline stage get a ``[stage]`` tag after the level.
    """
    stage = "<magenta>[{extra[stage]}]</magenta> " if "stage" in record["extra"] else ""
    return (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        + stage
        + "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
        "<level>{message}</level>\n"
    )


def configure_logging(
    level: str = "INFO",
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Force JSON output. If None, follow the LOG_FORMAT setting.
    """
    logger.remove()

    if json_output is None:
        from .config import settings
        json_output = settings.log_format.lower() == "json"

    if json_output:
        logger.add(
            sys.stderr,
            format=json_formatter,
            level=level,
            serialize=False,
        )
    else:
        logger.add(
            sys.stderr,
            format=human_formatter,
            level=level,
            colorize=True,
        )

    logger.debug(f"Logging configured: level={level}, json={json_output}")


def get_logger(name: Optional[str] = None):
    """
    Get a logger instance with optional context binding.

    Args:
        name: Optional logger name for context (e.g. a pipeline stage)

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(stage=name)
    return logger
