"""
SafePath - Logging Configuration
One stdout handler for the engine, with separate levels for the provider
and aggregation layers.

    LOG_LEVEL=INFO INGESTION_LOG_LEVEL=DEBUG uvicorn safepath.api.main:app

logs every provider request and skipped item while keeping the cascade at
INFO.
"""

import logging
import sys
from typing import Dict, Optional

from safepath.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

INGESTION_LOGGER = "safepath.ingestion"
AGGREGATION_LOGGER = "safepath.aggregation"

# HTTP client loggers; their per-request lines only matter when debugging providers
HTTP_LOGGERS = ("httpx", "httpcore")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name}")
    return level


def setup_logging(
    level: Optional[str] = None,
    ingestion_level: Optional[str] = None,
    aggregation_level: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the engine loggers.

    Args:
        level: Level for the "safepath" logger (default LOG_LEVEL)
        ingestion_level: Override for provider clients (default INGESTION_LOG_LEVEL)
        aggregation_level: Override for the cascade (default AGGREGATION_LOG_LEVEL)

    Returns:
        The "safepath" logger

    Raises:
        ValueError: A level name is not a logging level
    """
    root_level = _level(level or settings.log_level)

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logger = logging.getLogger("safepath")
    logger.setLevel(root_level)

    overrides: Dict[str, Optional[str]] = {
        INGESTION_LOGGER: ingestion_level or settings.ingestion_log_level,
        AGGREGATION_LOGGER: aggregation_level or settings.aggregation_log_level,
    }
    for name, override in overrides.items():
        # NOTSET defers to the "safepath" level
        logging.getLogger(name).setLevel(_level(override) if override else logging.NOTSET)

    effective = logging.getLogger(INGESTION_LOGGER).getEffectiveLevel()
    http_level = logging.DEBUG if effective <= logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger
