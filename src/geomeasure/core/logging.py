"""
Logging configuration.

The packaged `src/geomeasure/config/logging.yaml` sets up a console handler on the
root logger. Settings then adjust it at runtime:
- `app.log_level` (`GEOMEASURE_LOG_LEVEL`) applies to the `geomeasure` logger tree and
  the handlers, so `DEBUG` shows the panel's gate decisions without turning on debug
  output from FastAPI/Starlette
- `app.log_format` (`GEOMEASURE_LOG_FORMAT`) replaces the default line format
"""

from __future__ import annotations

import copy
import logging.config

from geomeasure.config.settings import get_logging_config, get_settings

PACKAGE_LOGGER = "geomeasure"


def configure_logging() -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    # The YAML mapping is cached; keep it pristine for later calls.
    config = copy.deepcopy(get_logging_config())

    level = settings.app.log_level.upper()
    config.setdefault("loggers", {}).setdefault(PACKAGE_LOGGER, {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    if settings.app.log_format:
        for formatter in config.get("formatters", {}).values():
            if isinstance(formatter, dict):
                formatter["format"] = settings.app.log_format

    logging.config.dictConfig(config)
