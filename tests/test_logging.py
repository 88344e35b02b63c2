import logging

import pytest

from geomeasure.config.settings import get_logging_config, get_settings
from geomeasure.core.logging import configure_logging

CUSTOM_FORMAT = "%(levelname)s|%(name)s|%(message)s"


@pytest.fixture
def restore_logging(monkeypatch):
    yield
    monkeypatch.delenv("GEOMEASURE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("GEOMEASURE_LOG_FORMAT", raising=False)
    get_settings.cache_clear()
    configure_logging()


def _console_handler():
    return next(h for h in logging.getLogger().handlers if h.name == "console")


def test_log_level_applies_to_package_loggers_only(monkeypatch, fresh_settings, restore_logging):
    monkeypatch.setenv("GEOMEASURE_LOG_LEVEL", "debug")
    monkeypatch.setenv("GEOMEASURE_LOG_FORMAT", CUSTOM_FORMAT)
    fresh_settings()

    configure_logging()

    assert logging.getLogger("geomeasure").level == logging.DEBUG
    assert logging.getLogger("geomeasure.panel.measurement").getEffectiveLevel() == logging.DEBUG
    # Third-party loggers stay at the root level from logging.yaml.
    assert logging.getLogger().level == logging.INFO
    handler = _console_handler()
    assert handler.level == logging.DEBUG
    assert handler.formatter._fmt == CUSTOM_FORMAT


def test_packaged_logging_config_is_not_mutated(monkeypatch, fresh_settings, restore_logging):
    monkeypatch.setenv("GEOMEASURE_LOG_LEVEL", "WARNING")
    fresh_settings()

    configure_logging()

    config = get_logging_config()
    assert config["handlers"]["console"]["level"] == "INFO"
    assert config["loggers"]["geomeasure"]["level"] == "NOTSET"
    assert _console_handler().level == logging.WARNING
