# src/geomeasure/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/geomeasure/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEOMEASURE_UNIT_SYSTEM`, `GEOMEASURE_LOCALE`)
- an external YAML file via `GEOMEASURE_CONFIG_PATH`

Design rule:
- Display defaults (locale, unit system, area tag keys) live in YAML, not in the panel code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from geomeasure.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `geomeasure.config`."""
    text = resources.files("geomeasure.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "GeoMeasure"
    log_level: str = "INFO"
    # None keeps the format from logging.yaml.
    log_format: str | None = None
    locale: str = "en-US"


class MeasurementSettings(BaseModel):
    # None means "derive from app.locale".
    unit_system: Literal["metric", "imperial"] | None = None
    signal_namespace: str = "info-measurement"


class StoreSettings(BaseModel):
    path: str = "data/features.json"
    area_keys: list[str] = Field(
        default_factory=lambda: ["building", "landuse", "natural", "leisure", "amenity", "area:highway"]
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    measurement: MeasurementSettings = Field(default_factory=MeasurementSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEOMEASURE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    log_format = os.getenv("GEOMEASURE_LOG_FORMAT")
    if log_format:
        data.setdefault("app", {})["log_format"] = log_format

    locale = os.getenv("GEOMEASURE_LOCALE")
    if locale:
        data.setdefault("app", {})["locale"] = locale

    unit_system = os.getenv("GEOMEASURE_UNIT_SYSTEM")
    if unit_system:
        data.setdefault("measurement", {})["unit_system"] = unit_system.strip().lower()

    store_path = os.getenv("GEOMEASURE_STORE_PATH")
    if store_path:
        data.setdefault("store", {})["path"] = store_path

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEOMEASURE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
