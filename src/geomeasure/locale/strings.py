"""
Locale services: UI strings and the default unit system.

Strings live in the packaged `strings.yaml`, keyed by language then by a dotted
path (`infobox.measurement.title`). Only English ships today; other languages fall
back to it.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Any, Callable

import yaml

from geomeasure.config.settings import Settings
from geomeasure.domain.models import UnitSystem

DEFAULT_LANGUAGE = "en"

# (key, **params) -> display string
Lookup = Callable[..., str]


@lru_cache
def _load_strings() -> dict[str, Any]:
    text = resources.files("geomeasure.locale").joinpath("strings.yaml").read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Invalid YAML root object for strings.yaml; expected a mapping.")
    return data


def detect_default_unit_system(locale: str) -> UnitSystem:
    """US English gets imperial units, everyone else metric."""
    return UnitSystem.IMPERIAL if locale.strip().lower() == "en-us" else UnitSystem.METRIC


def resolve_unit_system(settings: Settings) -> UnitSystem:
    """Explicit `measurement.unit_system` wins; otherwise detect from `app.locale`."""
    if settings.measurement.unit_system:
        return UnitSystem(settings.measurement.unit_system)
    return detect_default_unit_system(settings.app.locale)


def lookup_string(key: str, language: str = DEFAULT_LANGUAGE, **params: Any) -> str:
    """Return the localized string for a dotted key, with `{param}` substitution.

    Unknown keys are returned as-is so a missing translation stays visible.
    """
    table = _load_strings()
    node: Any = table.get(language.split("-")[0].lower()) or table.get(DEFAULT_LANGUAGE, {})
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return key
        node = node[part]
    if not isinstance(node, str):
        return key
    return node.format(**params) if params else node


def string_lookup_for(locale: str) -> Lookup:
    """Bind `lookup_string` to a locale (e.g. `de-DE` → German, falling back to English)."""

    def lookup(key: str, **params: Any) -> str:
        return lookup_string(key, language=locale, **params)

    return lookup
