"""
GeoMeasure CLI entrypoint.

This CLI is intended for quick local checks of measurements without a map UI.
It delegates all measurement logic to `geomeasure.panel.measurement.MeasurementPanel`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from geomeasure.config.settings import get_settings
from geomeasure.core.logging import configure_logging
from geomeasure.domain.models import UnitSystem
from geomeasure.formatting.display import format_area, format_length
from geomeasure.locale.strings import resolve_unit_system
from geomeasure.panel.measurement import MeasurementPanel
from geomeasure.store.loader import load_store


def _unit_system(args: argparse.Namespace) -> UnitSystem:
    if args.unit_system:
        return UnitSystem(args.unit_system)
    return resolve_unit_system(get_settings())


def _cmd_measure(args: argparse.Namespace) -> int:
    """Handle the `measure` subcommand."""
    settings = get_settings()
    store = load_store(args.store or settings.store.path, area_keys=settings.store.area_keys)
    selection = list(args.select or [])

    panel = MeasurementPanel.from_settings(
        store,
        lambda: selection,
        settings,
        unit_system=_unit_system(args),
    )
    result = panel.evaluate()
    if result is None:
        return 0

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(result.heading)
    for item in result.items:
        print(f"  - {item}")
    if result.toggle_label:
        print(f"  [{result.toggle_label}]")
    return 0


def _cmd_format_length(args: argparse.Namespace) -> int:
    print(format_length(float(args.meters), _unit_system(args)))
    return 0


def _cmd_format_area(args: argparse.Namespace) -> int:
    print(format_area(float(args.sq_meters), _unit_system(args)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the GeoMeasure CLI."""
    parser = argparse.ArgumentParser(prog="geomeasure")
    sub = parser.add_subparsers(dest="command", required=True)

    units = argparse.ArgumentParser(add_help=False)
    units.add_argument(
        "--unit-system",
        choices=[u.value for u in UnitSystem],
        default=None,
        help="Defaults to measurement.unit_system, else detected from app.locale.",
    )

    m = sub.add_parser("measure", parents=[units], help="Measure selected features from a feature file.")
    m.add_argument("--store", type=str, default=None, help="Feature JSON file (default: store.path setting).")
    m.add_argument("--select", action="append", default=[], help="Repeatable. Entity id to select.")
    m.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    m.set_defaults(func=_cmd_measure)

    fl = sub.add_parser("format-length", parents=[units], help="Format a length given in meters.")
    fl.add_argument("meters", type=float)
    fl.set_defaults(func=_cmd_format_length)

    fa = sub.add_parser("format-area", parents=[units], help="Format an area given in square meters.")
    fa.add_argument("sq_meters", type=float)
    fa.set_defaults(func=_cmd_format_area)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m geomeasure.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
