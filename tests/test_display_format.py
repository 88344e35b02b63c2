import pytest

from geomeasure.domain.models import UnitSystem
from geomeasure.formatting.display import (
    display_precision,
    format_area,
    format_coordinates,
    format_length,
    to_fixed,
)

METRIC = UnitSystem.METRIC
IMPERIAL = UnitSystem.IMPERIAL


@pytest.mark.parametrize(
    ("value", "digits", "expected"),
    [
        (1.0, 2, "1.00"),
        (0.125, 2, "0.13"),  # exact binary tie rounds away from zero, like JS toFixed
        (-0.125, 2, "-0.13"),
        (2.5, 0, "3"),
        (1.005, 2, "1.00"),  # 1.005 is stored slightly below the tie
        (-0.0, 2, "0.00"),
        (12364.4, 0, "12364"),
    ],
)
def test_to_fixed_matches_javascript_rounding(value, digits, expected):
    assert to_fixed(value, digits) == expected


def test_display_precision_thresholds_are_strict():
    assert display_precision(1000.5) == 0
    assert display_precision(1000) == 1
    assert display_precision(100.5) == 1
    assert display_precision(100) == 2
    assert display_precision(0.5) == 2


def test_format_length_metric_switches_to_km_at_1000_m():
    assert format_length(999, METRIC) == "999.0 m"
    assert format_length(1000, METRIC) == "1.00 km"
    assert format_length(50, METRIC) == "50.00 m"
    assert format_length(123456, METRIC) == "123.5 km"
    assert format_length(2_500_000, METRIC) == "2500 km"


def test_format_length_imperial_switches_to_miles_at_5280_ft():
    assert format_length(100, IMPERIAL) == "328.1 ft"
    assert format_length(10, IMPERIAL) == "32.81 ft"
    # 1609.34 m is a hair under 5280 ft, so it still reads in feet.
    assert format_length(1609.34, IMPERIAL) == "5280 ft"
    assert format_length(1609.35, IMPERIAL) == "1.00 mi"
    assert format_length(16093.4, IMPERIAL) == "10.00 mi"


def test_format_length_zero():
    assert format_length(0, METRIC) == "0.00 m"
    assert format_length(0, IMPERIAL) == "0.00 ft"


def test_format_area_metric_primary_unit_uses_inclusive_threshold():
    assert format_area(249999, METRIC) == "249999 m² (25.00 ha)"
    assert format_area(250000, METRIC) == "0.25 km² (25.00 ha)"


def test_format_area_metric_hectare_annex_bounds_are_exclusive():
    assert format_area(1000, METRIC) == "1000.0 m²"
    assert format_area(1000.4, METRIC) == "1000 m² (0.10 ha)"
    assert format_area(1_000_000, METRIC) == "1.00 km² (100.00 ha)"
    assert format_area(9_999_999, METRIC) == "10.00 km² (1000.0 ha)"
    assert format_area(10_000_000, METRIC) == "10.00 km²"


def test_format_area_small_metric_has_no_annex():
    assert format_area(12.5, METRIC) == "12.50 m²"


def test_format_area_imperial_units():
    # 1 m² is 10.76 ft², far below the acre annex.
    assert format_area(1, IMPERIAL) == "10.76 ft²"
    # 1 acre (43560 ft²) gets an acre annex.
    assert format_area(43560 / 10.7639111056, IMPERIAL) == "43560 ft² (1.00 ac)"
    # A square mile is 640 ac, still inside the annex range.
    assert format_area(27878400 / 10.7639111056, IMPERIAL) == "1.00 mi² (640.0 ac)"


def test_format_area_imperial_annex_range():
    assert format_area(400, IMPERIAL) == "4306 ft²"
    assert format_area(405, IMPERIAL) == "4359 ft² (0.10 ac)"
    assert format_area(4_000_000, IMPERIAL) == "1.54 mi² (988.4 ac)"
    assert format_area(4_100_000, IMPERIAL) == "1.58 mi²"


def test_format_coordinates_uses_five_decimals():
    assert format_coordinates((12.5, -7.25)) == "12.50000, -7.25000"
    assert format_coordinates((0.1234567, 51.0)) == "0.12346, 51.00000"
