"""Unit tests for the apparent temperature and wind chill formulas."""

from __future__ import annotations

import logging
import math

import pytest

from services.derived import (
    DerivedMetricEngine,
    apparent_temperature,
    rothfusz_regression,
    steadman_estimate,
    wind_chill,
)
from services.formatting import format_decimal

BASE = "homeassistant/sensor/ambientWeather"


def test_apparent_temperature_below_threshold_is_passthrough() -> None:
    assert apparent_temperature(70.0, 50.0) == 70.0
    assert format_decimal(apparent_temperature(70.0, 50.0), 1) == "70.0"


def test_apparent_temperature_uses_steadman_when_average_is_mild() -> None:
    value = apparent_temperature(80.0, 40.0)

    assert value == steadman_estimate(80.0, 40.0)
    assert format_decimal(value, 1) == "79.6"


def test_apparent_temperature_rothfusz_without_adjustment() -> None:
    value = apparent_temperature(90.0, 50.0)

    assert value == rothfusz_regression(90.0, 50.0)
    assert value == pytest.approx(94.5969412, abs=1e-6)
    assert format_decimal(value, 1) == "94.6"


def test_apparent_temperature_low_humidity_adjustment() -> None:
    rothfusz = rothfusz_regression(85.0, 10.0)
    adjustment = ((13.0 - 10.0) / 4.0) * math.sqrt((17.0 - abs(85.0 - 95.0)) / 17.0)

    value = apparent_temperature(85.0, 10.0)

    assert adjustment > 0
    assert value == pytest.approx(rothfusz - adjustment)
    assert format_decimal(value, 1) == "81.4"


def test_apparent_temperature_high_humidity_adjustment() -> None:
    rothfusz = rothfusz_regression(82.0, 90.0)
    adjustment = ((90.0 - 85.0) / 10.0) * ((87.0 - 82.0) / 5.0)

    value = apparent_temperature(82.0, 90.0)

    assert adjustment > 0
    assert value == pytest.approx(rothfusz + adjustment)
    assert format_decimal(value, 1) == "92.0"


def test_low_humidity_band_ignored_outside_temperature_range() -> None:
    assert apparent_temperature(115.0, 10.0) == rothfusz_regression(115.0, 10.0)


def test_wind_chill_formula() -> None:
    assert wind_chill(30.0, 10.0) == pytest.approx(21.248, abs=1e-2)


@pytest.mark.parametrize(
    ("temp_f", "wind_mph"),
    [(50.1, 10.0), (30.0, 3.0), (30.0, 0.0)],
)
def test_wind_chill_undefined_outside_valid_range(temp_f: float, wind_mph: float) -> None:
    assert wind_chill(temp_f, wind_mph) is None


def test_wind_chill_defined_at_boundary_temperature() -> None:
    assert wind_chill(50.0, 3.1) is not None


def test_engine_publishes_apparent_temperature() -> None:
    engine = DerivedMetricEngine(BASE)

    samples = engine.derive({"tempf": "90", "humidity": "50"})

    assert [(s.topic, s.payload, s.retained) for s in samples] == [
        (f"{BASE}/feelsLike/state", "94.6", False),
    ]


@pytest.mark.parametrize(
    "reading",
    [
        {"tempf": "90"},
        {"humidity": "50"},
        {"tempf": "abc", "humidity": "50"},
        {"tempf": "90", "humidity": ""},
    ],
)
def test_engine_skips_apparent_temperature_without_inputs(reading: dict[str, str]) -> None:
    engine = DerivedMetricEngine(BASE)

    assert engine.derive(reading) == []


def test_engine_logs_but_does_not_publish_wind_chill(caplog: pytest.LogCaptureFixture) -> None:
    engine = DerivedMetricEngine(BASE)
    reading = {"tempf": "30", "windspeedmph": "10", "windchillf": "21.0"}

    with caplog.at_level(logging.DEBUG, logger="services.derived"):
        samples = engine.derive(reading)

    assert samples == []
    records = [r for r in caplog.records if r.getMessage() == "Computed wind chill"]
    assert len(records) == 1
    assert records[0].computed == "21.2"
    assert records[0].reported == "21.0"


def test_engine_requires_reported_wind_chill() -> None:
    engine = DerivedMetricEngine(BASE, publish_wind_chill=True)

    assert engine.wind_chill_sample({"tempf": "30", "windspeedmph": "10"}) is None


def test_engine_can_publish_wind_chill_when_enabled() -> None:
    engine = DerivedMetricEngine(BASE, publish_wind_chill=True)
    reading = {"tempf": "30", "windspeedmph": "10", "windchillf": "21.0"}

    samples = engine.derive(reading)

    assert [(s.topic, s.payload) for s in samples] == [
        (f"{BASE}/windChillComputed/state", "21.2"),
    ]
    assert [spec.topic_suffix for spec in engine.published_metrics] == [
        "feelsLike",
        "windChillComputed",
    ]
