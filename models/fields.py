"""Static description of every field a station report may carry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

INHG_TO_HPA = 33.86


class ValueKind(str, Enum):
    integer = "integer"
    decimal = "decimal"


@dataclass(frozen=True, slots=True)
class SensorFieldSpec:
    """How one station field is parsed, formatted, published and advertised."""

    source_key: str
    topic_suffix: str
    kind: ValueKind
    name: str
    unique_id: str
    unit_of_measurement: Optional[str]
    precision: int = 0
    scale: float = 1.0
    device_class: Optional[str] = None
    state_class: str = "measurement"


@dataclass(frozen=True, slots=True)
class DerivedMetricSpec:
    """Discovery and topic metadata for a metric computed from other fields."""

    topic_suffix: str
    name: str
    unique_id: str
    unit_of_measurement: str
    precision: int = 1
    device_class: Optional[str] = "temperature"
    state_class: str = "measurement"


def _decimal(
    source_key: str,
    topic_suffix: str,
    precision: int,
    name: str,
    unique_id: str,
    unit: Optional[str],
    device_class: Optional[str] = None,
    state_class: str = "measurement",
    scale: float = 1.0,
) -> SensorFieldSpec:
    return SensorFieldSpec(
        source_key=source_key,
        topic_suffix=topic_suffix,
        kind=ValueKind.decimal,
        precision=precision,
        scale=scale,
        name=name,
        unique_id=unique_id,
        unit_of_measurement=unit,
        device_class=device_class,
        state_class=state_class,
    )


def _integer(
    source_key: str,
    topic_suffix: str,
    name: str,
    unique_id: str,
    unit: Optional[str],
    device_class: Optional[str] = None,
) -> SensorFieldSpec:
    return SensorFieldSpec(
        source_key=source_key,
        topic_suffix=topic_suffix,
        kind=ValueKind.integer,
        name=name,
        unique_id=unique_id,
        unit_of_measurement=unit,
        device_class=device_class,
    )


INDOOR_TEMPERATURE_KEY = "indoortempf"

# Order matters: a report's state messages are published in this order.
_STATION_FIELDS: Tuple[SensorFieldSpec, ...] = (
    _decimal("tempf", "temperature", 1, "Outside Temperature", "ambw_mqtt_outside_temp", "°F", "temperature"),
    _integer("humidity", "humidity", "Outside Humidity", "ambw_mqtt_outside_hum", "%", "humidity"),
    _decimal("dewptf", "dewPoint", 1, "Outside Dew Point", "ambw_mqtt_outside_dew", "°F", "temperature"),
    _decimal("windchillf", "windChill", 1, "Wind Chill", "ambw_mqtt_wind_chill", "°F", "temperature"),
    _integer("winddir", "windDir", "Wind Dir", "ambw_mqtt_wind_dir", "°"),
    _decimal("windspeedmph", "windSpeed", 2, "Wind Speed", "ambw_mqtt_wind_speed", "mph", "wind_speed"),
    _decimal("windgustmph", "windGust", 2, "Wind Gust", "ambw_mqtt_wind_gust", "mph", "wind_speed"),
    _decimal(
        "rainin", "rainHourly", 3, "Hourly Rain Rate", "ambw_mqtt_hourly_rain", "in/h",
        "precipitation_intensity",
    ),
    _decimal(
        "dailyrainin", "rainDaily", 3, "Daily Rain", "ambw_mqtt_daily_rain", "in",
        "precipitation", "total_increasing",
    ),
    _decimal(
        "weeklyrainin", "rainWeekly", 3, "Weekly Rain", "ambw_mqtt_weekly_rain", "in",
        "precipitation", "total_increasing",
    ),
    # unique_id spelling is already registered by existing hubs; do not correct it.
    _decimal(
        "monthlyrainin", "rainMonthly", 3, "Monthly Rain", "ambw_mqtt_monthyl_rain", "in",
        "precipitation", "total_increasing",
    ),
    _decimal(
        "totalrainin", "rainLifetime", 3, "Lifetime Rain", "ambw_mqtt_lifetime_rain", "in",
        "precipitation", "total_increasing",
    ),
    _decimal("solarradiation", "solarRadiation", 1, "Solar Radiation", "ambw_mqtt_solar_rad", "W/m²", "irradiance"),
    _integer("UV", "UV", "UV Index", "ambw_mqtt_uv", "Index"),
    _decimal(
        INDOOR_TEMPERATURE_KEY, "indoorTemperature", 1, "Indoor Temperature", "ambw_mqtt_indoor_temp", "°F",
        "temperature",
    ),
    _integer("indoorhumidity", "indoorHumidity", "Indoor Humidity", "ambw_mqtt_indoor_hum", "%", "humidity"),
    _decimal(
        "absbaromin", "pressure", 1, "Outside Pressure", "ambw_mqtt_abs_press", "hPa",
        "atmospheric_pressure", scale=INHG_TO_HPA,
    ),
    _decimal(
        "baromin", "relativePressure", 1, "Outside Relative Pressure", "ambw_mqtt_rel_press", "hPa",
        "atmospheric_pressure", scale=INHG_TO_HPA,
    ),
)

APPARENT_TEMPERATURE = DerivedMetricSpec(
    topic_suffix="feelsLike",
    name="Outside Feels Like",
    unique_id="ambw_mqtt_outside_feels",
    unit_of_measurement="°F",
)

COMPUTED_WIND_CHILL = DerivedMetricSpec(
    topic_suffix="windChillComputed",
    name="Computed Wind Chill",
    unique_id="ambw_mqtt_wind_chill_computed",
    unit_of_measurement="°F",
)


def validate_field_table(fields: Iterable[SensorFieldSpec]) -> Tuple[SensorFieldSpec, ...]:
    """Return ``fields`` as a tuple, rejecting duplicate keys or topic suffixes."""
    table = tuple(fields)
    seen_keys: set[str] = set()
    seen_suffixes: set[str] = set()
    for spec in table:
        if spec.source_key in seen_keys:
            raise ValueError(f"Duplicate source key {spec.source_key!r} in field table.")
        if spec.topic_suffix in seen_suffixes:
            raise ValueError(f"Duplicate topic suffix {spec.topic_suffix!r} in field table.")
        if spec.kind is ValueKind.decimal and spec.precision < 0:
            raise ValueError(f"Negative precision for field {spec.source_key!r}.")
        seen_keys.add(spec.source_key)
        seen_suffixes.add(spec.topic_suffix)
    return table


def build_field_table(include_indoor_temperature: bool = True) -> Tuple[SensorFieldSpec, ...]:
    """Build the immutable field table, optionally without the indoor temperature row."""
    fields = (
        spec
        for spec in _STATION_FIELDS
        if include_indoor_temperature or spec.source_key != INDOOR_TEMPERATURE_KEY
    )
    return validate_field_table(fields)
