"""Meteorological indices computed from the station's raw fields.

Both formulas work in imperial units (°F, mph, % relative humidity), which is
what the station reports.

- Apparent temperature: the NWS heat index procedure. A Steadman estimate is
  used near comfortable temperatures; above 80 °F the Rothfusz regression is
  applied with its two humidity adjustments.
- Wind chill: the 2001 NWS/JAG formula, defined only for T <= 50 °F and
  wind speeds above 3 mph.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional

from models.fields import APPARENT_TEMPERATURE, COMPUTED_WIND_CHILL, DerivedMetricSpec
from models.records import PublishedSample, RawReading
from services.errors import UnparseableValue
from services.formatting import format_decimal, parse_decimal, state_topic

logger = logging.getLogger(__name__)

HEAT_INDEX_THRESHOLD_F = 80.0
WIND_CHILL_MAX_TEMP_F = 50.0
WIND_CHILL_MIN_SPEED_MPH = 3.0

TEMPERATURE_KEY = "tempf"
HUMIDITY_KEY = "humidity"
WIND_SPEED_KEY = "windspeedmph"
REPORTED_WIND_CHILL_KEY = "windchillf"


def steadman_estimate(temp_f: float, rh: float) -> float:
    return 0.5 * (temp_f + 61.0 + (temp_f - 68.0) * 1.2 + rh * 0.094)


def rothfusz_regression(temp_f: float, rh: float) -> float:
    return (
        -42.379
        + 2.04901523 * temp_f
        + 10.14333127 * rh
        - 0.22475541 * temp_f * rh
        - 0.00683783 * temp_f * temp_f
        - 0.05481717 * rh * rh
        + 0.00122874 * temp_f * temp_f * rh
        + 0.00085282 * temp_f * rh * rh
        - 0.00000199 * temp_f * temp_f * rh * rh
    )


def apparent_temperature(temp_f: float, rh: float) -> float:
    """Return the heat index ("feels like" temperature) in °F."""
    if temp_f < HEAT_INDEX_THRESHOLD_F:
        return temp_f

    steadman = steadman_estimate(temp_f, rh)
    if (temp_f + steadman) / 2.0 < HEAT_INDEX_THRESHOLD_F:
        return steadman

    rothfusz = rothfusz_regression(temp_f, rh)
    if rh < 13.0 and 80.0 < temp_f < 112.0:
        return rothfusz - ((13.0 - rh) / 4.0) * math.sqrt((17.0 - abs(temp_f - 95.0)) / 17.0)
    if rh > 85.0 and 80.0 < temp_f < 87.0:
        return rothfusz + ((rh - 85.0) / 10.0) * ((87.0 - temp_f) / 5.0)
    return rothfusz


def wind_chill(temp_f: float, wind_mph: float) -> Optional[float]:
    """Return the NWS wind chill in °F, or ``None`` outside the formula's valid range."""
    if temp_f > WIND_CHILL_MAX_TEMP_F or wind_mph <= WIND_CHILL_MIN_SPEED_MPH:
        return None
    factor = wind_mph ** 0.16
    return 35.74 + 0.6215 * temp_f - 35.75 * factor + 0.4275 * temp_f * factor


def _optional_decimal(reading: RawReading, key: str) -> Optional[float]:
    raw = reading.get(key)
    if raw is None:
        return None
    try:
        return parse_decimal(key, raw)
    except UnparseableValue:
        return None


class DerivedMetricEngine:
    """Computes composite metrics for a report whose inputs are all present."""

    def __init__(self, base_topic: str, publish_wind_chill: bool = False) -> None:
        self.base_topic = base_topic
        self.publish_wind_chill = publish_wind_chill

    @property
    def published_metrics(self) -> List[DerivedMetricSpec]:
        metrics = [APPARENT_TEMPERATURE]
        if self.publish_wind_chill:
            metrics.append(COMPUTED_WIND_CHILL)
        return metrics

    def apparent_temperature_sample(self, reading: RawReading) -> Optional[PublishedSample]:
        temp_f = _optional_decimal(reading, TEMPERATURE_KEY)
        rh = _optional_decimal(reading, HUMIDITY_KEY)
        if temp_f is None or rh is None:
            return None
        value = apparent_temperature(temp_f, rh)
        return self._sample(APPARENT_TEMPERATURE, value)

    def wind_chill_sample(self, reading: RawReading) -> Optional[PublishedSample]:
        temp_f = _optional_decimal(reading, TEMPERATURE_KEY)
        wind_mph = _optional_decimal(reading, WIND_SPEED_KEY)
        reported = reading.get(REPORTED_WIND_CHILL_KEY)
        if temp_f is None or wind_mph is None or reported is None:
            return None
        value = wind_chill(temp_f, wind_mph)
        if value is None:
            return None
        computed = format_decimal(value, COMPUTED_WIND_CHILL.precision)
        logger.debug("Computed wind chill", extra={"computed": computed, "reported": reported})
        if not self.publish_wind_chill:
            return None
        return self._sample(COMPUTED_WIND_CHILL, value)

    def derive(self, reading: RawReading) -> List[PublishedSample]:
        samples = []
        for sample in (
            self.apparent_temperature_sample(reading),
            self.wind_chill_sample(reading),
        ):
            if sample is not None:
                samples.append(sample)
        return samples

    def _sample(self, spec: DerivedMetricSpec, value: float) -> PublishedSample:
        return PublishedSample(
            topic=state_topic(self.base_topic, spec.topic_suffix),
            payload=format_decimal(value, spec.precision),
            retained=False,
        )
