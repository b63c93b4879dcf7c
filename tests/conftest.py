from __future__ import annotations

from typing import Iterator, List, Set, Tuple

import pytest

from models.fields import build_field_table
from services.derived import DerivedMetricEngine
from services.errors import PublishError
from services.ingest import WeatherIngestService
from services.pipeline import FieldPipeline

BASE_TOPIC = "homeassistant/sensor/ambientWeather"


class RecordingPublisher:
    def __init__(self, failing_topics: Set[str] | None = None) -> None:
        self.messages: List[Tuple[str, str, bool]] = []
        self.failing_topics = set(failing_topics or ())
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0

    def connect(self) -> None:
        self.connected = True
        self.connect_calls += 1

    def disconnect(self) -> None:
        self.connected = False
        self.disconnect_calls += 1

    def publish(self, topic: str, payload: str, retained: bool) -> None:
        if topic in self.failing_topics:
            raise PublishError(topic, "broker unavailable")
        self.messages.append((topic, payload, retained))

    def payloads(self) -> dict[str, str]:
        return {topic: payload for topic, payload, _ in self.messages}


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def service(publisher: RecordingPublisher) -> Iterator[WeatherIngestService]:
    yield WeatherIngestService(
        publisher=publisher,
        pipeline=FieldPipeline(build_field_table(), BASE_TOPIC),
        engine=DerivedMetricEngine(BASE_TOPIC),
        auth_id="local",
        auth_password="key",
        lock_timeout=0.1,
    )


@pytest.fixture()
def full_report() -> dict[str, str]:
    return {
        "ID": "local",
        "PASSWORD": "key",
        "tempf": "72.5",
        "humidity": "45",
        "dewptf": "49.8",
        "windchillf": "72.5",
        "winddir": "270",
        "windspeedmph": "4.5",
        "windgustmph": "6.93",
        "rainin": "0.000",
        "dailyrainin": "0.12",
        "weeklyrainin": "0.5",
        "monthlyrainin": "1.234",
        "totalrainin": "40.05",
        "solarradiation": "512.3",
        "UV": "4",
        "indoortempf": "70.3",
        "indoorhumidity": "38",
        "absbaromin": "29.12",
        "baromin": "29.92",
        "dateutc": "now",
        "softwaretype": "AMBWeatherV4.2.9",
    }


@pytest.fixture()
def make_publisher() -> type[RecordingPublisher]:
    return RecordingPublisher
