"""Request-level orchestration of a single station report."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from functools import lru_cache
from threading import Lock
from typing import List, Optional

from app.schemas import DeviceInfo, DiscoveryDescriptor
from broker.publisher import Publisher, build_default_publisher
from models.fields import build_field_table
from models.records import PublishedSample, RawReading
from services.derived import DerivedMetricEngine
from services.discovery import build_descriptors, publish_discovery
from services.errors import FieldError, InvalidCredentials, LockAcquisitionFailure, PublishError
from services.pipeline import FieldPipeline
from settings import get_settings

logger = logging.getLogger(__name__)

ID_PARAM = "ID"
PASSWORD_PARAM = "PASSWORD"


@dataclass
class IngestSummary:
    published: int = 0
    publish_failures: int = 0
    skipped: List[FieldError] = field(default_factory=list)


class WeatherIngestService:
    """Checks credentials, then publishes one report's samples under the publisher lock."""

    def __init__(
        self,
        publisher: Publisher,
        pipeline: FieldPipeline,
        engine: DerivedMetricEngine,
        auth_id: str,
        auth_password: str,
        lock_timeout: float = 10.0,
        device: Optional[DeviceInfo] = None,
    ) -> None:
        self.publisher = publisher
        self.pipeline = pipeline
        self.engine = engine
        self.lock_timeout = lock_timeout
        self.device = device or DeviceInfo()
        self._auth_id = auth_id
        self._auth_password = auth_password
        self._publish_lock = Lock()

    def check_credentials(self, reading: RawReading) -> None:
        station_id = reading.get(ID_PARAM)
        password = reading.get(PASSWORD_PARAM)
        if station_id is None or password is None:
            raise InvalidCredentials("Report is missing station credentials.")
        id_ok = secrets.compare_digest(station_id.encode(), self._auth_id.encode())
        password_ok = secrets.compare_digest(password.encode(), self._auth_password.encode())
        if not (id_ok and password_ok):
            raise InvalidCredentials("Station credentials do not match.")

    def handle_report(self, reading: RawReading) -> IngestSummary:
        """Publish every valid field of ``reading`` followed by the derived metrics."""
        self.check_credentials(reading)

        if not self._publish_lock.acquire(timeout=self.lock_timeout):
            logger.error("Unable to acquire publisher lock", extra={"reason": "timeout"})
            raise LockAcquisitionFailure(
                f"Publisher busy for more than {self.lock_timeout:g}s."
            )
        try:
            summary = IngestSummary()
            result = self.pipeline.run(reading)
            summary.skipped.extend(result.errors)
            for sample in [*result.samples, *self.engine.derive(reading)]:
                if self._publish(sample):
                    summary.published += 1
                else:
                    summary.publish_failures += 1
        finally:
            self._publish_lock.release()

        logger.info(
            "Processed station report",
            extra={
                "published_count": summary.published,
                "skipped_count": len(summary.skipped),
            },
        )
        return summary

    def discovery_descriptors(self) -> list[tuple[str, DiscoveryDescriptor]]:
        return build_descriptors(
            self.pipeline.base_topic,
            self.pipeline.fields,
            self.engine.published_metrics,
            self.device,
        )

    def start(self) -> None:
        """Connect to the broker and advertise every sensor once."""
        self.publisher.connect()
        self.announce()

    def shutdown(self) -> None:
        self.publisher.disconnect()

    def announce(self) -> int:
        """Publish the retained discovery descriptors for every sensor."""
        with self._publish_lock:
            return publish_discovery(self.publisher, self.discovery_descriptors())

    def _publish(self, sample: PublishedSample) -> bool:
        logger.debug("Publishing", extra={"topic": sample.topic, "payload": sample.payload})
        # Only PublishError counts against a single field; anything else aborts
        # the batch and reaches the caller once handle_report releases the lock.
        try:
            self.publisher.publish(sample.topic, sample.payload, sample.retained)
        except PublishError as exc:
            logger.error("Unable to publish sample", extra={"topic": sample.topic, "reason": exc.reason})
            return False
        return True


def build_service(publisher: Publisher) -> WeatherIngestService:
    settings = get_settings()
    base_topic = settings.base_topic
    pipeline = FieldPipeline(
        build_field_table(settings.include_indoor_temperature),
        base_topic,
    )
    engine = DerivedMetricEngine(base_topic, settings.publish_computed_wind_chill)
    return WeatherIngestService(
        publisher=publisher,
        pipeline=pipeline,
        engine=engine,
        auth_id=settings.auth_id,
        auth_password=settings.auth_password,
        lock_timeout=settings.publish_lock_timeout,
    )


@lru_cache
def build_default_ingest_service() -> WeatherIngestService:
    """Factory that wires the ingest service to the configured MQTT broker."""
    return build_service(build_default_publisher())

