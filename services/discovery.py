"""Home Assistant MQTT discovery descriptors for every published sensor."""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from app.schemas import DeviceInfo, DiscoveryDescriptor
from broker.publisher import Publisher
from models.fields import DerivedMetricSpec, SensorFieldSpec
from services.errors import PublishError
from services.formatting import config_topic, state_topic

logger = logging.getLogger(__name__)


def build_descriptors(
    base_topic: str,
    fields: Iterable[SensorFieldSpec],
    derived: Iterable[DerivedMetricSpec] = (),
    device: DeviceInfo | None = None,
) -> List[Tuple[str, DiscoveryDescriptor]]:
    """Return ``(config_topic, descriptor)`` pairs, station fields first."""
    identity = device or DeviceInfo()
    descriptors: List[Tuple[str, DiscoveryDescriptor]] = []
    for spec in (*fields, *derived):
        descriptor = DiscoveryDescriptor(
            name=spec.name,
            unique_id=spec.unique_id,
            device_class=spec.device_class,
            device=identity,
            state_topic=state_topic(base_topic, spec.topic_suffix),
            unit_of_measurement=spec.unit_of_measurement,
            state_class=spec.state_class,
        )
        descriptors.append((config_topic(base_topic, spec.topic_suffix), descriptor))
    return descriptors


def publish_discovery(
    publisher: Publisher,
    descriptors: Iterable[Tuple[str, DiscoveryDescriptor]],
) -> int:
    """Publish descriptors as retained messages; returns how many were accepted."""
    published = 0
    for topic, descriptor in descriptors:
        payload = descriptor.to_payload()
        try:
            publisher.publish(topic, payload, True)
        except PublishError as exc:
            logger.error("Unable to publish sensor config", extra={"topic": topic, "reason": exc.reason})
            continue
        logger.debug("Published sensor config", extra={"topic": topic})
        published += 1
    logger.info("Published discovery descriptors", extra={"published_count": published})
    return published
