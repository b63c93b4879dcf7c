"""Table-driven conversion of raw station fields into state samples."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from models.fields import SensorFieldSpec, ValueKind
from models.records import PublishedSample, RawReading
from services.errors import FieldError, MissingField, UnparseableValue
from services.formatting import (
    format_decimal,
    format_integer,
    parse_decimal,
    parse_integer,
    state_topic,
)

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    samples: List[PublishedSample] = field(default_factory=list)
    errors: List[FieldError] = field(default_factory=list)


class FieldPipeline:
    """Parses, formats and addresses every field in a report, one field at a time."""

    def __init__(self, fields: Iterable[SensorFieldSpec], base_topic: str) -> None:
        self.fields: Tuple[SensorFieldSpec, ...] = tuple(fields)
        self.base_topic = base_topic

    def format_value(self, spec: SensorFieldSpec, raw: str) -> str:
        if spec.kind is ValueKind.integer:
            return format_integer(parse_integer(spec.source_key, raw))
        value = parse_decimal(spec.source_key, raw) * spec.scale
        return format_decimal(value, spec.precision)

    def sample_for(self, spec: SensorFieldSpec, reading: RawReading) -> PublishedSample:
        raw = reading.get(spec.source_key)
        if raw is None:
            raise MissingField(spec.source_key)
        return PublishedSample(
            topic=state_topic(self.base_topic, spec.topic_suffix),
            payload=self.format_value(spec, raw),
            retained=False,
        )

    def run(self, reading: RawReading) -> PipelineResult:
        result = PipelineResult()
        for spec in self.fields:
            try:
                sample = self.sample_for(spec, reading)
            except MissingField as exc:
                logger.error(
                    "Missing value in report",
                    extra={"source_key": exc.source_key, "reason": exc.reason},
                )
                result.errors.append(exc)
                continue
            except UnparseableValue as exc:
                logger.error(
                    "Unable to parse value from report",
                    extra={
                        "source_key": exc.source_key,
                        "raw_value": exc.raw_value,
                        "reason": exc.reason,
                    },
                )
                result.errors.append(exc)
                continue
            result.samples.append(sample)
        return result
