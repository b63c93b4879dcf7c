"""Pydantic schemas for the HTTP API and the discovery payloads."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class DeviceInfo(BaseModel):
    """Device identity shared by every discovered sensor."""

    identifiers: str = "ambw_mqtt"
    manufacturer: str = "Ambient Weather"
    model: str = "WS-2902"
    name: str = "MQTT Weather Station"
    via_device: str = "ambient_weather_mqtt"


class DiscoveryDescriptor(BaseModel):
    """Retained config message that registers one sensor entity with the hub."""

    name: str
    unique_id: str
    device_class: Optional[str] = None
    device: DeviceInfo
    state_topic: str
    unit_of_measurement: Optional[str] = None
    state_class: str = "measurement"

    def to_payload(self) -> str:
        return self.model_dump_json(exclude_none=True)


class SkippedField(BaseModel):
    """A station field that was left out of this report's publishes."""

    source_key: str
    reason: str
    raw_value: Optional[str] = None


class IngestResponse(BaseModel):
    """Summary returned to the station after a report is processed."""

    status: str = "ok"
    published: int = Field(..., ge=0, description="Messages accepted by the broker client.")
    publish_failures: int = Field(default=0, ge=0)
    skipped: List[SkippedField] = Field(default_factory=list)
