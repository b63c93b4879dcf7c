"""Exceptions raised while ingesting a station report."""

from __future__ import annotations


class WeatherBridgeError(Exception):
    """Base class for all bridge errors."""


class InvalidCredentials(WeatherBridgeError):
    """The report's ``ID``/``PASSWORD`` pair does not match the configured station."""


class LockAcquisitionFailure(WeatherBridgeError):
    """The publisher guard could not be acquired for this report."""


class PublishError(WeatherBridgeError):
    """The broker rejected or failed to queue a message."""

    def __init__(self, topic: str, reason: str) -> None:
        super().__init__(f"Failed to publish to {topic!r}: {reason}")
        self.topic = topic
        self.reason = reason


class FieldError(WeatherBridgeError):
    """A single station field could not be turned into a sample."""

    reason = "field error"

    def __init__(self, source_key: str, raw_value: str | None = None) -> None:
        super().__init__(self._describe(source_key, raw_value))
        self.source_key = source_key
        self.raw_value = raw_value

    def _describe(self, source_key: str, raw_value: str | None) -> str:
        return f"{self.reason}: {source_key}"


class MissingField(FieldError):
    reason = "missing field"


class UnparseableValue(FieldError):
    reason = "unparseable field"

    def _describe(self, source_key: str, raw_value: str | None) -> str:
        return f"{self.reason}: {source_key}={raw_value!r}"
