from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Protocol

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from services.errors import PublishError
from settings import get_settings

logger = logging.getLogger(__name__)


class Publisher(Protocol):
    def connect(self) -> None: ...

    def disconnect(self) -> None: ...

    def publish(self, topic: str, payload: str, retained: bool) -> None: ...


class MqttPublisher:
    """Thin wrapper around a paho client exposing ``publish(topic, payload, retained)``."""

    def __init__(
        self,
        host: str,
        port: int = 1883,
        client_id: str = "",
        username: Optional[str] = None,
        password: Optional[str] = None,
        keepalive: int = 60,
        qos: int = 0,
    ) -> None:
        self.host = host
        self.port = port
        self.keepalive = keepalive
        self.qos = qos
        self._client = mqtt.Client(
            CallbackAPIVersion.VERSION2,
            client_id=client_id,
            protocol=mqtt.MQTTv311,
        )
        if username:
            self._client.username_pw_set(username, password)
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Connect to the broker and start the network loop thread."""
        if self._connected:
            return
        rc = self._client.connect(self.host, self.port, keepalive=self.keepalive)
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise ConnectionError(
                f"Unable to connect to MQTT broker {self.host}:{self.port}: {mqtt.error_string(rc)}"
            )
        self._client.loop_start()
        self._connected = True
        logger.info("Connected to MQTT broker %s:%s", self.host, self.port)

    def disconnect(self) -> None:
        if not self._connected:
            return
        self._client.disconnect()
        self._client.loop_stop()
        self._connected = False
        logger.info("Disconnected from MQTT broker %s:%s", self.host, self.port)

    def publish(self, topic: str, payload: str, retained: bool) -> None:
        try:
            info = self._client.publish(topic, payload, qos=self.qos, retain=retained)
        except ValueError as exc:
            raise PublishError(topic, str(exc)) from exc
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(topic, mqtt.error_string(info.rc))


@lru_cache
def build_default_publisher(
    host: Optional[str] = None,
    port: Optional[int] = None,
) -> MqttPublisher:
    settings = get_settings()
    return MqttPublisher(
        host=settings.broker_host if host is None else host,
        port=settings.broker_port if port is None else port,
        client_id=settings.client_id,
        username=settings.username,
        password=settings.password,
        keepalive=settings.keepalive,
    )
