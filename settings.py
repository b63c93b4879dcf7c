from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_BROKER_HOST_ENV = "MQTT_BROKER_HOST"
_BROKER_PORT_ENV = "MQTT_BROKER_PORT"
_CLIENT_ID_ENV = "MQTT_CLIENT_ID"
_USERNAME_ENV = "MQTT_USERNAME"
_PASSWORD_ENV = "MQTT_PASSWORD"
_KEEPALIVE_ENV = "MQTT_KEEPALIVE"
_DISCOVERY_PREFIX_ENV = "MQTT_DISCOVERY_PREFIX"
_STATION_ID_ENV = "STATION_ID"
_AUTH_ID_ENV = "STATION_AUTH_ID"
_AUTH_PASSWORD_ENV = "STATION_AUTH_PASSWORD"
_INDOOR_TEMP_ENV = "INCLUDE_INDOOR_TEMPERATURE"
_WIND_CHILL_ENV = "PUBLISH_COMPUTED_WIND_CHILL"
_LOCK_TIMEOUT_ENV = "PUBLISH_LOCK_TIMEOUT"
_HTTP_HOST_ENV = "HTTP_HOST"
_HTTP_PORT_ENV = "HTTP_PORT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    broker_host: str
    broker_port: int
    client_id: str
    username: Optional[str]
    password: Optional[str]
    keepalive: int
    discovery_prefix: str
    station_id: str
    auth_id: str
    auth_password: str
    include_indoor_temperature: bool
    publish_computed_wind_chill: bool
    publish_lock_timeout: float
    http_host: str
    http_port: int
    log_level: str

    @property
    def base_topic(self) -> str:
        return f"{self.discovery_prefix}/sensor/{self.station_id}"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        broker_host=_read_str_env(_BROKER_HOST_ENV, "localhost"),
        broker_port=_read_positive_int(_BROKER_PORT_ENV, 1883),
        client_id=_read_str_env(_CLIENT_ID_ENV, "ambient-weather-mqtt"),
        username=_read_optional_env(_USERNAME_ENV, None),
        password=_read_optional_env(_PASSWORD_ENV, None),
        keepalive=_read_positive_int(_KEEPALIVE_ENV, 60),
        discovery_prefix=_read_str_env(_DISCOVERY_PREFIX_ENV, "homeassistant").rstrip("/"),
        station_id=_read_str_env(_STATION_ID_ENV, "ambientWeather"),
        auth_id=_read_str_env(_AUTH_ID_ENV, "local"),
        auth_password=_read_str_env(_AUTH_PASSWORD_ENV, "key"),
        include_indoor_temperature=_read_bool_env(_INDOOR_TEMP_ENV, True),
        publish_computed_wind_chill=_read_bool_env(_WIND_CHILL_ENV, False),
        publish_lock_timeout=_read_positive_float(_LOCK_TIMEOUT_ENV, 10.0),
        http_host=_read_str_env(_HTTP_HOST_ENV, "0.0.0.0"),
        http_port=_read_positive_int(_HTTP_PORT_ENV, 8090),
        log_level=_read_log_level("INFO"),
    )
