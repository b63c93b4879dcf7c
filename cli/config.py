from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8090"
DEFAULT_TIMEOUT = 10.0
DEFAULT_AUTH_ID = "local"
DEFAULT_AUTH_PASSWORD = "key"

_BASE_URL_ENV = "BRIDGE_BASE_URL"
_TIMEOUT_ENV = "BRIDGE_TIMEOUT"
_AUTH_ID_ENV = "STATION_AUTH_ID"
_AUTH_PASSWORD_ENV = "STATION_AUTH_PASSWORD"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    auth_id: str = DEFAULT_AUTH_ID
    auth_password: str = DEFAULT_AUTH_PASSWORD


def _read_float(value: Optional[str], default: float) -> float:
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


def load_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    auth_id: Optional[str] = None,
    auth_password: Optional[str] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if timeout is None:
        timeout = _read_float(os.getenv(_TIMEOUT_ENV), DEFAULT_TIMEOUT)
    return CLIConfig(
        base_url=url.rstrip("/"),
        timeout=timeout,
        auth_id=auth_id or os.getenv(_AUTH_ID_ENV) or DEFAULT_AUTH_ID,
        auth_password=auth_password or os.getenv(_AUTH_PASSWORD_ENV) or DEFAULT_AUTH_PASSWORD,
    )
