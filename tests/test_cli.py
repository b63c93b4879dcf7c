from __future__ import annotations

import json
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.reports: List[Dict[str, str]] = []
        self.response: Dict[str, Any] = {
            "status": "ok",
            "published": 2,
            "publish_failures": 0,
            "skipped": [{"source_key": "UV", "reason": "unparseable field", "raw_value": "high"}],
        }
        self.closed = False

    def send_report(self, fields: Dict[str, str]) -> Dict[str, Any]:
        self.reports.append(dict(fields))
        return self.response

    def health(self) -> Dict[str, Any]:
        return {"status": "ok"}

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def stub(monkeypatch) -> StubClient:
    holder: Dict[str, StubClient] = {}

    def factory(config) -> StubClient:
        holder["client"] = StubClient(config)
        return holder["client"]

    monkeypatch.setattr("cli.app.ApiClient", factory)

    class _Proxy:
        def __getattr__(self, name: str) -> Any:
            return getattr(holder["client"], name)

    return _Proxy()  # type: ignore[return-value]


def test_send_command_posts_fields(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(
        app,
        ["--base-url", "http://bridge:8090/", "send", "tempf=72.5", "UV=high"],
    )

    assert result.exit_code == 0, result.output
    assert stub.reports == [{"tempf": "72.5", "UV": "high"}]
    assert stub.config.base_url == "http://bridge:8090"
    assert stub.closed is True
    assert "published: 2" in result.output
    assert "UV: unparseable field (raw='high')" in result.output


def test_send_command_rejects_malformed_assignment(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["send", "tempf"])

    assert result.exit_code != 0
    assert "KEY=VALUE" in result.output


def test_health_command(runner: CliRunner, stub: StubClient) -> None:
    result = runner.invoke(app, ["health"])

    assert result.exit_code == 0
    assert "status: ok" in result.output


def test_feels_like_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["feels-like", "--temperature", "90", "--humidity", "50"])

    assert result.exit_code == 0
    assert "94.6 °F" in result.output


def test_wind_chill_command(runner: CliRunner) -> None:
    result = runner.invoke(app, ["wind-chill", "-t", "30", "-w", "10"])

    assert result.exit_code == 0
    assert "21.2 °F" in result.output


def test_wind_chill_command_outside_range(runner: CliRunner) -> None:
    result = runner.invoke(app, ["wind-chill", "-t", "70", "-w", "10"])

    assert result.exit_code == 1


def test_discovery_command_lists_descriptors(runner: CliRunner, monkeypatch) -> None:
    from settings import get_settings

    monkeypatch.setenv("STATION_ID", "backyard")
    monkeypatch.setenv("INCLUDE_INDOOR_TEMPERATURE", "false")
    get_settings.cache_clear()
    try:
        result = runner.invoke(app, ["discovery"])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 0, result.output
    assert "Discovery Descriptors (18)" in result.output
    assert "homeassistant/sensor/backyard/feelsLike/config" in result.output
    assert "indoorTemperature" not in result.output
    payload_line = next(line for line in result.output.splitlines() if '"unique_id"' in line)
    assert json.loads(payload_line.strip())["device"]["model"] == "WS-2902"
