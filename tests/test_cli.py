"""CLI commands, with the config file and the collector mocked."""

import json
import uuid

import httpx
import pytest
from click.testing import CliRunner

from webscale_eventstream import config as config_module
from webscale_eventstream.cli import main as main_module
from webscale_eventstream.cli.main import main
from webscale_eventstream.config import XML_PATH_ENABLED, XML_PATH_LOGGING

from conftest import Recorder


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "eventstream" / "config.json"
    monkeypatch.setattr(config_module, "CONFIG_FILE", path)
    return path


@pytest.fixture
def collector(monkeypatch):
    """Route the CLI's forwarder to a mock collector."""
    def _install(recorder: Recorder) -> Recorder:
        real = main_module.LoginEventForwarder
        monkeypatch.setattr(
            main_module, "LoginEventForwarder",
            lambda **kwargs: real(transport=httpx.MockTransport(recorder), **kwargs),
        )
        return recorder
    return _install


def test_preview_prints_single_event():
    result = CliRunner().invoke(main, [
        "preview", "--user-id", "42", "--email", "jane@example.com", "--cookie", "abc", "--store", "de",
    ])
    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert len(body) == 1
    assert body[0]["user"]["user_id"] == "42"
    assert body[0]["user"]["magento"]["store_id"] == "de"
    assert body[0]["payload"] == {"email": "jane@example.com", "wbs_uid": "abc"}
    assert uuid.UUID(body[0]["event_id"]).version == 4


def test_send_rejects_missing_base_url():
    result = CliRunner().invoke(main, ["send", "--user-id", "1", "--email", "a@b.c"])
    assert result.exit_code != 0
    assert "--base-url" in result.output


def test_send_delivers(collector):
    recorder = collector(Recorder(status_code=200, body="{}"))
    result = CliRunner().invoke(main, [
        "send", "--base-url", "https://shop.example.com/", "--user-id", "7", "--email", "a@b.c",
        "--app-id", "app-9", "--sdk-version", "3.1.0",
    ])
    assert result.exit_code == 0, result.output
    assert "sent" in result.output
    request = recorder.requests[0]
    assert str(request.url) == "https://shop.example.com/.clickstream/events/batch"
    assert request.headers["Webscale-App-Id"] == "app-9"
    assert json.loads(request.content)[0]["sdk"] == "webscale/eventstream:3.1.0"


def test_send_exits_1_when_rejected(collector):
    collector(Recorder(status_code=500, body="<html>down</html>"))
    result = CliRunner().invoke(main, [
        "send", "--base-url", "https://shop.example.com", "--user-id", "7", "--email", "a@b.c",
    ])
    assert result.exit_code == 1
    assert "rejected" in result.output


def test_send_exits_1_when_failed(collector):
    collector(Recorder(error=httpx.ConnectError("refused")))
    result = CliRunner().invoke(main, [
        "send", "--base-url", "https://shop.example.com", "--user-id", "7", "--email", "a@b.c",
    ])
    assert result.exit_code == 1
    assert "failed" in result.output


def test_config_set_writes_file(config_file):
    runner = CliRunner()
    assert runner.invoke(main, ["config", "set", "enabled", "true"]).exit_code == 0
    assert runner.invoke(main, ["config", "set", "logging", "1"]).exit_code == 0
    result = runner.invoke(main, ["config", "set", "logging", "off", "--website", "eu"])
    assert result.exit_code == 0, result.output

    assert json.loads(config_file.read_text()) == {
        "default": {XML_PATH_ENABLED: True, XML_PATH_LOGGING: True},
        "websites": {"eu": {XML_PATH_LOGGING: False}},
    }


def test_config_set_rejects_unknown_flag(config_file):
    result = CliRunner().invoke(main, ["config", "set", "verbose", "true"])
    assert result.exit_code != 0
    assert not config_file.exists()


def _row(output: str, path: str) -> str:
    return next(line for line in output.splitlines() if path in line)


def test_status_shows_website_override(config_file):
    runner = CliRunner()
    runner.invoke(main, ["config", "set", "enabled", "true"])
    runner.invoke(main, ["config", "set", "logging", "true"])
    runner.invoke(main, ["config", "set", "logging", "false", "--website", "eu"])

    default = runner.invoke(main, ["status"])
    assert default.exit_code == 0, default.output
    assert "on" in _row(default.output, XML_PATH_ENABLED)
    assert "on" in _row(default.output, XML_PATH_LOGGING)

    eu = runner.invoke(main, ["status", "--website", "eu"])
    assert eu.exit_code == 0, eu.output
    assert "on" in _row(eu.output, XML_PATH_ENABLED)
    assert "off" in _row(eu.output, XML_PATH_LOGGING)


def test_status_without_config_file(config_file):
    result = CliRunner().invoke(main, ["status"])
    assert result.exit_code == 0
    assert "off" in _row(result.output, XML_PATH_ENABLED)
    assert "No config file yet" in result.output
