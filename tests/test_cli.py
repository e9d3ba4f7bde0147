"""CLI commands against the fake gateway."""

import json

import httpx
import pytest
from click.testing import CliRunner

from janus_http import AsyncJanus
from janus_http.cli import main as cli_main

from conftest import BASE_URL, SESSION_ID, FakeJanus


@pytest.fixture
def fake(monkeypatch, tmp_path):
    gateway = FakeJanus()
    monkeypatch.setattr(cli_main, "CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.setattr(cli_main, "_get_client", lambda: AsyncJanus(
        base_url=BASE_URL, poll_interval=0.01, transport=httpx.MockTransport(gateway),
    ))
    return gateway


def test_info(fake):
    result = CliRunner().invoke(cli_main.main, ["info"])
    assert result.exit_code == 0, result.output
    assert "Janus WebRTC Server" in result.output
    assert "janus.plugin.videoroom" in result.output


def test_rooms_list_json(fake):
    fake.script("list", {
        "janus": "success",
        "plugindata": {"plugin": "janus.plugin.videoroom",
                       "data": {"videoroom": "success", "list": [{"room": 1234, "description": "Demo"}]}},
    })
    result = CliRunner().invoke(cli_main.main, ["rooms", "list", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["list"][0]["room"] == 1234
    assert len(fake.posts("destroy")) == 1


def test_rooms_create_reports_plugin_error(fake):
    fake.script("create", {"janus": "success", "data": {"id": SESSION_ID}})
    fake.script("create", {
        "janus": "success",
        "plugindata": {"plugin": "janus.plugin.videoroom",
                       "data": {"videoroom": "event", "error_code": 427, "error": "Room 5 already exists"}},
    })
    result = CliRunner().invoke(cli_main.main, ["rooms", "create", "5"])
    assert result.exit_code != 0
    assert "already exists" in str(result.exception)


def test_streams_watch_prints_offer(fake):
    fake.after("watch", {
        "janus": "event", "session_id": SESSION_ID, "sender": 999,
        "plugindata": {"plugin": "janus.plugin.streaming", "data": {"streaming": "event"}},
        "jsep": {"type": "offer", "sdp": "v=0 test-offer"},
    })
    result = CliRunner().invoke(cli_main.main, ["streams", "watch", "1", "--timeout", "2"])
    assert result.exit_code == 0, result.output
    assert "v=0 test-offer" in result.output


def test_config_set_url(fake):
    runner = CliRunner()
    assert runner.invoke(cli_main.main, ["config", "set-url", "http://gw:8088/janus/"]).exit_code == 0
    assert cli_main._resolve_base_url(None) == "http://gw:8088/janus"
    assert cli_main._resolve_base_url("http://other/janus") == "http://other/janus"
    result = runner.invoke(cli_main.main, ["config", "show"])
    assert "http://gw:8088/janus" in result.output
