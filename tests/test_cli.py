"""CLI tests using click's CliRunner against a mock Coder API."""

from __future__ import annotations

import json

import click
import httpx
import pytest
from click.testing import CliRunner

from coderjob import cli
from coderjob.adapter.coder import CoderAdapter
from coderjob.adapter.gateway import CoderClient


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_adapter(monkeypatch: pytest.MonkeyPatch, coder, credentials):
    coder.verbosity = []

    def _factory(verbosity: int = 0) -> CoderAdapter:
        coder.verbosity.append(verbosity)
        return CoderAdapter(
            CoderClient("https://coder.test", "t", transport=coder.transport()),
            credentials,
            username="alice",
            deletion_max_attempts=2,
            deletion_interval_seconds=0,
            suffix_factory=lambda: "s1",
        )

    monkeypatch.setattr(cli, "_adapter", _factory)
    return coder


def _ws(status: str) -> dict:
    return {
        "id": "ws-1",
        "name": "alice-lab-s1",
        "owner_name": "alice",
        "updated_at": "2026-02-06T10:52:12Z",
        "latest_build": {"id": "b-1", "status": status, "updated_at": "2026-02-06T11:00:00Z"},
    }


def test_parse_parameters() -> None:
    assert cli._parse_parameters(("flavor=large", "note=a=b", "empty=")) == {
        "flavor": "large",
        "note": "a=b",
        "empty": "",
    }


@pytest.mark.parametrize("bad", ["novalue", "=x"])
def test_parse_parameters_rejects(bad: str) -> None:
    with pytest.raises(click.BadParameter):
        cli._parse_parameters((bad,))


def test_submit(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("POST", "/api/v2/organizations/org/members/me/workspaces", {"id": "ws-1"})

    result = runner.invoke(
        cli.main,
        [
            "submit",
            "--org-id", "org",
            "--project-id", "p",
            "--template-version-id", "tv",
            "--name", "lab",
            "--param", "flavor=large",
        ],
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "ws-1"
    body = json.loads(fake_adapter.requests[0].content)
    assert body["name"] == "alice-lab-s1"
    assert {"name": "flavor", "value": "large"} in body["rich_parameter_values"]


def test_info_and_status(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("GET", "/api/v2/workspaces/ws-1", _ws("deleted"))
    fake_adapter.add("GET", "/api/v2/workspacebuilds/b-1/logs", [])

    result = runner.invoke(cli.main, ["info", "ws-1"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["status"] == "completed"
    assert data["wallclock_time"] == 468

    result = runner.invoke(cli.main, ["status", "ws-1"])
    assert result.output.strip() == "completed"


def test_delete(runner: CliRunner, fake_adapter, credentials) -> None:
    credentials.bound["ws-1"] = credentials.issued
    fake_adapter.add("POST", "/api/v2/workspaces/ws-1/builds", {"id": "b-2"})
    fake_adapter.add("GET", "/api/v2/workspaces/ws-1", _ws("deleted"))

    result = runner.invoke(cli.main, ["delete", "ws-1"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "ws-1: deleted after 1 check(s)"


def test_list_by_owner(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("GET", "/api/v2/workspaces", {"workspaces": [_ws("running")]})
    fake_adapter.add("GET", "/api/v2/workspacebuilds/b-1/logs", [])

    result = runner.invoke(cli.main, ["list", "--owner", "bob"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == []


def test_transport_error_is_reported(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("GET", "/api/v2/workspaces/ws-1", httpx.Response(500))

    result = runner.invoke(cli.main, ["status", "ws-1"])

    assert result.exit_code == 1
    assert "HTTP Error: 500" in result.output


def test_connection_error_is_reported(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("GET", "/api/v2/workspaces/ws-1", httpx.ConnectError("connection refused"))

    result = runner.invoke(cli.main, ["status", "ws-1"])

    assert result.exit_code == 1
    assert "Cannot reach Coder API: connection refused" in result.output
    assert not isinstance(result.exception, httpx.HTTPError)


def test_verbose_flag_reaches_logging(runner: CliRunner, fake_adapter) -> None:
    fake_adapter.add("GET", "/api/v2/workspaces/ws-1", _ws("running"))
    fake_adapter.add("GET", "/api/v2/workspacebuilds/b-1/logs", [])

    assert runner.invoke(cli.main, ["status", "ws-1"]).exit_code == 0
    assert runner.invoke(cli.main, ["-vv", "status", "ws-1"]).exit_code == 0

    assert fake_adapter.verbosity == [0, 2]
