import logging

import httpx
import pytest
from typer.testing import CliRunner

from cli import main as cli_main
from core.services import dispatch_pipeline

from conftest import RecordingHandler

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """Run each command from an empty dir and restore the root logger afterwards."""

    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def handler(monkeypatch):
    recording = RecordingHandler()

    async def run_with_mock_transport(**kwargs):
        return await dispatch_pipeline.run_dispatch(
            transport=httpx.MockTransport(recording), **kwargs
        )

    monkeypatch.setattr(cli_main, "run_dispatch", run_with_mock_transport)
    return recording


def _write_input(tmp_path, content):
    path = tmp_path / "input.txt"
    path.write_text(content, encoding="utf-8")
    return path


def test_run_prints_received_bodies(tmp_path, handler):
    path = _write_input(tmp_path, '[{"location": "bar.com"}, {"location": "http://other.com"}]')

    result = runner.invoke(cli_main.app, ["run", str(path), "--no-summary"])

    assert result.exit_code == 0, result.output
    assert "Received data: ok" in result.stdout
    assert len(handler.requests) == 1


def test_run_exits_zero_even_when_every_target_fails(tmp_path, handler):
    path = _write_input(tmp_path, '[{"location": "::::not a url"}]')

    result = runner.invoke(cli_main.app, ["run", str(path)])

    assert result.exit_code == 0, result.output
    assert handler.requests == []


def test_allow_option_replaces_the_destination_list(tmp_path, handler):
    path = _write_input(tmp_path, '[{"location": "bar.com"}, {"location": "other.com"}]')

    result = runner.invoke(cli_main.app, ["run", str(path), "--allow", "other.com", "--no-summary"])

    assert result.exit_code == 0, result.output
    assert [r.url.host for r in handler.requests] == ["other.com"]


def test_allow_any_contacts_every_valid_target(tmp_path, handler):
    path = _write_input(tmp_path, '[{"location": "bar.com"}, {"location": "http://other.com"}]')

    result = runner.invoke(cli_main.app, ["run", str(path), "--allow-any", "--no-summary"])

    assert result.exit_code == 0, result.output
    assert len(handler.requests) == 2


def test_missing_input_is_fatal(tmp_path, handler):
    result = runner.invoke(cli_main.app, ["run", str(tmp_path / "nope.txt")])

    assert result.exit_code == 1
    assert "Fatal" in result.output


def test_malformed_input_is_fatal(tmp_path, handler):
    path = _write_input(tmp_path, '{"location": "bar.com"}')

    result = runner.invoke(cli_main.app, ["run", str(path)])

    assert result.exit_code == 1
    assert handler.requests == []


def test_doctor_setup_writes_env_file(tmp_path):
    env_file = tmp_path / "user.env"

    result = runner.invoke(
        cli_main.app,
        ["doctor", "setup", "max_concurrency=20", "request_timeout_seconds=2.5", "--env-file", str(env_file)],
    )

    assert result.exit_code == 0, result.output
    text = env_file.read_text(encoding="utf-8")
    assert "POSTHASTE_MAX_CONCURRENCY=20" in text
    assert "POSTHASTE_REQUEST_TIMEOUT_SECONDS=2.5" in text


def test_doctor_setup_rejects_unknown_keys(tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["doctor", "setup", "nonsense=1", "--env-file", str(tmp_path / "user.env")],
    )

    assert result.exit_code != 0
    assert not (tmp_path / "user.env").exists()
