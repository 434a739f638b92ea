"""
Tests for the CLI.
"""

import json

import pytest
from typer.testing import CliRunner

from engine_bridge.actions import ActionDispatcher
from engine_bridge.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_log_setup(monkeypatch):
    """Keep the CLI from installing a handler on the runner's stdout."""
    monkeypatch.setattr("engine_bridge.cli.main.setup_logging", lambda: None)


class TestPostAction:
    """Tests for the post-action command."""

    def test_invalid_url(self, tmp_path):
        """Test that an unusable URL exits with failure."""
        body = tmp_path / "action.json"
        body.write_text(json.dumps({"id": "e1"}), encoding="utf-8")

        result = runner.invoke(app, ["post-action", "not-a-url", str(body), "--correlator", "c-1"])

        assert result.exit_code == 1
        assert "Action failed" in result.output
        assert "c-1" in result.output

    def test_invalid_json(self, tmp_path):
        """Test a body file that is not JSON."""
        body = tmp_path / "action.json"
        body.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["post-action", "http://example/action", str(body)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_body_must_be_object(self, tmp_path):
        """Test a JSON body that is not an object."""
        body = tmp_path / "action.json"
        body.write_text("[1, 2]", encoding="utf-8")

        result = runner.invoke(app, ["post-action", "http://example/action", str(body)])

        assert result.exit_code == 1

    def test_delivered(self, tmp_path, monkeypatch, make_transport, correlator_header):
        """Test a successful delivery with the given correlator."""
        transport = make_transport(202)
        monkeypatch.setattr(
            "engine_bridge.actions.ActionDispatcher",
            lambda: ActionDispatcher(transport=transport),
        )
        body = tmp_path / "action.json"
        body.write_text(json.dumps({"id": "e1"}), encoding="utf-8")

        result = runner.invoke(app, ["post-action", "http://example/action", str(body), "--correlator", "c-9"])

        assert result.exit_code == 0
        assert "Action delivered (202)" in result.output
        request = transport.requests[0]
        assert request.headers[correlator_header] == "c-9"
        assert json.loads(request.content) == {"id": "e1"}


class TestServe:
    """Tests for the serve command."""

    @pytest.fixture
    def uvicorn_calls(self, monkeypatch):
        """Record uvicorn.run calls instead of starting a server."""
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
        monkeypatch.setattr("engine_bridge.web.create_app", lambda settings: "the-app")
        return calls

    def test_defaults_from_settings(self, uvicorn_calls, monkeypatch):
        """Test that host and port come from settings by default."""
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9100")

        result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        assert uvicorn_calls == [("the-app", {"host": "127.0.0.1", "port": 9100})]

    def test_options_override(self, uvicorn_calls):
        """Test explicit --host and --port."""
        result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "8088"])

        assert result.exit_code == 0
        assert uvicorn_calls == [("the-app", {"host": "0.0.0.0", "port": 8088})]
