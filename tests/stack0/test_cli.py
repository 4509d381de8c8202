"""Tests for the stack0 command-line interface."""

import argparse
import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.errors import NotFoundError
from stack0.cli import EXIT_API_ERROR, EXIT_OK, EXIT_USAGE, _parse_var, build_parser, main, run_command


@pytest.fixture
def fake_client():
    client = MagicMock()
    client.screenshots.capture = AsyncMock(return_value={"id": "ss_1", "status": "pending"})
    client.screenshots.capture_and_wait = AsyncMock(return_value={"id": "ss_1", "status": "completed"})
    client.extraction.extract = AsyncMock(return_value={"id": "ext_1"})
    client.extraction.extract_and_wait = AsyncMock(return_value={"id": "ext_1", "status": "completed"})
    client.workflows.run = AsyncMock(return_value={"id": "run_1"})
    client.workflows.run_and_wait = AsyncMock(return_value={"id": "run_1", "status": "completed"})
    client.workflows.get_run = AsyncMock(return_value={"id": "run_1", "status": "running"})
    return client


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Run main() with an API key, no config file and no logging side effects."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("STACK0_API_KEY", "sk_test")
    with patch("stack0.cli.setup_logging"), patch("stack0.cli.load_dotenv"):
        yield


class TestParseVar:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("topic=AI", ("topic", "AI")),
            ("count=3", ("count", 3)),
            ("flags=[1, 2]", ("flags", [1, 2])),
            ("enabled=true", ("enabled", True)),
            ("query=a=b", ("query", "a=b")),
            ("empty=", ("empty", "")),
        ],
    )
    def test_values(self, text, expected):
        assert _parse_var(text) == expected

    @pytest.mark.parametrize("text", ["no-equals", "=value"])
    def test_malformed(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_var(text)


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_global_options(self):
        args = build_parser().parse_args(["--timeout", "30", "--poll-interval", "0.5", "-v", "get-run", "run_1"])
        assert args.timeout == 30.0
        assert args.poll_interval == 0.5
        assert args.verbose is True
        assert args.run_id == "run_1"

    def test_repeatable_vars(self):
        args = build_parser().parse_args(["run-workflow", "draft", "--var", "a=1", "--var", "b=x"])
        assert args.variables == [("a", 1), ("b", "x")]

    def test_invalid_choice(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["screenshot", "https://a.test", "--format", "gif"])


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_screenshot_waits_by_default(self, fake_client):
        args = build_parser().parse_args(["--timeout", "20", "screenshot", "https://a.test", "--full-page"])

        result = await run_command(fake_client, args)

        assert result["status"] == "completed"
        fake_client.screenshots.capture_and_wait.assert_awaited_once_with(
            {"url": "https://a.test", "format": None, "full_page": True, "device_type": None},
            poll_interval=None,
            timeout=20.0,
        )

    @pytest.mark.asyncio
    async def test_screenshot_no_wait(self, fake_client):
        args = build_parser().parse_args(["screenshot", "https://a.test", "--no-wait"])

        await run_command(fake_client, args)

        fake_client.screenshots.capture.assert_awaited_once()
        fake_client.screenshots.capture_and_wait.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_extract(self, fake_client):
        args = build_parser().parse_args(["extract", "https://a.test", "--mode", "markdown"])

        await run_command(fake_client, args)

        fake_client.extraction.extract_and_wait.assert_awaited_once_with(
            {"url": "https://a.test", "mode": "markdown"}, poll_interval=None, timeout=None
        )

    @pytest.mark.asyncio
    async def test_run_workflow_variables(self, fake_client):
        args = build_parser().parse_args(["run-workflow", "draft", "--var", "topic=AI", "--no-wait"])

        await run_command(fake_client, args)

        fake_client.workflows.run.assert_awaited_once_with(
            {"workflow_slug": "draft", "variables": {"topic": "AI"}}
        )

    @pytest.mark.asyncio
    async def test_run_workflow_without_variables(self, fake_client):
        args = build_parser().parse_args(["run-workflow", "draft"])

        await run_command(fake_client, args)

        request = fake_client.workflows.run_and_wait.await_args[0][0]
        assert request == {"workflow_slug": "draft", "variables": None}

    @pytest.mark.asyncio
    async def test_get_run(self, fake_client):
        args = build_parser().parse_args(["get-run", "run_1"])

        assert await run_command(fake_client, args) == {"id": "run_1", "status": "running"}


class TestMain:
    def test_prints_json_result(self, cli_env, capsys):
        result = {"id": "run_1", "completedAt": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)}
        with patch("stack0.cli.run_command", AsyncMock(return_value=result)):
            exit_code = main(["get-run", "run_1"])

        assert exit_code == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["id"] == "run_1"
        assert output["completedAt"].startswith("2024-01-15T10:30:00")

    def test_api_error_exit_code(self, cli_env, capsys):
        error = NotFoundError("Run not found", status_code=404)
        with patch("stack0.cli.run_command", AsyncMock(side_effect=error)):
            exit_code = main(["get-run", "run_missing"])

        assert exit_code == EXIT_API_ERROR
        assert "Run not found" in capsys.readouterr().err

    def test_invalid_request_exit_code(self, cli_env, capsys):
        with patch("stack0.cli.run_command", AsyncMock(side_effect=ValueError("bad url"))):
            exit_code = main(["screenshot", "x"])

        assert exit_code == EXIT_USAGE
        assert "Invalid request: bad url" in capsys.readouterr().err

    def test_missing_api_key(self, cli_env, monkeypatch, capsys):
        monkeypatch.delenv("STACK0_API_KEY")

        exit_code = main(["get-run", "run_1"])

        assert exit_code == EXIT_USAGE
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_config_file(self, cli_env, tmp_path, capsys):
        exit_code = main(["--config", str(tmp_path / "absent.yaml"), "get-run", "run_1"])

        assert exit_code == EXIT_USAGE
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_polling_setting_is_config_error(self, cli_env, tmp_path, capsys):
        (tmp_path / "stack0.yaml").write_text(
            "stack0:\n  polling:\n    workflows: {interval_seconds: '${POLL_INTERVAL:-soon}'}\n"
        )

        exit_code = main(["get-run", "run_1"])

        assert exit_code == EXIT_USAGE
        assert "interval_seconds must be a number" in capsys.readouterr().err

    def test_base_url_override(self, cli_env):
        with patch("stack0.cli.run_command", AsyncMock(return_value={})) as mock_run:
            main(["--base-url", "http://localhost:3000", "get-run", "run_1"])

        client = mock_run.await_args[0][0]
        assert client.workflows.transport.base_url == "http://localhost:3000"

    def test_verbose_enables_debug_logging(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STACK0_API_KEY", "sk_test")
        with patch("stack0.cli.setup_logging") as mock_setup, patch("stack0.cli.load_dotenv"), patch(
            "stack0.cli.run_command", AsyncMock(return_value={})
        ):
            main(["-v", "--json-logs", "get-run", "run_1"])

        mock_setup.assert_called_once_with(level=10, json_format=True)
