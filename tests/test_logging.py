import io
import json
import sys
from pathlib import Path
from typing import cast

import pytest

from ardunno_cli_gen.acquire import ResourceHandle
from ardunno_cli_gen.config import AppConfig
from ardunno_cli_gen.locator import parse_locator
from ardunno_cli_gen.logging import configure_logging, get_logger


def _configure(monkeypatch: pytest.MonkeyPatch, app_env: str, log_level: str) -> io.StringIO:
    monkeypatch.setenv("APP_ENV", app_env)
    monkeypatch.setenv("LOG_LEVEL", log_level)
    captured = io.StringIO()
    monkeypatch.setattr(sys, "stderr", captured)
    configure_logging(AppConfig())
    return captured


def _entries(captured: io.StringIO) -> list[dict[str, str]]:
    lines = [line for line in captured.getvalue().splitlines() if line]
    return [cast(dict[str, str], json.loads(line)) for line in lines]


def _failing_dispose(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(*_args: object, **_kwargs: object) -> None:
        raise PermissionError("denied")

    monkeypatch.setattr("ardunno_cli_gen.acquire.shutil.rmtree", _fail)
    ResourceHandle(tmp_path, tmp_path / "rpc").dispose()


class TestLogging:
    """Test logging output format behavior."""

    def test_outputs_json_in_production(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """In production environment, a failed cleanup is one NDJSON line on stderr."""
        captured = _configure(monkeypatch, "production", "info")

        _failing_dispose(tmp_path, monkeypatch)

        [entry] = _entries(captured)
        assert entry["level"] == "warning"
        assert entry["event"] == "Failed to remove temporary folder"
        assert entry["logger"] == "ardunno_cli_gen.acquire"
        assert entry["path"] == str(tmp_path)
        assert entry["error"] == "denied"
        assert "time" in entry

    def test_outputs_readable_in_development(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """In development environment, logs are human-readable."""
        captured = _configure(monkeypatch, "development", "info")

        _failing_dispose(tmp_path, monkeypatch)

        output = captured.getvalue()
        with pytest.raises(json.JSONDecodeError):
            json.loads(output.strip())
        assert "Failed to remove temporary folder" in output

    def test_module_loggers_follow_later_configuration(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Loggers created on import pick up the configuration applied afterwards."""
        captured = _configure(monkeypatch, "production", "debug")

        parse_locator("arduino/arduino-cli#main")

        events = {entry["event"]: entry for entry in _entries(captured)}
        assert events["match GitHub"]["logger"] == "ardunno_cli_gen.locator"
        assert events["match GitHub"]["commit"] == "main"

    def test_keeps_stdout_clean(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Log lines never end up on stdout, the CLI owns it."""
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        configure_logging(AppConfig())

        parse_locator("0.30.0")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "parsed semver is >=0.29.0" in captured.err

    def test_respects_log_level(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Debug events are filtered at the default warn level."""
        captured = _configure(monkeypatch, "production", "warn")

        parse_locator("arduino/arduino-cli")
        _failing_dispose(tmp_path, monkeypatch)

        [entry] = _entries(captured)
        assert entry["event"] == "Failed to remove temporary folder"

    def test_logger_without_name_has_no_logger_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_logger without name doesn't add logger key."""
        captured = _configure(monkeypatch, "production", "info")

        get_logger().info("Generated", out="src-gen")

        [entry] = _entries(captured)
        assert "logger" not in entry
        assert entry["out"] == "src-gen"
