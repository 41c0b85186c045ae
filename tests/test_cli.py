import json
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from sachetfeed import cli
from sachetfeed.settings import Settings, get_settings


def test_run_succeeds_and_logs_each_step(
    tmp_path: Path, json_transport, success_payload
) -> None:
    settings = Settings(data_dir=tmp_path / "missing" / "data")

    code = cli.run(settings, transport=json_transport(success_payload))

    assert code == 0
    collection = json.loads(settings.cache_path.read_text(encoding="utf-8"))
    assert collection["metadata"]["count"] == 2
    log = settings.log_path.read_text(encoding="utf-8")
    assert "Fetching data from https://sachet.ndma.gov.in" in log
    assert "Received 2 alerts" in log
    assert "Data successfully cached to" in log
    assert "Completed all operations successfully" in log
    assert all(line.startswith("[") for line in log.splitlines())


def test_run_returns_error_code_and_keeps_previous_cache(
    tmp_path: Path, json_transport, capsys: pytest.CaptureFixture[str]
) -> None:
    settings = Settings(data_dir=tmp_path)
    settings.cache_path.write_text("previous", encoding="utf-8")
    settings.log_path.write_text("old run\n", encoding="utf-8")

    code = cli.run(
        settings,
        transport=json_transport({"responseMessage": "Failure", "alerts": []}),
    )

    assert code == 1
    assert settings.cache_path.read_text(encoding="utf-8") == "previous"
    log = settings.log_path.read_text(encoding="utf-8")
    assert "old run" not in log
    assert "Error in main execution" in log
    assert "EnvelopeError" in log
    assert "Error in main execution" in capsys.readouterr().err


def test_run_reports_network_failure(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    settings = Settings(data_dir=tmp_path)
    code = cli.run(settings, transport=httpx.MockTransport(handler))

    assert code == 1
    assert not settings.cache_path.exists()
    assert "FetchError" in settings.log_path.read_text(encoding="utf-8")


def test_main_passes_overrides_and_exit_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict[str, Settings] = {}

    def fake_run(settings: Settings, level: int) -> int:
        captured["settings"] = settings
        return 0

    monkeypatch.setattr(cli, "run", fake_run)
    result = CliRunner().invoke(
        cli.main,
        ["--latitude", "15.5", "--radius", "25", "--data-dir", str(tmp_path)],
    )

    assert result.exit_code == 0
    settings = captured["settings"]
    assert settings.data_dir == tmp_path
    assert "lat=15.5" in settings.alert_url
    assert "radius=25" in settings.alert_url


def test_main_exits_one_on_invalid_coordinates() -> None:
    result = CliRunner().invoke(cli.main, ["--latitude", "120"])
    assert result.exit_code == 1
    assert "latitude" in result.output


def test_main_exits_one_on_invalid_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SACHET_LATITUDE", "not-a-number")
    get_settings.cache_clear()
    try:
        result = CliRunner().invoke(cli.main, [])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output
