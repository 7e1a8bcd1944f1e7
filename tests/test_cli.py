from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from config.settings import get_fixture_settings
from qr_fixtures.cli import app
from tests.conftest import TEST_KEY

runner = CliRunner()


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv("FIXTURES_ENCRYPTION_KEY", TEST_KEY)
    monkeypatch.setenv("FIXTURES_INITIAL_UNIQUE_CODE", "500")
    monkeypatch.setenv("FIXTURES_LOG_LEVEL", "WARNING")
    get_fixture_settings.cache_clear()
    yield
    get_fixture_settings.cache_clear()


def _records(output: str) -> list[dict]:
    records = []
    for line in output.splitlines():
        if not line.startswith("{"):
            continue
        data = json.loads(line)
        if "scan_payload" in data:
            records.append(data)
    return records


def test_generate_json(cipher):
    result = runner.invoke(app, ["generate", "--json", "AUTO", "7"])

    assert result.exit_code == 0, result.output
    records = _records(result.output)
    assert [r["device_id"] for r in records] == ["DUMMY-BIN-001", "DUMMY-BIN-007"]
    assert [r["unique_code"] for r in records] == [500, 501]
    assert json.loads(cipher.decode(records[1]["scan_payload"]))["uniqueCode"] == 501


def test_generate_defaults_to_one_auto_device():
    result = runner.invoke(app, ["generate", "--json"])
    assert result.exit_code == 0, result.output
    assert [r["device_id"] for r in _records(result.output)] == ["DUMMY-BIN-001"]


def test_generate_with_refresh_then_decode():
    result = runner.invoke(app, ["generate", "--json", "--refresh", "2", "AUTO"])
    record = _records(result.output)[0]
    assert record["unique_code"] == 502

    decoded = runner.invoke(app, ["decode", record["scan_payload"]])
    assert decoded.exit_code == 0, decoded.output
    assert '"uniqueCode":502' in decoded.output


def test_generate_writes_png_files(tmp_path):
    result = runner.invoke(app, ["generate", "--out", str(tmp_path), "AUTO", "lobby"])

    assert result.exit_code == 0, result.output
    for name in (
        "DUMMY-BIN-001-register.png",
        "DUMMY-BIN-001-scan.png",
        "DUMMY-BIN-LOBBY-register.png",
        "DUMMY-BIN-LOBBY-scan.png",
        "invalid.png",
    ):
        assert (tmp_path / name).read_bytes().startswith(b"\x89PNG")


def test_generate_rejects_out_of_range_id():
    result = runner.invoke(app, ["generate", "1000"])
    assert result.exit_code == 2


def test_missing_key_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("FIXTURES_ENCRYPTION_KEY")
    get_fixture_settings.cache_clear()
    result = runner.invoke(app, ["generate"])
    assert result.exit_code == 2


def test_decode_rejects_garbage():
    result = runner.invoke(app, ["decode", "not-a-payload"])
    assert result.exit_code == 1


def test_generate_keeps_files_for_ids_that_sanitise_alike(tmp_path):
    result = runner.invoke(app, ["generate", "--out", str(tmp_path), "a/b", "a_b"])

    assert result.exit_code == 0, result.output
    first = (tmp_path / "DUMMY-BIN-A_B-scan.png").read_bytes()
    second = (tmp_path / "DUMMY-BIN-A_B-2-scan.png").read_bytes()
    assert first.startswith(b"\x89PNG")
    assert second.startswith(b"\x89PNG")
    assert (tmp_path / "DUMMY-BIN-A_B-register.png").read_bytes() != (
        tmp_path / "DUMMY-BIN-A_B-2-register.png"
    ).read_bytes()
    assert len(list(tmp_path.glob("*.png"))) == 5
