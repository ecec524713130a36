"""End-to-end tests for the command-line front end."""

import json

import pytest
import tzlocal
from loguru import logger

from geochron.cli import main


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("GEOCHRON_STATE_FILE", str(tmp_path / "clocks.json"))
    monkeypatch.setenv("GEOCHRON_OUTPUT_DIR", str(tmp_path / "maps"))
    monkeypatch.setenv("GEOCHRON_LOG_LEVEL", "ERROR")
    monkeypatch.setenv("GEOCHRON_LANG", "en")
    monkeypatch.setattr(tzlocal, "get_localzone_name", lambda: "UTC")
    yield tmp_path
    # main() installs a stderr sink bound to the captured stream
    logger.remove()


def test_list_starts_with_host_clock(capsys):
    assert main(["list"]) == 0
    assert "#1   UTC" in capsys.readouterr().out


def test_add_set_remove(cli_env, capsys):
    assert main(["add", "Asia/Tokyo"]) == 0
    assert main(["set", "2", "Europe/Paris"]) == 0
    assert main(["remove", "1"]) == 0
    out = capsys.readouterr().out
    assert "Added clock #2 (Asia/Tokyo)" in out
    assert "Clock #2 now shows Europe/Paris" in out
    assert "Removed clock #1" in out

    state = json.loads((cli_env / "clocks.json").read_text(encoding="utf-8"))
    assert state == {"nextId": 3, "clocks": [{"id": 2, "timezone": "Europe/Paris"}]}


def test_unknown_timezone_exit_code(capsys):
    assert main(["add", "Mars/Olympus_Mons"]) == 2
    assert "Unknown timezone: Mars/Olympus_Mons" in capsys.readouterr().err


def test_show_at_instant(capsys):
    assert main(["show", "--at", "2024-01-01T00:00:00Z"]) == 0
    out = capsys.readouterr().out
    assert "00:00:00  Monday, 1 January 2024" in out
    assert "Subsolar point:" in out
    assert "Tokyo" in out and "09:00" in out


def test_map_svg(cli_env, capsys):
    out_file = cli_env / "map.svg"
    assert main(["map", "--format", "svg", "--out", str(out_file), "--at", "2024-06-21T12:00Z"]) == 0
    assert out_file.read_text(encoding="utf-8").startswith("<svg")
    assert f"Saved: {out_file}" in capsys.readouterr().out


def test_map_default_path(cli_env):
    assert main(["map", "--format", "svg", "--at", "2024-06-21T12:00:00+00:00"]) == 0
    assert (cli_env / "maps" / "geochron__2024_06_21_12_00.svg").exists()


def test_bad_instant_is_rejected():
    with pytest.raises(SystemExit):
        main(["show", "--at", "yesterday"])
