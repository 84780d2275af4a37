"""
Pytest tests for the compact_columns command line (cli.py).
"""

import json
import logging

import pytest

from compact_columns.cli import _cli, load_history_file
from compact_columns.column_types import ConfigurationError

NOW_MS = 1_700_000_000_000


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    for key in ("COMPACT_COLUMNS_CONFIG", "COMPACT_COLUMNS_PRESET", "COMPACT_COLUMNS_HIDE_DAYS", "COMPACT_COLUMNS_LOCALE"):
        monkeypatch.delenv(key, raising=False)


def test_results_text_output(capsys):
    rc = _cli(["--results", "SSFFUFUS", "--preset", "last_stable_and_unstable", "--timezone", "UTC", "--now-ms", str(NOW_MS)])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Stable")
    assert "#8 -> lastStableBuild" in lines[0]
    assert "[latest, bold]" in lines[0]
    assert lines[1].startswith("Unstable")
    assert "#4 -> 4" in lines[1]


def test_results_json_output(capsys):
    rc = _cli(["--results", "FS", "--json", "--colorblind", "--timezone", "UTC", "--now-ms", str(NOW_MS)])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["sort_key"] == str(NOW_MS)
    builds = payload["builds"]
    assert [b["status"] for b in builds] == ["Failed", "Stable"]
    assert builds[0]["underline_style"] == "1px solid"
    assert builds[0]["time_ago"] == "0 sec"
    assert builds[1]["time_ago"] == "1 min"
    assert builds[0]["tooltip"][0] == "Build #2 (latest)"


def test_history_file_with_tooltips(tmp_path, capsys):
    path = tmp_path / "builds.yaml"
    path.write_text(
        "builds:\n"
        "  - {number: 7, result: FAILURE, timestamp: 1699999940000, duration: 65000}\n"
        "  - {number: 6, result: SUCCESS, timestamp: 1699999880000}\n"
    )
    rc = _cli(["--history", str(path), "--tooltips", "--only-last", "--timezone", "UTC", "--now-ms", str(NOW_MS)])
    assert rc == 0
    out = capsys.readouterr().out
    assert "#7 -> lastFailedBuild" in out
    assert "#6" not in out
    assert "    Lasted 1 min 5 sec" in out


def test_no_builds(caplog, capsys):
    caplog.set_level(logging.INFO)
    rc = _cli(["--results", "RR", "--now-ms", str(NOW_MS)])
    assert rc == 0
    assert capsys.readouterr().out == ""
    assert "(no builds)" in caplog.text


def test_job_requires_url(caplog):
    assert _cli(["--job", "team/app"]) == 2
    assert "--jenkins-url" in caplog.text


@pytest.mark.parametrize(
    "argv",
    [
        ["--results", "SXF"],
        ["--results", "SF", "--hide-days", "-1"],
        ["--results", "SF", "--locale", "xx_ZZ"],
        ["--results", "SF", "--timezone", "Nowhere/Special"],
    ],
)
def test_bad_input_returns_2(argv, caplog):
    assert _cli(argv) == 2
    assert "ERROR:" in caplog.text


def test_load_history_file_errors(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_history_file(tmp_path / "missing.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("builds: 3\n")
    with pytest.raises(ConfigurationError, match="list of builds"):
        load_history_file(bad)
