from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from sgacrawl.cli import app
from sgacrawl.paths import default_config_path, log_path

VALID_YAML = """\
filter:
  year: 2021
  level: GRADO
  period: segundo cuat.
request-delay:
  minimum_ms: 100
  rand_ms: 0
concurrent:
  threads: 1
  classBufferMax: 10
login:
  user: alice
  password: ""
plans: []
scrape:
  classes: true
  careerPlans: true
beautify:
  prefix: ""
  indent: "\\\\t"
log:
  toFile: false
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / ".sgacrawl.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_validate_ok_reports_repairs(tmp_path: Path) -> None:
    path = _write(tmp_path, VALID_YAML)

    result = CliRunner().invoke(app, ["validate", "--config", str(path)])

    assert result.exit_code == 0
    assert "OK" in result.output
    assert f"Using config file: {path}" in result.output
    assert "minimum_ms too low" in result.output


def test_validate_rejects_bad_period(tmp_path: Path) -> None:
    path = _write(tmp_path, VALID_YAML.replace("segundo cuat.", "bogus"))

    result = CliRunner().invoke(app, ["validate", "--config", str(path)])

    assert result.exit_code == 1
    assert "[ERR] bad filter.period in config. got bogus" in result.output


def test_validate_rejects_empty_file(tmp_path: Path) -> None:
    path = _write(tmp_path, "")

    result = CliRunner().invoke(app, ["validate", "--config", str(path)])

    assert result.exit_code == 1
    assert "no keys found" in result.output


def test_environment_overrides_file(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path, VALID_YAML)
    monkeypatch.setenv("SGACRAWL_FILTER_YEAR", "1990")

    result = CliRunner().invoke(app, ["validate", "--config", str(path)])

    assert result.exit_code == 1
    assert "1990" in result.output


def test_show_config_prints_normalized_json(tmp_path: Path) -> None:
    path = _write(tmp_path, VALID_YAML)

    result = CliRunner().invoke(app, ["show-config", "--config", str(path)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout[result.stdout.index("{"):])
    assert payload["filter"]["level"] == "Grado"
    assert payload["filter"]["period"] == "Semester2"
    assert payload["request-delay"]["minimum_ms"] == 1000
    assert payload["concurrent"]["threads"] == 0
    assert payload["login"]["user"] == ""
    assert payload["plans"] == ["none"]
    assert payload["scrape"]["careerPlans"] is False
    assert payload["beautify"]["indent"] == "\t"
    assert payload["minify"] is True


def test_log_to_file_writes_log(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SGACRAWL_ROOT", str(tmp_path))
    path = _write(tmp_path, VALID_YAML.replace("toFile: false", "toFile: true"))

    result = CliRunner().invoke(app, ["validate", "--config", str(path)])

    assert result.exit_code == 0
    assert log_path().exists()
    assert "finished processing config file" in log_path().read_text(encoding="utf-8")


def test_init_writes_valid_example(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("SGACRAWL_ROOT", str(tmp_path))
    runner = CliRunner()

    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0
    assert default_config_path().exists()

    again = runner.invoke(app, ["init"])
    assert "already exists" in again.output

    checked = runner.invoke(app, ["validate"])
    assert checked.exit_code == 0
    assert "OK" in checked.output


def test_example_prints_yaml() -> None:
    result = CliRunner().invoke(app, ["example"])

    assert result.exit_code == 0
    assert "classBufferMax: 100" in result.output
    assert "request-delay:" in result.output


def test_missing_config_file_is_reported(tmp_path: Path) -> None:
    missing = tmp_path / "typo.yaml"

    result = CliRunner().invoke(app, ["validate", "--config", str(missing)])

    assert result.exit_code == 1
    assert f"Config file {missing} not found" in result.output
    assert "no keys found" in result.output
