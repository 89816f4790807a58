from pathlib import Path

from sgacrawl.paths import default_config_path, find_config, log_path


def test_find_config_prefers_explicit_then_local_then_home(monkeypatch, tmp_path: Path) -> None:
    work = tmp_path / "work"
    home = tmp_path / "home"
    work.mkdir()
    home.mkdir()
    monkeypatch.setenv("SGACRAWL_ROOT", str(work))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))

    explicit = tmp_path / "other.yaml"
    assert find_config(explicit) == explicit
    assert find_config() == default_config_path()

    (home / ".sgacrawl.yaml").write_text("minify: true\n", encoding="utf-8")
    assert find_config() == home / ".sgacrawl.yaml"

    (work / ".sgacrawl.yaml").write_text("minify: true\n", encoding="utf-8")
    assert find_config() == work.resolve() / ".sgacrawl.yaml"


def test_log_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SGACRAWL_ROOT", str(tmp_path))
    assert log_path() == tmp_path.resolve() / "sgacrawl.log"
    assert log_path(tmp_path / "x") == tmp_path / "x" / "sgacrawl.log"
