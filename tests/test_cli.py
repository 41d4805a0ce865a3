from __future__ import annotations

import json
from pathlib import Path

import pytest

from release_channel.runtime.cli import main


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_channels_lists_builtins(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["channels"]) == 0
    out = capsys.readouterr().out.split()
    assert "npm" in out and "release" in out


def test_show(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--cwd", str(project / "src" / "pkg"), "show"]) == 0
    assert json.loads(capsys.readouterr().out) == {"release": "1.0.0"}


def test_set_updates_manifest(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--cwd", str(project), "set", "1.2.0"]) == 0
    assert json.loads(capsys.readouterr().out) == {"release": "success"}
    assert _read(project / "release.json")["version"] == "1.2.0"

    assert main(["--cwd", str(project), "set", "1.2.0"]) == 0
    assert json.loads(capsys.readouterr().out) == {"release": "unchanged"}


def test_set_multiple_channels(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "package.json").write_text(json.dumps({"name": "demo", "version": "1.0.0"}), encoding="utf-8")

    rc = main(["--cwd", str(project), "--channel", "release", "--channel", "npm", "set", "2.0.0"])

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {"release": "success", "npm": "success"}
    assert _read(project / "package.json")["version"] == "2.0.0"


def test_check_reports_conflicts(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "package.json").write_text(json.dumps({"name": "demo", "private": True}), encoding="utf-8")

    rc = main(["--cwd", str(project), "--channel", "npm", "check", "2.0.0"])

    assert rc == 1
    assert json.loads(capsys.readouterr().out) == {"npm": "Conflict reported"}


def test_check_without_conflicts(project: Path) -> None:
    assert main(["--cwd", str(project), "check", "2.0.0"]) == 0


def test_set_exits_on_conflict(project: Path) -> None:
    (project / "package.json").write_text(json.dumps({"name": "demo", "private": True}), encoding="utf-8")

    with pytest.raises(SystemExit) as ei:
        main(["--cwd", str(project), "--channel", "npm", "set", "2.0.0"])

    assert ei.value.code == -1
    assert "version" not in _read(project / "package.json")


def test_no_project_root(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--cwd", str(tmp_path), "show"]) == 2
    assert "No release.json found" in capsys.readouterr().err


def test_unknown_channel(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--cwd", str(project), "--channel", "pypi", "show"]) == 2
    assert "pypi" in capsys.readouterr().err


def test_config_sets_marker_and_channels(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "version.json").write_text('{"version": "3.0.0"}', encoding="utf-8")
    cfg = tmp_path / "release.yaml"
    cfg.write_text("root_marker: version.json\nchannels: [release]\n", encoding="utf-8")

    assert main(["--config", str(cfg), "--cwd", str(tmp_path), "show"]) == 0
    assert json.loads(capsys.readouterr().out) == {"release": "3.0.0"}


def test_config_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(tmp_path / "missing.yaml"), "show"]) == 2
    assert "ConfigError" in capsys.readouterr().err


def test_usage_error_returns_argparse_code() -> None:
    assert main(["set"]) == 2


def test_set_checks_every_channel_before_writing(project: Path) -> None:
    (project / "package.json").write_text(json.dumps({"name": "demo", "private": True}), encoding="utf-8")

    with pytest.raises(SystemExit) as ei:
        main(["--cwd", str(project), "--channel", "release", "--channel", "npm", "set", "9.9.9"])

    assert ei.value.code == -1
    assert _read(project / "release.json")["version"] == "1.0.0"
