from __future__ import annotations

import json
from pathlib import Path

import pytest

from release_channel.channel import DEFAULT_CONFLICT_MESSAGE, NO_VERSION, SetVersionStatus
from release_channel.channels import NpmChannel, ReleaseJsonChannel


def _write(path: Path, data: object) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def test_release_channel_reads_manifest(project: Path) -> None:
    ch = ReleaseJsonChannel(project / "src" / "pkg")
    assert ch.get_name() == "release"
    assert ch.get_version() == "1.0.0"


def test_release_channel_missing_version_uses_default(project: Path) -> None:
    _write(project / "release.json", {"name": "demo"})
    assert ReleaseJsonChannel(project).get_version(NO_VERSION) == NO_VERSION


def test_release_channel_sets_version(project: Path) -> None:
    ch = ReleaseJsonChannel(project)
    results: list[object] = []

    assert ch.set_version("1.1.0", results.append) is SetVersionStatus.SUCCESS
    assert results == ["1.1.0"]

    data = json.loads((project / "release.json").read_text(encoding="utf-8"))
    assert data == {"name": "demo", "version": "1.1.0"}
    assert ch.set_version("1.1.0") is SetVersionStatus.UNCHANGED


def test_release_channel_rejects_non_object_manifest(project: Path) -> None:
    _write(project / "release.json", ["not", "an", "object"])
    ch = ReleaseJsonChannel(project)
    assert ch.set_version("2.0.0") is SetVersionStatus.FAILED
    assert "JSON object" in str(ch.last_error)


def test_npm_channel_versions(project: Path) -> None:
    _write(project / "package.json", {"name": "demo", "version": "0.3.0"})
    ch = NpmChannel(project)

    assert ch.get_version() == "0.3.0"
    assert ch.set_version("0.4.0") is SetVersionStatus.SUCCESS
    assert json.loads((project / "package.json").read_text(encoding="utf-8"))["version"] == "0.4.0"


def test_npm_channel_without_package_json(project: Path) -> None:
    ch = NpmChannel(project)
    assert ch.get_version("none") == "none"
    # Nothing to write into.
    assert ch.set_version("0.4.0") is SetVersionStatus.FAILED

    results: list[object] = []
    ch.conflict_check("0.4.0", results.append)
    assert results and "package.json not found" in str(results[0])


@pytest.mark.parametrize(
    ("package", "expected"),
    [
        ({"name": "demo", "version": "0.1.0"}, None),
        ({"name": "demo", "private": True}, DEFAULT_CONFLICT_MESSAGE),
        ({"version": "0.1.0"}, "package.json has no name"),
    ],
)
def test_npm_conflict_check(project: Path, package: dict, expected: str | None) -> None:
    _write(project / "package.json", package)
    results: list[object] = []

    handle = NpmChannel(project).conflict_check("0.2.0", results.append)

    assert results == [expected]
    assert handle.done is True
