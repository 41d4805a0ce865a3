from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    """A project root holding release.json, with a nested src/pkg directory."""

    root = tmp_path / "project"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "release.json").write_text(
        json.dumps({"name": "demo", "version": "1.0.0"}, indent=2) + "\n",
        encoding="utf-8",
    )
    return root
