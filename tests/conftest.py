from __future__ import annotations

from pathlib import Path

import pytest


def _find_repo_root(start: Path) -> Path:
    marker = "pyproject.toml"
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / marker).exists():
            return p
    raise RuntimeError(f"Could not find repo root from: {start}")


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """The absolute path to the repo root (finds by walking up to `pyproject.toml`)."""
    # walking starts from the callers location (`tests/conftest.py`)
    return _find_repo_root(Path(__file__))


@pytest.fixture()
def write_csv(tmp_path: Path):
    """Write `text` to a CSV under `tmp_path` and return its path."""
    def _write(text: str, name: str = "contacts.csv") -> Path:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write
