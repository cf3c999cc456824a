"""Pytest configuration and fixtures for fsio tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from fsio.settings import Settings, apply_settings


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default settings, unaffected by the environment."""
    monkeypatch.delenv("FSIO_CONFIG", raising=False)
    monkeypatch.delenv("FSIO_SHELL_FALLBACK", raising=False)
    apply_settings(Settings())
    yield
    apply_settings(None)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small folder tree with nested and empty folders."""
    root = tmp_path / "tree"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "b.log").write_text("beta", encoding="utf-8")
    (root / "sub" / "c.txt").write_text("gamma", encoding="utf-8")
    (root / "sub" / "deeper" / "d.png").write_bytes(b"\x89PNG")
    return root
