"""Test configuration for pytest."""

from __future__ import annotations

from pathlib import Path

import pytest

from helpers import FakeNpm


@pytest.fixture
def fake_npm() -> FakeNpm:
    return FakeNpm()


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    wd = tmp_path / "work"
    wd.mkdir()
    monkeypatch.chdir(wd)
    return wd
