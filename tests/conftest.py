"""Shared test fixtures for the orch-cli test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import FakeApi


@pytest.fixture(autouse=True)
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a throwaway config file and a fixed token."""
    path = tmp_path / "orch-cli" / "orch-cli.yaml"
    monkeypatch.setenv("ORCH_CLI_CONFIG", str(path))
    monkeypatch.setenv("MT_GW_TOKEN", "test-token")
    monkeypatch.delenv("ORCH_API_ENDPOINT", raising=False)
    monkeypatch.delenv("ORCH_PROJECT", raising=False)
    return path


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()
