"""
Pytest configuration and shared fixtures for Figs tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from figs.env import TypedStore
from figs.logging import SilentLogger, get_global_logger, set_global_logger


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def store() -> TypedStore:
    """Provide a TypedStore over a plain dict instead of os.environ."""
    return TypedStore(native={})


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Restore the silent global logger after each test."""
    previous = get_global_logger()
    set_global_logger(SilentLogger())
    yield
    set_global_logger(previous)


@pytest.fixture(autouse=True)
def isolated_defaults(tmp_test_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from an empty directory with no Figs variables set."""
    monkeypatch.chdir(tmp_test_dir)
    monkeypatch.delenv("FIGS_FIGFILE", raising=False)
    monkeypatch.delenv("FIGS_STAGE", raising=False)


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """Provide a configuration document with two stage blocks."""
    return {
        "database_host": "localhost",
        "log_level": "info",
        "workers": 2,
        "test": {"database_host": "test-db"},
        "production": {"log_level": "warn", "workers": 8},
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files from data.

    Usage:
        yaml_path = create_yaml_file("application.yml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def write_config(tmp_test_dir: Path):
    """
    Factory fixture for writing raw configuration text.

    Usage:
        path = write_config("application.yml", "foo: bar\\n")
    """

    def _write(filename: str, text: str) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
