"""Pytest configuration and shared fixtures for git-delve tests."""

import logging
from pathlib import Path

import pytest

import git_delve.io.logging_setup as logging_setup

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep settings and log files out of the developer's home directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("GIT_DELVE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("GIT_DELVE_LOG_FILE", raising=False)
    monkeypatch.delenv("GIT_DELVE_LOG_LEVEL", raising=False)


@pytest.fixture
def blame_output() -> str:
    """Porcelain blame of a small doc file: two commits, four hunks."""
    return (FIXTURES / "test_blame_output").read_text(encoding="utf-8")


@pytest.fixture
def fresh_logging():
    """Configure logging from scratch and detach its handlers afterwards."""
    logging_setup.reset()
    yield logging.getLogger(logging_setup.LOGGER_NAME)
    logging_setup.reset()
