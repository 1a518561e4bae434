"""Tests for logging bootstrap: handler wiring, level parsing, stream muting."""

import logging

import pytest

import git_delve.io.logging_setup as logging_setup

pytestmark = pytest.mark.usefixtures("fresh_logging")


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param(None, ("INFO", logging.INFO), id="default"),
        pytest.param("debug", ("DEBUG", logging.DEBUG), id="lowercase"),
        pytest.param(" WARNING ", ("WARNING", logging.WARNING), id="padded"),
        pytest.param("chatty", ("INFO", logging.INFO), id="unknown"),
        pytest.param("BASIC_FORMAT", ("INFO", logging.INFO), id="non_level_attribute"),
    ],
)
def test_parse_level(raw, expected):
    assert logging_setup.parse_level(raw) == expected


def test_configure_wires_stream_and_file_handlers(fresh_logging, tmp_path):
    runtime = logging_setup.configure()
    assert runtime.level_name == "INFO"
    assert runtime.file_path.startswith(str(tmp_path / "logs"))
    assert fresh_logging.propagate is False
    assert fresh_logging.handlers == [runtime.stream_handler, runtime.file_handler]


def test_configure_is_idempotent(fresh_logging):
    first = logging_setup.configure("debug")
    second = logging_setup.configure("error")
    assert second is first
    assert len(fresh_logging.handlers) == 2


def test_env_level_and_explicit_file(tmp_path, monkeypatch):
    log_file = tmp_path / "nested" / "delve.log"
    monkeypatch.setenv("GIT_DELVE_LOG_LEVEL", "warning")
    monkeypatch.setenv("GIT_DELVE_LOG_FILE", str(log_file))
    runtime = logging_setup.configure()
    assert runtime.level == logging.WARNING
    assert runtime.file_path == str(log_file)

    logging.getLogger("git_delve.test").warning("written to file")
    runtime.file_handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_explicit_level_beats_env(monkeypatch):
    monkeypatch.setenv("GIT_DELVE_LOG_LEVEL", "error")
    assert logging_setup.configure("debug").level == logging.DEBUG


def test_set_stream_enabled_mutes_only_stderr():
    runtime = logging_setup.configure("info")

    logging_setup.set_stream_enabled(False)
    assert runtime.stream_handler.level > logging.CRITICAL
    assert runtime.file_handler.level == runtime.level

    logging_setup.set_stream_enabled(True)
    assert runtime.stream_handler.level == runtime.level


def test_set_stream_enabled_before_configure_is_noop(fresh_logging):
    logging_setup.set_stream_enabled(False)
    assert fresh_logging.handlers == []


def test_reset_detaches_handlers(fresh_logging):
    runtime = logging_setup.configure()
    logging_setup.reset()
    assert fresh_logging.handlers == []
    assert fresh_logging.propagate is True
    assert logging_setup.configure() is not runtime
