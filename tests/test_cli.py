"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from git_delve.cli import build_parser, main, open_session
from git_delve.core.model import CommitPath
from git_delve.errors import GitDelveError
from tests.harness import GitRepo, requires_git

pytestmark = pytest.mark.usefixtures("fresh_logging")


def test_parser_defaults():
    args = build_parser().parse_args(["src/app.py"])
    assert args.path == Path("src/app.py")
    assert args.revision is None
    assert args.git_command is None
    assert args.ignore_whitespace is None
    assert args.log_level is None


def test_parser_options():
    args = build_parser().parse_args(
        ["-r", "v1.0", "--git", "/usr/bin/git", "-w", "--log-level", "debug", "a.py"]
    )
    assert args.revision == "v1.0"
    assert args.git_command == "/usr/bin/git"
    assert args.ignore_whitespace is True
    assert args.log_level == "debug"


def test_parser_requires_path():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_missing_file_is_rejected(tmp_path):
    args = build_parser().parse_args([str(tmp_path / "nope.py")])
    with pytest.raises(GitDelveError, match="no such file"):
        open_session(args)


def test_main_returns_error_code_for_missing_file(tmp_path, fresh_logging):
    assert main([str(tmp_path / "nope.py")]) == 1
    assert fresh_logging.handlers == []


@requires_git
def test_open_session_blames_working_tree(tmp_path):
    repo = GitRepo(tmp_path / "repo")
    first = repo.commit({"lib/util.py": "one\ntwo\n"}, "add util", author="Ada")
    args = build_parser().parse_args([str(repo.root / "lib" / "util.py")])

    engine = open_session(args)

    assert engine.top == CommitPath(None, "lib/util.py")
    assert {h.commit for h in engine.model.hunks} == {first}
    assert engine.help_text


@requires_git
def test_open_session_at_revision(tmp_path):
    repo = GitRepo(tmp_path / "repo")
    first = repo.commit({"a.txt": "old\n"}, "v1")
    repo.commit({"a.txt": "new\n"}, "v2")
    args = build_parser().parse_args(["-r", first, str(repo.root / "a.txt")])

    engine = open_session(args)

    assert engine.top == CommitPath(first, "a.txt")
    assert [row.text for row in engine.model.rows] == ["old"]


@requires_git
def test_main_returns_error_code_outside_repository(tmp_path):
    stray = tmp_path / "loose.txt"
    stray.write_text("x\n", encoding="utf-8")
    assert main([str(stray)]) == 1
