"""CLI entry point for git-delve."""

import argparse
import logging
import sys
from pathlib import Path

import git_delve.io.logging_setup
from git_delve import __version__
from git_delve.core.model import CommitPath
from git_delve.errors import GitDelveError
from git_delve.io.git_backend import GitCli
from git_delve.tui import input_modes
from git_delve.tui.app import GitDelveApp
from git_delve.tui.navigation import NavigationEngine

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-delve",
        description="Interactive per-line git blame explorer",
    )
    parser.add_argument("path", type=Path, help="File to blame")
    parser.add_argument(
        "-r",
        "--revision",
        type=str,
        default=None,
        help="Revision to start blaming at (default: working tree)",
    )
    parser.add_argument(
        "--git",
        dest="git_command",
        type=str,
        default=None,
        help="git executable (default: settings git_command, else 'git')",
    )
    parser.add_argument(
        "-w",
        "--ignore-whitespace",
        action="store_true",
        default=None,
        help="Ignore whitespace changes when attributing lines",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: INFO). Env: GIT_DELVE_LOG_LEVEL",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def open_session(args: argparse.Namespace) -> NavigationEngine:
    """Discover the repository and perform the initial blame. Failures propagate."""
    if not args.path.exists():
        raise GitDelveError(f"no such file: {args.path}")
    git, rel_path = GitCli.discover(
        args.path,
        git_command=args.git_command,
        ignore_whitespace=args.ignore_whitespace,
    )
    origin = CommitPath(args.revision, rel_path)
    logger.info("blaming %s in %s", origin.describe(), git.repo_root)
    return NavigationEngine.open(git, origin, help_text=input_modes.render_help())


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    runtime = git_delve.io.logging_setup.configure(args.log_level)
    logger.debug("logging to %s", runtime.file_path)
    try:
        return _run(args)
    finally:
        git_delve.io.logging_setup.reset()


def _run(args: argparse.Namespace) -> int:
    try:
        engine = open_session(args)
    except GitDelveError as e:
        logger.error("%s", e)
        return 1

    app = GitDelveApp(engine)
    git_delve.io.logging_setup.set_stream_enabled(False)
    try:
        app.run()
    finally:
        git_delve.io.logging_setup.set_stream_enabled(True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
