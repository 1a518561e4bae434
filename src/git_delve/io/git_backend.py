"""Git collaborator: the only code that talks to a repository.

The navigation engine depends on the GitCollaborator protocol, one synchronous
call per operation. GitCli satisfies it by shelling out to the git executable
at the repository root. Every failure surfaces as CollaboratorError.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol

from git_delve.core.model import UNCOMMITTED
from git_delve.errors import CollaboratorError, NoParentError
import git_delve.settings

logger = logging.getLogger(__name__)


class GitCollaborator(Protocol):
    """Synchronous repository capability injected into the navigation engine."""

    def blame(self, path: str, revision: str | None) -> str:
        """Raw `--porcelain` blame text for `path` at `revision` (None = working tree)."""
        ...

    def parent_of(self, commit: str) -> str:
        """First parent of `commit`. Raises NoParentError for a root commit."""
        ...

    def show_commit(self, commit: str) -> str:
        """Metadata and first-parent diff of `commit`, possibly ANSI-colored."""
        ...

    def line_history(self, path: str, line_number: int, revision: str | None) -> str:
        """Log of every change to one line, possibly ANSI-colored."""
        ...


class GitCli:
    """GitCollaborator backed by the git command line."""

    def __init__(
        self,
        repo_root: Path,
        *,
        git_command: str | None = None,
        ignore_whitespace: bool | None = None,
        timeout: float | None = None,
    ):
        self.repo_root = Path(repo_root)
        self.git_command = git_command or git_delve.settings.load_git_command()
        self.ignore_whitespace = (
            git_delve.settings.load_ignore_whitespace()
            if ignore_whitespace is None
            else ignore_whitespace
        )
        self.timeout = timeout or git_delve.settings.load_timeout()

    # ─── Process plumbing ──────────────────────────────────────────────

    def _run(self, *args: str, cwd: Path | None = None) -> subprocess.CompletedProcess:
        cmd = [self.git_command, *args]
        logger.debug("running %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                cwd=cwd or self.repo_root,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise CollaboratorError(f"git executable not found: {self.git_command}", cmd) from e
        except subprocess.TimeoutExpired as e:
            raise CollaboratorError(f"git timed out after {self.timeout:g}s", cmd) from e

    def _git(self, *args: str) -> str:
        result = self._run(*args)
        if result.returncode != 0:
            raise CollaboratorError(
                f"git {args[0]} failed (exit {result.returncode})",
                [self.git_command, *args],
                result.stderr,
            )
        return result.stdout

    # ─── Discovery ─────────────────────────────────────────────────────

    @classmethod
    def discover(cls, file_path: Path, **kwargs) -> tuple[GitCli, str]:
        """Locate the repository containing `file_path`.

        Returns the collaborator and the path canonicalized relative to the
        repository root (POSIX separators, as git expects).
        """
        resolved = Path(file_path).resolve()
        locator = cls(resolved.parent, **kwargs)
        root = Path(locator._git("rev-parse", "--show-toplevel").strip()).resolve()
        try:
            rel_path = resolved.relative_to(root)
        except ValueError as e:
            raise CollaboratorError(f"{file_path} is outside repository {root}") from e
        return cls(root, **kwargs), rel_path.as_posix()

    # ─── GitCollaborator ───────────────────────────────────────────────

    def blame(self, path: str, revision: str | None) -> str:
        args = ["blame", "--porcelain"]
        if self.ignore_whitespace:
            args.append("-w")
        if revision:
            args.append(revision)
        args.extend(["--", path])
        return self._git(*args)

    def parent_of(self, commit: str) -> str:
        if commit == UNCOMMITTED:
            return self._git("rev-parse", "--verify", "HEAD").strip()
        result = self._run("rev-parse", "--verify", "--quiet", f"{commit}^")
        parent = result.stdout.strip()
        if result.returncode != 0 or not parent:
            raise NoParentError(commit)
        return parent

    def show_commit(self, commit: str) -> str:
        return self._git(
            "show", "--color=always", "--format=fuller", "--stat", "--patch", commit,
        )

    def line_history(self, path: str, line_number: int, revision: str | None) -> str:
        args = ["log", "--color=always", "-L", f"{line_number},{line_number}:{path}"]
        if revision:
            args.append(revision)
        return self._git(*args)
