"""Exception taxonomy for git-delve.

ParseError is fatal to a single parse call. CollaboratorError covers every
failed request to git (blame, show, history, parent resolution) and is always
recoverable inside a session: the navigation engine turns it into a popup.
"""

from __future__ import annotations

_REMAINDER_PREVIEW = 80


class GitDelveError(Exception):
    """Base class for all git-delve errors."""


class ParseError(GitDelveError):
    """Blame porcelain text did not match the expected grammar."""

    def __init__(self, message: str, remainder: str = ""):
        self.message = message
        self.remainder = remainder
        super().__init__(message)

    def __str__(self) -> str:
        if not self.remainder:
            return self.message
        preview = self.remainder[:_REMAINDER_PREVIEW]
        if len(self.remainder) > _REMAINDER_PREVIEW:
            preview += "..."
        return f"{self.message}: {preview!r}"


class CollaboratorError(GitDelveError):
    """A git invocation failed or produced no usable output."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        self.message = message
        self.command = list(command or [])
        self.stderr = stderr
        super().__init__(message)

    def __str__(self) -> str:
        detail = self.stderr.strip()
        if detail:
            return f"{self.message}\n{detail}"
        return self.message


class NoParentError(CollaboratorError):
    """The commit is a root commit; there is nothing older to blame."""

    def __init__(self, commit: str):
        self.commit = commit
        super().__init__(f"commit {commit[:8]} has no parent")
